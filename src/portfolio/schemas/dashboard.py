"""Dashboard count schemas."""

from pydantic import BaseModel


class PublicOverview(BaseModel):
    member_count: int
    total_projects: int


class DashboardStats(PublicOverview):
    pending_projects: int
