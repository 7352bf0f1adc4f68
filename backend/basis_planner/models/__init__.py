"""SQLAlchemy models."""

from basis_planner.models.planner import Activity, ActivityType, Landscape, Sid, SubActivity
from basis_planner.models.settings import MaintenanceSunday, Setting
from basis_planner.models.user import Session, User

__all__ = [
    "User",
    "Session",
    "ActivityType",
    "Landscape",
    "Sid",
    "Activity",
    "SubActivity",
    "Setting",
    "MaintenanceSunday",
]
