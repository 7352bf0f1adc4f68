"""Landscape hierarchy and activity type models."""

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from basis_planner.core.database import Base

SID_NOTES_MAX_LENGTH = 5000
DEFAULT_SUB_ACTIVITY_NAME = "Sub-Aktivität"


class ActivityType(Base):
    __tablename__ = "activity_types"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)  # stable slug, e.g. "kernel"
    label: Mapped[str] = mapped_column(String(255))
    color: Mapped[str] = mapped_column(String(20))  # hex, e.g. "#3b82f6"
    sort_order: Mapped[int] = mapped_column(default=0)


class Landscape(Base):
    __tablename__ = "landscapes"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    sort_order: Mapped[int] = mapped_column(default=0)


class Sid(Base):
    __tablename__ = "sids"

    id: Mapped[int] = mapped_column(primary_key=True)
    landscape_id: Mapped[int] = mapped_column(
        ForeignKey("landscapes.id", ondelete="CASCADE"), index=True
    )
    name: Mapped[str] = mapped_column(String(50), default="")
    is_prd: Mapped[bool] = mapped_column(default=False)
    notes: Mapped[str] = mapped_column(Text, default="")
    sort_order: Mapped[int] = mapped_column(default=0)


class Activity(Base):
    __tablename__ = "activities"

    id: Mapped[int] = mapped_column(primary_key=True)
    sid_id: Mapped[int] = mapped_column(ForeignKey("sids.id", ondelete="CASCADE"), index=True)
    type_id: Mapped[str] = mapped_column(ForeignKey("activity_types.id"), index=True)
    start_date: Mapped[str] = mapped_column(String(10))  # ISO date
    duration: Mapped[int] = mapped_column(default=1)  # workdays
    includes_weekend: Mapped[bool] = mapped_column(default=False)


class SubActivity(Base):
    __tablename__ = "sub_activities"

    id: Mapped[int] = mapped_column(primary_key=True)
    activity_id: Mapped[int] = mapped_column(
        ForeignKey("activities.id", ondelete="CASCADE"), index=True
    )
    name: Mapped[str] = mapped_column(String(255), default=DEFAULT_SUB_ACTIVITY_NAME)
    start_date: Mapped[str] = mapped_column(String(10))
    duration: Mapped[int] = mapped_column(default=1)
    includes_weekend: Mapped[bool] = mapped_column(default=False)
    sort_order: Mapped[int] = mapped_column(default=0)
