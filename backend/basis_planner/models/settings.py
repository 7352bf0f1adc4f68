"""Key/value settings and maintenance Sunday models."""

from sqlalchemy import CheckConstraint, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from basis_planner.core.database import Base

MAINTENANCE_SUNDAY_IDS = (1, 2, 3, 4)


class Setting(Base):
    __tablename__ = "settings"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str | None] = mapped_column(Text)


class MaintenanceSunday(Base):
    __tablename__ = "maintenance_sundays"
    __table_args__ = (
        CheckConstraint("id BETWEEN 1 AND 4", name="ck_maintenance_sunday_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=False)
    date: Mapped[str] = mapped_column(String(10), default="")
    label: Mapped[str] = mapped_column(String(255), default="")
