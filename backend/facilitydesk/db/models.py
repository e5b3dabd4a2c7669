"""SQLAlchemy ORM models for FacilityDesk.

Properties and their units, users, maintenance cases, work-order tasks,
recurring maintenance plans, and the optional case comments table.
Relations are plain foreign keys; no entity owns another.
"""

import uuid
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import (
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from .engine import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex


# ── Properties & units ────────────────────────────────────────────────


class Property(Base):
    __tablename__ = "properties"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(256), nullable=False, index=True)
    address: Mapped[str] = mapped_column(String(512), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


class Unit(Base):
    __tablename__ = "units"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    property_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("properties.id", ondelete="CASCADE"), nullable=False
    )
    unit_number: Mapped[str] = mapped_column(String(32), nullable=False)
    type: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)  # lägenhet, lokal, ...
    size: Mapped[Optional[float]] = mapped_column(Float, nullable=True)  # m²
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    __table_args__ = (
        Index("ix_units_property", "property_id"),
    )


# ── Users ──────────────────────────────────────────────────────────────


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    role: Mapped[str] = mapped_column(String(16), default="skötare")  # admin | förvaltare | skötare
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    email: Mapped[str] = mapped_column(String(256), unique=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


# ── Cases ──────────────────────────────────────────────────────────────


class Case(Base):
    """A reported facility problem tied to a property and optionally a unit."""
    __tablename__ = "cases"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    property_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("properties.id"), nullable=False
    )
    unit_id: Mapped[Optional[str]] = mapped_column(
        String(32), ForeignKey("units.id", ondelete="SET NULL"), nullable=True
    )
    title: Mapped[str] = mapped_column(String(512), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[str] = mapped_column(String(16), default="Övrigt")
    priority: Mapped[str] = mapped_column(String(16), default="normal")
    status: Mapped[str] = mapped_column(String(24), default="reported")
    assigned_to: Mapped[Optional[str]] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_by: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )

    __table_args__ = (
        Index("ix_cases_property", "property_id"),
        Index("ix_cases_status", "status"),
    )


# ── Tasks (work orders) ───────────────────────────────────────────────


class Task(Base):
    __tablename__ = "tasks"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    case_id: Mapped[Optional[str]] = mapped_column(
        String(32), ForeignKey("cases.id", ondelete="SET NULL"), nullable=True
    )
    description: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(24), default="pending")  # pending | in_progress | completed
    due_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    assigned_to: Mapped[Optional[str]] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )

    __table_args__ = (
        Index("ix_tasks_case", "case_id"),
    )


# ── Maintenance plans ─────────────────────────────────────────────────


class MaintenancePlan(Base):
    """Recurring scheduled maintenance for a property."""
    __tablename__ = "maintenance_plans"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    property_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("properties.id"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(512), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    frequency: Mapped[str] = mapped_column(String(16), default="annual")
    next_due_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    estimated_duration_hours: Mapped[float] = mapped_column(Float, default=2.0)
    assigned_to: Mapped[Optional[str]] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    priority: Mapped[str] = mapped_column(String(16), default="normal")  # låg | normal | hög
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )

    __table_args__ = (
        Index("ix_maintenance_plans_property", "property_id"),
        Index("ix_maintenance_plans_next_due", "next_due_date"),
    )


# ── Case comments (optional table) ────────────────────────────────────


class CaseComment(Base):
    __tablename__ = "case_comments"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    case_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("cases.id", ondelete="CASCADE"), nullable=False
    )
    author_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    __table_args__ = (
        Index("ix_case_comments_case", "case_id"),
    )


# Optional tables the service must run without.
OPTIONAL_TABLES: tuple[str, ...] = ("case_comments",)
