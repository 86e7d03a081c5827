"""SQLAlchemy ORM models — maps to PostgreSQL tables."""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.adapters.persistence.database import Base


class ProfessionalProfileModel(Base):
    __tablename__ = "professional_profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    specialties: Mapped[list[str]] = mapped_column(ARRAY(String(100)), nullable=False, default=list)
    is_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_blocked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    reputation_score: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    credentials: Mapped[list[str]] = mapped_column(ARRAY(String(50)), nullable=False, default=list)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    photo_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    years_experience: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    slots: Mapped[list["AvailabilitySlotModel"]] = relationship(back_populates="professional")

    __table_args__ = (
        Index("idx_professionals_location", "latitude", "longitude"),
        Index("idx_professionals_available", "is_available", "is_blocked"),
    )


class AvailabilitySlotModel(Base):
    __tablename__ = "availability_slots"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    professional_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("professional_profiles.id"), nullable=False
    )
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="available")

    professional: Mapped["ProfessionalProfileModel"] = relationship(back_populates="slots")

    __table_args__ = (Index("idx_slots_professional_start", "professional_id", "start_time"),)


class UrgentPricingRuleModel(Base):
    __tablename__ = "urgent_pricing_rules"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    service_category: Mapped[str] = mapped_column(String(100), nullable=False)
    urgency_level: Mapped[str] = mapped_column(String(20), nullable=False)
    base_price: Mapped[float] = mapped_column(Float, nullable=False)
    urgency_multiplier: Mapped[float] = mapped_column(Float, nullable=False, default=1.0)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        UniqueConstraint("service_category", "urgency_level", name="uq_pricing_category_urgency"),
    )


class UrgentRequestModel(Base):
    __tablename__ = "urgent_requests"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    requester_id: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    urgency_level: Mapped[str] = mapped_column(String(20), nullable=False, default="high")
    service_category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    estimated_budget: Mapped[float | None] = mapped_column(Float, nullable=True)
    special_requirements: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    candidates: Mapped[list["UrgentCandidateModel"]] = relationship(back_populates="request")
    assignment: Mapped["UrgentAssignmentModel | None"] = relationship(
        back_populates="request", uselist=False
    )

    __table_args__ = (
        Index("idx_urgent_requests_status_created", "status", "created_at"),
        Index("idx_urgent_requests_requester", "requester_id"),
    )


class UrgentCandidateModel(Base):
    __tablename__ = "urgent_request_candidates"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    request_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("urgent_requests.id"), nullable=False
    )
    professional_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("professional_profiles.id"), nullable=False
    )
    distance_km: Mapped[float] = mapped_column(Float, nullable=False)
    estimated_arrival_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="available")
    proposed_price: Mapped[float | None] = mapped_column(Float, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    proposed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    responded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    request: Mapped["UrgentRequestModel"] = relationship(back_populates="candidates")

    __table_args__ = (
        UniqueConstraint("request_id", "professional_id", name="uq_candidate_request_professional"),
        Index("idx_candidates_status_proposed", "status", "proposed_at"),
        Index("idx_candidates_professional", "professional_id"),
    )


class UrgentAssignmentModel(Base):
    __tablename__ = "urgent_assignments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    request_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("urgent_requests.id"), unique=True, nullable=False
    )
    professional_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("professional_profiles.id"), nullable=False
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    agreed_price: Mapped[float | None] = mapped_column(Float, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completion_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    escrow_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    escrow_released_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    request: Mapped["UrgentRequestModel"] = relationship(back_populates="assignment")

    __table_args__ = (Index("idx_assignments_professional", "professional_id"),)
