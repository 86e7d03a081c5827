"""Initial schema — urgent dispatch tables.

Revision ID: 001
Revises: None
Create Date: 2026-10-17
"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ARRAY

from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Professional profiles (read model)
    op.create_table(
        "professional_profiles",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("latitude", sa.Float, nullable=True),
        sa.Column("longitude", sa.Float, nullable=True),
        sa.Column(
            "specialties", ARRAY(sa.String(100)), nullable=False, server_default="{}"
        ),
        sa.Column("is_available", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("is_blocked", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("reputation_score", sa.Float, nullable=False, server_default="0"),
        sa.Column(
            "credentials", ARRAY(sa.String(50)), nullable=False, server_default="{}"
        ),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("photo_url", sa.String(500), nullable=True),
        sa.Column("years_experience", sa.Integer, nullable=True),
        sa.Column("is_verified", sa.Boolean, nullable=False, server_default="false"),
    )
    op.create_index(
        "idx_professionals_location", "professional_profiles", ["latitude", "longitude"]
    )
    op.create_index(
        "idx_professionals_available", "professional_profiles", ["is_available", "is_blocked"]
    )

    # Availability slots
    op.create_table(
        "availability_slots",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "professional_id",
            sa.Integer,
            sa.ForeignKey("professional_profiles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="available"),
    )
    op.create_index(
        "idx_slots_professional_start", "availability_slots", ["professional_id", "start_time"]
    )

    # Pricing rules
    op.create_table(
        "urgent_pricing_rules",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("service_category", sa.String(100), nullable=False),
        sa.Column("urgency_level", sa.String(20), nullable=False),
        sa.Column("base_price", sa.Float, nullable=False),
        sa.Column("urgency_multiplier", sa.Float, nullable=False, server_default="1.0"),
        sa.Column("active", sa.Boolean, nullable=False, server_default="true"),
        sa.UniqueConstraint(
            "service_category", "urgency_level", name="uq_pricing_category_urgency"
        ),
    )

    # Urgent requests
    op.create_table(
        "urgent_requests",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("requester_id", sa.Integer, nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("latitude", sa.Float, nullable=False),
        sa.Column("longitude", sa.Float, nullable=False),
        sa.Column("urgency_level", sa.String(20), nullable=False, server_default="high"),
        sa.Column("service_category", sa.String(100), nullable=True),
        sa.Column("estimated_budget", sa.Float, nullable=True),
        sa.Column("special_requirements", sa.Text, nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("version", sa.Integer, nullable=False, server_default="0"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index(
        "idx_urgent_requests_status_created", "urgent_requests", ["status", "created_at"]
    )
    op.create_index("idx_urgent_requests_requester", "urgent_requests", ["requester_id"])

    # Candidates
    op.create_table(
        "urgent_request_candidates",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "request_id",
            sa.Integer,
            sa.ForeignKey("urgent_requests.id"),
            nullable=False,
        ),
        sa.Column(
            "professional_id",
            sa.Integer,
            sa.ForeignKey("professional_profiles.id"),
            nullable=False,
        ),
        sa.Column("distance_km", sa.Float, nullable=False),
        sa.Column("estimated_arrival_minutes", sa.Integer, nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="available"),
        sa.Column("proposed_price", sa.Float, nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column(
            "proposed_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("responded_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint(
            "request_id", "professional_id", name="uq_candidate_request_professional"
        ),
    )
    op.create_index(
        "idx_candidates_status_proposed", "urgent_request_candidates", ["status", "proposed_at"]
    )
    op.create_index(
        "idx_candidates_professional", "urgent_request_candidates", ["professional_id"]
    )

    # Assignments (at most one per request)
    op.create_table(
        "urgent_assignments",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "request_id",
            sa.Integer,
            sa.ForeignKey("urgent_requests.id"),
            unique=True,
            nullable=False,
        ),
        sa.Column(
            "professional_id",
            sa.Integer,
            sa.ForeignKey("professional_profiles.id"),
            nullable=False,
        ),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("agreed_price", sa.Float, nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column(
            "assigned_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completion_minutes", sa.Integer, nullable=True),
        sa.Column("escrow_id", sa.String(100), nullable=True),
        sa.Column("escrow_released_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("idx_assignments_professional", "urgent_assignments", ["professional_id"])


def downgrade() -> None:
    op.drop_table("urgent_assignments")
    op.drop_table("urgent_request_candidates")
    op.drop_table("urgent_requests")
    op.drop_table("urgent_pricing_rules")
    op.drop_table("availability_slots")
    op.drop_table("professional_profiles")
