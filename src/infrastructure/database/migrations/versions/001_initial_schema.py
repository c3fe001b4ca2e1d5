# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Initial schema.

This migration creates the tables of the sync API:
- unified_courses, oer_resources: content entities
- offline_activities: queue of client-recorded activities
- content_versions: append-only content version ledger
- content_engagements: per-day engagement buckets
- learning_outcomes: scored learning activities
- curriculum_progress: per-user progress through a curriculum subject

Revision ID: 001_initial_schema
Revises:
Create Date: 2025-06-02
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Create all tables."""

    # Content entities
    op.create_table(
        "unified_courses",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("original_id", sa.String(100), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("short_title", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("source", sa.String(20), nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("format", sa.String(50), nullable=False),
        sa.Column("language", sa.String(5), nullable=False),
        sa.Column("approved", sa.Boolean(), nullable=False),
        sa.Column("nerdc_topic_code", sa.String(50), nullable=True),
        sa.Column("curriculum_tags", sa.JSON(), nullable=False),
        sa.Column("subjects", sa.JSON(), nullable=False),
        sa.Column("download_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("course_metadata", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_unified_courses_title", "unified_courses", ["title"])
    op.create_index("ix_unified_courses_language", "unified_courses", ["language"])
    op.create_index("ix_unified_courses_nerdc_topic_code", "unified_courses", ["nerdc_topic_code"])

    op.create_table(
        "oer_resources",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("provider", sa.String(100), nullable=False),
        sa.Column("url", sa.String(1000), nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("language", sa.String(5), nullable=False),
        sa.Column("license", sa.String(100), nullable=False),
        sa.Column("subjects", sa.JSON(), nullable=False),
        sa.Column("curriculum_tags", sa.JSON(), nullable=False),
        sa.Column("nerdc_topic_code", sa.String(50), nullable=True),
        sa.Column("download_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("resource_metadata", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_oer_resources_title", "oer_resources", ["title"])
    op.create_index("ix_oer_resources_provider", "oer_resources", ["provider"])
    op.create_index("ix_oer_resources_nerdc_topic_code", "oer_resources", ["nerdc_topic_code"])

    # Offline sync
    op.create_table(
        "offline_activities",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("activity_type", sa.String(30), nullable=False),
        sa.Column("content_id", sa.String(36), nullable=False),
        sa.Column("content_type", sa.String(20), nullable=False),
        sa.Column("details", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("synced_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("sync_status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("version_hash", sa.String(64), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_offline_activities_user_id", "offline_activities", ["user_id"])
    op.create_index(
        "ix_offline_activities_user_status",
        "offline_activities",
        ["user_id", "sync_status"],
    )
    op.create_index(
        "ix_offline_activities_content_type",
        "offline_activities",
        ["content_id", "activity_type"],
    )

    op.create_table(
        "content_versions",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("content_id", sa.String(36), nullable=False),
        sa.Column("content_type", sa.String(20), nullable=False),
        sa.Column("version_hash", sa.String(64), nullable=False),
        sa.Column("version_number", sa.Integer(), nullable=False),
        sa.Column("changes", sa.JSON(), nullable=False),
        sa.Column("created_by", sa.String(36), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_content_versions_content_id", "content_versions", ["content_id"])
    op.create_index(
        "ix_content_versions_content_number",
        "content_versions",
        ["content_id", "content_type", "version_number"],
    )

    # Analytics
    op.create_table(
        "content_engagements",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("content_id", sa.String(36), nullable=False),
        sa.Column("content_type", sa.String(20), nullable=False),
        sa.Column("day", sa.Date(), nullable=False),
        sa.Column("views", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("downloads", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("completions", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("avg_rating", sa.Float(), nullable=False, server_default="0"),
        sa.Column("rating_count", sa.Integer(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "content_id",
            "content_type",
            "day",
            name="uq_content_engagements_bucket",
        ),
    )
    op.create_index("ix_content_engagements_content_id", "content_engagements", ["content_id"])

    op.create_table(
        "learning_outcomes",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("course_id", sa.String(36), nullable=False),
        sa.Column("activity_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("activity_type", sa.String(20), nullable=False),
        sa.Column("score", sa.Float(), nullable=False),
        sa.Column("max_score", sa.Float(), nullable=False),
        sa.Column("percentage", sa.Float(), nullable=False),
        sa.Column("competency_level", sa.String(20), nullable=False),
        sa.Column("topic", sa.String(255), nullable=False, server_default="Unknown"),
        sa.Column("curriculum_tag", sa.String(20), nullable=True),
        sa.Column("nerdc_competency_code", sa.String(50), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_learning_outcomes_course_id", "learning_outcomes", ["course_id"])
    op.create_index(
        "ix_learning_outcomes_user_date",
        "learning_outcomes",
        ["user_id", "activity_date"],
    )

    op.create_table(
        "curriculum_progress",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("curriculum_code", sa.String(50), nullable=False),
        sa.Column("subject", sa.String(100), nullable=False),
        sa.Column("topics_completed", sa.JSON(), nullable=False),
        sa.Column("topics_total", sa.Integer(), nullable=False, server_default="20"),
        sa.Column("progress_percentage", sa.Float(), nullable=False, server_default="0"),
        sa.Column("competency_scores", sa.JSON(), nullable=False),
        sa.Column("last_activity_date", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_curriculum_progress_lookup",
        "curriculum_progress",
        ["user_id", "curriculum_code", "subject"],
    )


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index("ix_curriculum_progress_lookup", table_name="curriculum_progress")
    op.drop_table("curriculum_progress")

    op.drop_index("ix_learning_outcomes_user_date", table_name="learning_outcomes")
    op.drop_index("ix_learning_outcomes_course_id", table_name="learning_outcomes")
    op.drop_table("learning_outcomes")

    op.drop_index("ix_content_engagements_content_id", table_name="content_engagements")
    op.drop_table("content_engagements")

    op.drop_index("ix_content_versions_content_number", table_name="content_versions")
    op.drop_index("ix_content_versions_content_id", table_name="content_versions")
    op.drop_table("content_versions")

    op.drop_index("ix_offline_activities_content_type", table_name="offline_activities")
    op.drop_index("ix_offline_activities_user_status", table_name="offline_activities")
    op.drop_index("ix_offline_activities_user_id", table_name="offline_activities")
    op.drop_table("offline_activities")

    op.drop_index("ix_oer_resources_nerdc_topic_code", table_name="oer_resources")
    op.drop_index("ix_oer_resources_provider", table_name="oer_resources")
    op.drop_index("ix_oer_resources_title", table_name="oer_resources")
    op.drop_table("oer_resources")

    op.drop_index("ix_unified_courses_nerdc_topic_code", table_name="unified_courses")
    op.drop_index("ix_unified_courses_language", table_name="unified_courses")
    op.drop_index("ix_unified_courses_title", table_name="unified_courses")
    op.drop_table("unified_courses")
