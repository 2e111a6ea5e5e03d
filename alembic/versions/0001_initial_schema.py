"""initial schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-16 09:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "clients",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("place_id", sa.String(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("category", sa.Text()),
        sa.Column("address", sa.Text(), nullable=False),
        sa.Column("street", sa.Text()),
        sa.Column("city", sa.Text()),
        sa.Column("state", sa.Text()),
        sa.Column("postcode", sa.String(20)),
        sa.Column("country", sa.Text()),
        sa.Column("country_code", sa.String(5)),
        sa.Column("phone", sa.Text()),
        sa.Column("email", sa.Text()),
        sa.Column("website", sa.Text()),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("opening_hours", sa.Text()),
        sa.Column("facilities", sa.Text()),
        sa.Column("datasource", sa.Text()),
        sa.Column("created_at", sa.TIMESTAMP()),
        sa.Column("updated_at", sa.TIMESTAMP()),
    )
    op.create_index("ix_clients_place_id", "clients", ["place_id"], unique=True)
    op.create_index("ix_clients_city", "clients", ["city"])
    op.create_index("ix_clients_status", "clients", ["status"])
    op.create_index("ix_clients_created_at", "clients", ["created_at"])

    op.create_table(
        "notes",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("client_id", sa.String(36), sa.ForeignKey("clients.id", ondelete="CASCADE"), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_at", sa.TIMESTAMP()),
        sa.Column("updated_at", sa.TIMESTAMP()),
    )
    op.create_index("ix_notes_id", "notes", ["id"])
    op.create_index("ix_notes_client_id", "notes", ["client_id"])

    op.create_table(
        "email_templates",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("subject", sa.Text(), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("target_type", sa.String(), nullable=False),
        sa.Column("attachments", sa.JSON()),
        sa.Column("created_at", sa.TIMESTAMP()),
        sa.Column("updated_at", sa.TIMESTAMP()),
    )
    op.create_index("ix_email_templates_id", "email_templates", ["id"])
    op.create_index("ix_email_templates_target_type", "email_templates", ["target_type"])

    op.create_table(
        "email_history",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("client_id", sa.String(36), sa.ForeignKey("clients.id", ondelete="CASCADE"), nullable=False),
        sa.Column("recipient", sa.Text(), nullable=False),
        sa.Column("subject", sa.Text()),
        sa.Column("body", sa.Text()),
        sa.Column("method", sa.String(10)),
        sa.Column("status", sa.String(10)),
        sa.Column("failure_reason", sa.Text()),
        sa.Column("message_id", sa.String()),
        sa.Column("sent_at", sa.TIMESTAMP()),
    )
    op.create_index("ix_email_history_id", "email_history", ["id"])
    op.create_index("ix_email_history_client_id", "email_history", ["client_id"])

    op.create_table(
        "custom_target_types",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("color", sa.String(20)),
        sa.Column("created_at", sa.TIMESTAMP()),
    )
    op.create_index("ix_custom_target_types_id", "custom_target_types", ["id"])

    op.create_table(
        "automation_jobs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("job_type", sa.String()),
        sa.Column("status", sa.String()),
        sa.Column("started_at", sa.TIMESTAMP()),
        sa.Column("finished_at", sa.TIMESTAMP()),
        sa.Column("result_summary", sa.JSON()),
        sa.Column("error_message", sa.Text()),
        sa.Column("created_at", sa.TIMESTAMP()),
    )
    op.create_index("ix_automation_jobs_id", "automation_jobs", ["id"])


def downgrade() -> None:
    op.drop_table("automation_jobs")
    op.drop_table("custom_target_types")
    op.drop_table("email_history")
    op.drop_table("email_templates")
    op.drop_table("notes")
    op.drop_table("clients")
