"""tickets, rescuers, messages

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "tickets",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("ticket_number", sa.String(length=64), nullable=False),
        sa.Column("service_type", sa.String(length=60), nullable=True),
        sa.Column("user_name", sa.String(length=200), nullable=True),
        sa.Column("phone", sa.String(length=40), nullable=True),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("incident_details", sa.Text(), nullable=True),
        sa.Column("rescuer_id", sa.Integer(), nullable=True),
        sa.Column("rescuer_name", sa.String(length=200), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="ACTIVE"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_tickets_ticket_number", "tickets", ["ticket_number"])
    op.create_index("ix_tickets_rescuer_id", "tickets", ["rescuer_id"])
    op.create_index("ix_tickets_status", "tickets", ["status"])

    op.create_table(
        "rescuers",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("badge_id", sa.String(length=64), nullable=False),
        sa.Column("callsign", sa.String(length=60), nullable=True),
        sa.Column("phone", sa.String(length=40), nullable=True),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("profile_image_key", sa.String(length=512), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="available"),
        sa.Column("last_lat", sa.Float(), nullable=True),
        sa.Column("last_lon", sa.Float(), nullable=True),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_rescuers_badge_id", "rescuers", ["badge_id"], unique=True)
    op.create_index("ix_rescuers_status", "rescuers", ["status"])

    op.create_table(
        "messages",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("ticket_number", sa.String(length=64), nullable=False),
        sa.Column("sender", sa.String(length=120), nullable=False, server_default=""),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_messages_ticket_number", "messages", ["ticket_number"])


def downgrade():
    op.drop_index("ix_messages_ticket_number", table_name="messages")
    op.drop_table("messages")
    op.drop_index("ix_rescuers_status", table_name="rescuers")
    op.drop_index("ix_rescuers_badge_id", table_name="rescuers")
    op.drop_table("rescuers")
    op.drop_index("ix_tickets_status", table_name="tickets")
    op.drop_index("ix_tickets_rescuer_id", table_name="tickets")
    op.drop_index("ix_tickets_ticket_number", table_name="tickets")
    op.drop_table("tickets")
