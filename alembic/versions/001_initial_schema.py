"""Initial schema: users, chat sessions and messages.

Revision ID: 001
Revises:
Create Date: 2026-10-19

Changes:
- Create users table keyed by identity provider subject, with credit balance
- Create chat_sessions table for persona-scoped conversations
- Create messages table for the append-only message log
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ==========================================================================
    # USERS TABLE
    # ==========================================================================
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("external_id", sa.String(128), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("profession", sa.String(64), nullable=True),
        sa.Column("credits", sa.Integer(), nullable=False, server_default="1000"),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),

        # Timestamps
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_users_external_id", "users", ["external_id"], unique=True)

    # ==========================================================================
    # CHAT SESSIONS TABLE
    # ==========================================================================
    op.create_table(
        "chat_sessions",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("profession", sa.String(64), nullable=False),
        sa.Column("title", sa.String(255), nullable=False, server_default="Yeni Sohbet"),
        sa.Column("title_generated", sa.Boolean(), nullable=False, server_default=sa.false()),

        # Timestamps
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("idx_chat_sessions_user_id", "chat_sessions", ["user_id"])
    op.create_index("idx_chat_sessions_updated_at", "chat_sessions", ["updated_at"])

    # ==========================================================================
    # MESSAGES TABLE
    # ==========================================================================
    op.create_table(
        "messages",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("session_id", sa.Uuid(), sa.ForeignKey("chat_sessions.id", ondelete="CASCADE"), nullable=False),
        sa.Column("role", sa.String(16), nullable=False),  # 'user' or 'assistant'
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("credits_used", sa.Integer(), nullable=False, server_default="0"),

        # Timestamp
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("idx_messages_session_id_created_at", "messages", ["session_id", "created_at"])


def downgrade() -> None:
    op.drop_index("idx_messages_session_id_created_at", table_name="messages")
    op.drop_table("messages")

    op.drop_index("idx_chat_sessions_updated_at", table_name="chat_sessions")
    op.drop_index("idx_chat_sessions_user_id", table_name="chat_sessions")
    op.drop_table("chat_sessions")

    op.drop_index("ix_users_external_id", table_name="users")
    op.drop_table("users")
