"""initial_schema

Create the schema for Huddle:
- Companies (tenants, posting and retention policies, gamification rules)
- Users and groups (membership arrays)
- Posts (text, media and poll posts; per-type reaction counters)
- Comments (two levels: comment and reply)
- Reactions (one per member and target)
- Attachments
- Point events (append-only points ledger, idempotent by event key)

Revision ID: 3c41f0d2a9b7
Revises:
Create Date: 2026-10-19 09:12:44.508113

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3c41f0d2a9b7"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id_column() -> sa.Column:
    return sa.Column(
        "id",
        sa.UUID(),
        server_default=sa.text("uuid_generate_v4()"),
        nullable=False,
    )


def _created_at_column() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.TIMESTAMP(timezone=True),
        nullable=False,
        server_default=sa.text("NOW()"),
    )


def _company_column() -> sa.Column:
    return sa.Column("company_id", sa.UUID(), nullable=False)


def _company_fk() -> sa.ForeignKeyConstraint:
    return sa.ForeignKeyConstraint(["company_id"], ["companies.id"], ondelete="CASCADE")


def upgrade() -> None:
    """Upgrade schema."""
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    # ========================================================================
    # COMPANIES table (tenants)
    # ========================================================================
    op.create_table(
        "companies",
        _id_column(),
        sa.Column("slug", sa.String(63), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column(
            "policies",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column(
            "gamification",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        _created_at_column(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug", name="uq_company_slug"),
    )

    # ========================================================================
    # USERS table
    # ========================================================================
    op.create_table(
        "users",
        _id_column(),
        _company_column(),
        sa.Column("full_name", sa.String(200), nullable=False),
        sa.Column("title", sa.String(200), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("role", sa.String(20), nullable=False, server_default="member"),
        _created_at_column(),
        _company_fk(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_users_company_id", "users", ["company_id"])

    # ========================================================================
    # GROUPS table
    # ========================================================================
    op.create_table(
        "groups",
        _id_column(),
        _company_column(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column(
            "owner_ids",
            postgresql.ARRAY(sa.UUID()),
            nullable=False,
            server_default="{}",
        ),
        sa.Column(
            "moderator_ids",
            postgresql.ARRAY(sa.UUID()),
            nullable=False,
            server_default="{}",
        ),
        sa.Column(
            "member_ids",
            postgresql.ARRAY(sa.UUID()),
            nullable=False,
            server_default="{}",
        ),
        _created_at_column(),
        _company_fk(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_groups_company_id", "groups", ["company_id"])
    op.create_index(
        "idx_groups_member_ids", "groups", ["member_ids"], postgresql_using="gin"
    )
    op.create_index(
        "idx_groups_owner_ids", "groups", ["owner_ids"], postgresql_using="gin"
    )
    op.create_index(
        "idx_groups_moderator_ids",
        "groups",
        ["moderator_ids"],
        postgresql_using="gin",
    )

    # ========================================================================
    # POSTS table
    # ========================================================================
    op.create_table(
        "posts",
        _id_column(),
        _company_column(),
        sa.Column("group_id", sa.UUID(), nullable=True),
        sa.Column("author_id", sa.UUID(), nullable=False),
        sa.Column("type", sa.String(20), nullable=False, server_default="text"),
        sa.Column("status", sa.String(20), nullable=False, server_default="published"),
        sa.Column("title", sa.String(300), nullable=True),
        sa.Column("rich_text", sa.Text(), nullable=False, server_default=""),
        sa.Column("is_pinned", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("poll", postgresql.JSONB(), nullable=True),
        sa.Column("comments_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "reactions_count_by_type",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("views_count", sa.Integer(), nullable=False, server_default="0"),
        _created_at_column(),
        sa.Column("published_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("deleted_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("deleted_by", sa.UUID(), nullable=True),
        _company_fk(),
        sa.ForeignKeyConstraint(["group_id"], ["groups.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["author_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("comments_count >= 0", name="comments_count_non_negative"),
    )
    op.execute(
        "CREATE INDEX idx_posts_feed ON posts "
        "(company_id, status, is_pinned DESC, created_at DESC)"
    )
    op.execute(
        "CREATE INDEX idx_posts_group_id ON posts (group_id, created_at DESC)"
    )
    op.create_index("idx_posts_author_id", "posts", ["author_id"])
    op.create_index("idx_posts_deleted_at", "posts", ["deleted_at"])
    # Full-text search over the post body
    op.execute(
        "CREATE INDEX idx_posts_rich_text_fts ON posts "
        "USING gin (to_tsvector('english', rich_text))"
    )

    # ========================================================================
    # COMMENTS table (two levels)
    # ========================================================================
    op.create_table(
        "comments",
        _id_column(),
        _company_column(),
        sa.Column("post_id", sa.UUID(), nullable=False),
        sa.Column("author_id", sa.UUID(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("parent_comment_id", sa.UUID(), nullable=True),
        sa.Column("level", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(20), nullable=False, server_default="visible"),
        sa.Column("replies_count", sa.Integer(), nullable=False, server_default="0"),
        _created_at_column(),
        sa.Column("deleted_at", sa.TIMESTAMP(timezone=True), nullable=True),
        _company_fk(),
        sa.ForeignKeyConstraint(["post_id"], ["posts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["author_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["parent_comment_id"], ["comments.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("level IN (0, 1)", name="comment_level_range"),
    )
    op.create_index("idx_comments_post_id", "comments", ["post_id", "created_at"])
    op.create_index("idx_comments_parent_id", "comments", ["parent_comment_id"])
    op.create_index(
        "idx_comments_deleted_at", "comments", ["company_id", "deleted_at"]
    )

    # ========================================================================
    # REACTIONS table
    # ========================================================================
    op.create_table(
        "reactions",
        _id_column(),
        _company_column(),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("target_type", sa.String(20), nullable=False),
        sa.Column("target_id", sa.UUID(), nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        _created_at_column(),
        _company_fk(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "user_id", "target_type", "target_id", name="unique_reaction"
        ),
    )
    op.create_index("idx_reactions_target", "reactions", ["target_type", "target_id"])

    # ========================================================================
    # ATTACHMENTS table
    # ========================================================================
    op.create_table(
        "attachments",
        _id_column(),
        _company_column(),
        sa.Column("target_type", sa.String(20), nullable=False, server_default="post"),
        sa.Column("target_id", sa.UUID(), nullable=False),
        sa.Column("storage_url", sa.Text(), nullable=False),
        _created_at_column(),
        _company_fk(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_attachments_target",
        "attachments",
        ["company_id", "target_type", "target_id", "created_at"],
    )

    # ========================================================================
    # POINT_EVENTS table (append-only ledger)
    # ========================================================================
    op.create_table(
        "point_events",
        _id_column(),
        _company_column(),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("actor_user_id", sa.UUID(), nullable=True),
        sa.Column("action", sa.String(40), nullable=False),
        sa.Column("points", sa.Integer(), nullable=False),
        sa.Column("event_key", sa.String(128), nullable=False),
        sa.Column("target_type", sa.String(20), nullable=False),
        sa.Column("target_id", sa.UUID(), nullable=False),
        sa.Column(
            "meta",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        _created_at_column(),
        _company_fk(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "company_id", "user_id", "event_key", name="uq_point_events_user_key"
        ),
        sa.UniqueConstraint("company_id", "event_key", name="uq_point_events_key"),
    )
    op.create_index(
        "idx_point_events_company_created",
        "point_events",
        ["company_id", "created_at"],
    )
    op.create_index("idx_point_events_user", "point_events", ["company_id", "user_id"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("point_events")
    op.drop_table("attachments")
    op.drop_table("reactions")
    op.drop_table("comments")
    op.drop_table("posts")
    op.drop_table("groups")
    op.drop_table("users")
    op.drop_table("companies")
