"""SQLAlchemy table definitions for Huddle.

These table definitions are used with SQLAlchemy Core.
They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# COMPANIES TABLE (tenants)
# ============================================================================
companies_table = Table(
    "companies",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("slug", String(63), nullable=False, unique=True),
    Column("name", String(200), nullable=False),
    Column("is_active", Boolean, nullable=False, server_default="true"),
    Column("policies", JSONB, nullable=False, server_default="{}"),
    Column("gamification", JSONB, nullable=False, server_default="{}"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

# ============================================================================
# USERS TABLE
# ============================================================================
users_table = Table(
    "users",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column(
        "company_id",
        UUID,
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("full_name", String(200), nullable=False),
    Column("title", String(200), nullable=True),
    Column("email", String(255), nullable=True),
    Column("role", String(20), nullable=False, server_default="member"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index("idx_users_company_id", users_table.c.company_id)

# ============================================================================
# GROUPS TABLE
# ============================================================================
groups_table = Table(
    "groups",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column(
        "company_id",
        UUID,
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("name", String(200), nullable=False),
    Column("owner_ids", ARRAY(UUID), nullable=False, server_default="{}"),
    Column("moderator_ids", ARRAY(UUID), nullable=False, server_default="{}"),
    Column("member_ids", ARRAY(UUID), nullable=False, server_default="{}"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index("idx_groups_company_id", groups_table.c.company_id)
# GIN indexes for the membership arrays are created in the migration

# ============================================================================
# POSTS TABLE
# ============================================================================
posts_table = Table(
    "posts",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column(
        "company_id",
        UUID,
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("group_id", UUID, ForeignKey("groups.id", ondelete="SET NULL"), nullable=True),
    Column("author_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("type", String(20), nullable=False, server_default="text"),
    Column("status", String(20), nullable=False, server_default="published"),
    Column("title", String(300), nullable=True),
    Column("rich_text", Text, nullable=False, server_default=""),
    Column("is_pinned", Boolean, nullable=False, server_default="false"),
    Column("poll", JSONB, nullable=True),
    Column("comments_count", Integer, nullable=False, server_default="0"),
    Column("reactions_count_by_type", JSONB, nullable=False, server_default="{}"),
    Column("views_count", Integer, nullable=False, server_default="0"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column("published_at", TIMESTAMP(timezone=True), nullable=True),
    Column("deleted_at", TIMESTAMP(timezone=True), nullable=True),
    Column("deleted_by", UUID, nullable=True),
    CheckConstraint("comments_count >= 0", name="comments_count_non_negative"),
)

Index(
    "idx_posts_feed",
    posts_table.c.company_id,
    posts_table.c.status,
    posts_table.c.is_pinned.desc(),
    posts_table.c.created_at.desc(),
)
Index("idx_posts_group_id", posts_table.c.group_id, posts_table.c.created_at.desc())
Index("idx_posts_author_id", posts_table.c.author_id)
Index("idx_posts_deleted_at", posts_table.c.deleted_at)
Index(
    "idx_posts_rich_text_fts",
    func.to_tsvector("english", posts_table.c.rich_text),
    postgresql_using="gin",
)

# ============================================================================
# COMMENTS TABLE
# ============================================================================
comments_table = Table(
    "comments",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column(
        "company_id",
        UUID,
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("post_id", UUID, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False),
    Column("author_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("content", Text, nullable=False),
    Column(
        "parent_comment_id",
        UUID,
        ForeignKey("comments.id", ondelete="CASCADE"),
        nullable=True,
    ),
    Column("level", Integer, nullable=False, server_default="0"),
    Column("status", String(20), nullable=False, server_default="visible"),
    Column("replies_count", Integer, nullable=False, server_default="0"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column("deleted_at", TIMESTAMP(timezone=True), nullable=True),
    CheckConstraint("level IN (0, 1)", name="comment_level_range"),
)

Index("idx_comments_post_id", comments_table.c.post_id, comments_table.c.created_at)
Index("idx_comments_parent_id", comments_table.c.parent_comment_id)
Index("idx_comments_deleted_at", comments_table.c.company_id, comments_table.c.deleted_at)

# ============================================================================
# REACTIONS TABLE
# ============================================================================
reactions_table = Table(
    "reactions",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column(
        "company_id",
        UUID,
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("user_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("target_type", String(20), nullable=False),
    Column("target_id", UUID, nullable=False),
    Column("type", String(20), nullable=False),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint("user_id", "target_type", "target_id", name="unique_reaction"),
)

Index("idx_reactions_target", reactions_table.c.target_type, reactions_table.c.target_id)

# ============================================================================
# ATTACHMENTS TABLE
# ============================================================================
attachments_table = Table(
    "attachments",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column(
        "company_id",
        UUID,
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("target_type", String(20), nullable=False, server_default="post"),
    Column("target_id", UUID, nullable=False),
    Column("storage_url", Text, nullable=False),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index(
    "idx_attachments_target",
    attachments_table.c.company_id,
    attachments_table.c.target_type,
    attachments_table.c.target_id,
    attachments_table.c.created_at,
)

# ============================================================================
# POINT EVENTS TABLE (append-only ledger)
# ============================================================================
point_events_table = Table(
    "point_events",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column(
        "company_id",
        UUID,
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("user_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("actor_user_id", UUID, nullable=True),
    Column("action", String(40), nullable=False),
    Column("points", Integer, nullable=False),
    Column("event_key", String(128), nullable=False),
    Column("target_type", String(20), nullable=False),
    Column("target_id", UUID, nullable=False),
    Column("meta", JSONB, nullable=False, server_default="{}"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint(
        "company_id", "user_id", "event_key", name="uq_point_events_user_key"
    ),
    UniqueConstraint("company_id", "event_key", name="uq_point_events_key"),
)

Index(
    "idx_point_events_company_created",
    point_events_table.c.company_id,
    point_events_table.c.created_at,
)
Index(
    "idx_point_events_user",
    point_events_table.c.company_id,
    point_events_table.c.user_id,
)
