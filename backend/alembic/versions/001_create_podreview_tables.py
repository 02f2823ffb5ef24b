"""Create users, podcasts and reviews tables

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

Uniqueness lives in the schema:
    users.email                                  unique
    podcasts.name                                unique
    reviews (reviewer_id, podcast_id, episode_key) unique

reviews.podcast_id deliberately has no foreign key; deleting a podcast
leaves its reviews in place.
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("provider", sa.String(50), nullable=False, server_default=sa.text("'local'")),
        sa.Column("role", sa.String(50), nullable=False, server_default=sa.text("'user'")),
        sa.Column("interests", sa.JSON(), nullable=False),
        sa.Column("bookmarks", sa.JSON(), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "podcasts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False, comment="Globally unique podcast title"),
        sa.Column("link", sa.String(2048), nullable=True),
        sa.Column("release", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("producer", sa.String(255), nullable=True),
        sa.Column("cast", sa.JSON(), nullable=False),
        sa.Column("length", sa.Float(), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("episodes", sa.JSON(), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("image_url", sa.String(2048), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "reviews",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("podcast_id", sa.Uuid(), nullable=False),
        sa.Column("episode", sa.Integer(), nullable=True),
        sa.Column(
            "episode_key",
            sa.Integer(),
            nullable=False,
            server_default=sa.text("-1"),
            comment="episode, or -1 when the review covers the whole podcast",
        ),
        sa.Column("rating", sa.Float(), nullable=False),
        sa.Column("review", sa.Text(), nullable=False),
        sa.Column("spoilers", sa.Boolean(), nullable=False),
        sa.Column("reviewer_id", sa.Uuid(), nullable=False),
        sa.Column("reviewer_name", sa.String(255), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["reviewer_id"], ["users.id"]),
        sa.UniqueConstraint(
            "reviewer_id",
            "podcast_id",
            "episode_key",
            name="uq_reviews_reviewer_podcast_episode",
        ),
    )
    op.create_index("idx_reviews_podcast_id", "reviews", ["podcast_id"])
    op.create_index("idx_reviews_reviewer_id", "reviews", ["reviewer_id"])


def downgrade() -> None:
    """Drop all three tables. Destructive: every account and review is lost."""
    op.drop_index("idx_reviews_reviewer_id", table_name="reviews")
    op.drop_index("idx_reviews_podcast_id", table_name="reviews")
    op.drop_table("reviews")
    op.drop_table("podcasts")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
