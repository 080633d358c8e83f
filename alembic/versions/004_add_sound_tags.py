"""Add tags and the sound/tag link table."""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "004_add_sound_tags"
down_revision = "003_add_playlists"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "tag",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False, unique=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        "sound_tag",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column(
            "sound_id",
            sa.String(),
            sa.ForeignKey("sound.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "tag_id",
            sa.String(),
            sa.ForeignKey("tag.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("sound_id", "tag_id", name="uq_sound_tag_sound_tag"),
    )
    op.create_index("ix_sound_tag_tag_id", "sound_tag", ["tag_id"])


def downgrade() -> None:
    op.drop_index("ix_sound_tag_tag_id", table_name="sound_tag")
    op.drop_table("sound_tag")
    op.drop_table("tag")
