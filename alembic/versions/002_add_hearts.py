"""Add song and sound hearts with one heart per user and target."""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "002_add_hearts"
down_revision = "001_create_songshare_schema"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "heart",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column(
            "user_id",
            sa.String(),
            sa.ForeignKey("user.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "song_id",
            sa.String(),
            sa.ForeignKey("song.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("user_id", "song_id", name="uq_heart_user_song"),
    )
    op.create_index("ix_heart_song_id", "heart", ["song_id"])

    op.create_table(
        "sound_heart",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column(
            "user_id",
            sa.String(),
            sa.ForeignKey("user.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "sound_id",
            sa.String(),
            sa.ForeignKey("sound.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("user_id", "sound_id", name="uq_sound_heart_user_sound"),
    )
    op.create_index("ix_sound_heart_sound_id", "sound_heart", ["sound_id"])


def downgrade() -> None:
    op.drop_index("ix_sound_heart_sound_id", table_name="sound_heart")
    op.drop_table("sound_heart")
    op.drop_index("ix_heart_song_id", table_name="heart")
    op.drop_table("heart")
