"""Add playlists and their ordered song entries."""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "003_add_playlists"
down_revision = "002_add_hearts"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "playlist",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "user_id",
            sa.String(),
            sa.ForeignKey("user.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_playlist_user_id", "playlist", ["user_id"])

    op.create_table(
        "playlist_song",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column(
            "playlist_id",
            sa.String(),
            sa.ForeignKey("playlist.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "song_id",
            sa.String(),
            sa.ForeignKey("song.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("playlist_id", "song_id", name="uq_playlist_song_playlist_song"),
    )
    op.create_index("ix_playlist_song_song_id", "playlist_song", ["song_id"])


def downgrade() -> None:
    op.drop_index("ix_playlist_song_song_id", table_name="playlist_song")
    op.drop_table("playlist_song")
    op.drop_index("ix_playlist_user_id", table_name="playlist")
    op.drop_table("playlist")
