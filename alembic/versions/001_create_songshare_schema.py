"""create users, songs, sounds, hearts and comments"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "001_create_songshare_schema"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "user",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False, unique=True),
        sa.Column("image", sa.String(), nullable=True),
        sa.Column("plan", sa.String(), nullable=False, server_default=sa.text("'free'")),
        sa.Column("subscription_status", sa.String(), nullable=True),
        sa.Column("subscription_id", sa.String(), nullable=True),
        sa.Column("stripe_customer_id", sa.String(), nullable=True, unique=True),
        sa.Column("subscription_expires_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "song",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("artist", sa.String(), nullable=False),
        sa.Column("album", sa.String(), nullable=True),
        sa.Column("genre", sa.String(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("audio_key", sa.String(), nullable=True),
        sa.Column("cover_image_key", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default=sa.text("'processing'")),
        sa.Column("duration", sa.Integer(), nullable=True),
        sa.Column("play_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("download_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column(
            "user_id",
            sa.String(),
            sa.ForeignKey("user.id", ondelete="CASCADE"),
            nullable=False,
        ),
        *_timestamps(),
    )
    op.create_index("ix_song_user_id", "song", ["user_id"])

    op.create_table(
        "sound",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("code", sa.Text(), nullable=False),
        sa.Column(
            "user_id",
            sa.String(),
            sa.ForeignKey("user.id", ondelete="CASCADE"),
            nullable=False,
        ),
        *_timestamps(),
    )
    op.create_index("ix_sound_user_id", "sound", ["user_id"])

    op.create_table(
        "sound_comment",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column(
            "sound_id",
            sa.String(),
            sa.ForeignKey("sound.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "user_id",
            sa.String(),
            sa.ForeignKey("user.id", ondelete="CASCADE"),
            nullable=False,
        ),
        *_timestamps(),
    )
    op.create_index("ix_sound_comment_sound_id", "sound_comment", ["sound_id"])


def downgrade() -> None:
    op.drop_index("ix_sound_comment_sound_id", table_name="sound_comment")
    op.drop_table("sound_comment")
    op.drop_index("ix_sound_user_id", table_name="sound")
    op.drop_table("sound")
    op.drop_index("ix_song_user_id", table_name="song")
    op.drop_table("song")
    op.drop_table("user")
