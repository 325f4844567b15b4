from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "game",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("sport", sa.String(), nullable=False, server_default="badminton"),
        sa.Column("match_type", sa.String(), nullable=False),
        sa.Column("player_names", sa.JSON(), nullable=False),
        sa.Column("first_server", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("starting_side", sa.String(), nullable=False, server_default="Left"),
        sa.Column("score_a", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("score_b", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("games_a", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("games_b", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("set_scores_a", sa.JSON(), nullable=False),
        sa.Column("set_scores_b", sa.JSON(), nullable=False),
        sa.Column("current_set", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("game_ended", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("winner", sa.String(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_table(
        "point",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column(
            "game_id",
            sa.String(),
            sa.ForeignKey("game.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("seq", sa.Integer(), nullable=False),
        sa.Column("scored_by", sa.String(1), nullable=False),
        sa.Column("set_number", sa.Integer(), nullable=False),
        sa.Column("score_a", sa.Integer(), nullable=False),
        sa.Column("score_b", sa.Integer(), nullable=False),
        sa.Column("games_a", sa.Integer(), nullable=True),
        sa.Column("games_b", sa.Integer(), nullable=True),
        sa.Column("game_completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("set_completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("serving_side", sa.String(1), nullable=False),
        sa.Column("server_index", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("positions_a", sa.JSON(), nullable=False),
        sa.Column("positions_b", sa.JSON(), nullable=False),
    )
    op.create_index("ix_point_game_id_seq", "point", ["game_id", "seq"])


def downgrade():
    op.drop_index("ix_point_game_id_seq", table_name="point")
    op.drop_table("point")
    op.drop_table("game")
