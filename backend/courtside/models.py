from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.sql import func

from .db import Base


class Game(Base):
    """Game summary record.

    Setup fields are written once.  Score fields are a convenience copy of
    the state derived from the point history.
    """

    __tablename__ = "game"
    id = Column(String, primary_key=True)
    sport = Column(String, nullable=False, default="badminton")
    match_type = Column(String, nullable=False)
    player_names = Column(JSON, nullable=False)
    first_server = Column(Integer, nullable=False, default=0)
    starting_side = Column(String, nullable=False, default="Left")
    score_a = Column(Integer, nullable=False, default=0)
    score_b = Column(Integer, nullable=False, default=0)
    games_a = Column(Integer, nullable=False, default=0)
    games_b = Column(Integer, nullable=False, default=0)
    set_scores_a = Column(JSON, nullable=False)
    set_scores_b = Column(JSON, nullable=False)
    current_set = Column(Integer, nullable=False, default=0)
    game_ended = Column(Boolean, nullable=False, default=False)
    winner = Column(String, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)


class Point(Base):
    __tablename__ = "point"
    id = Column(String, primary_key=True)
    game_id = Column(
        String, ForeignKey("game.id", ondelete="CASCADE"), nullable=False
    )
    created_at = Column(DateTime, nullable=False)
    seq = Column(Integer, nullable=False)
    scored_by = Column(String(1), nullable=False)
    set_number = Column(Integer, nullable=False)
    score_a = Column(Integer, nullable=False)
    score_b = Column(Integer, nullable=False)
    games_a = Column(Integer, nullable=True)
    games_b = Column(Integer, nullable=True)
    game_completed = Column(Boolean, nullable=False, default=False)
    set_completed = Column(Boolean, nullable=False, default=False)
    # State before the point was played
    serving_side = Column(String(1), nullable=False)
    server_index = Column(Integer, nullable=False, default=0)
    positions_a = Column(JSON, nullable=False)
    positions_b = Column(JSON, nullable=False)

    __table_args__ = (
        Index("ix_point_game_id_seq", "game_id", "seq"),
    )
