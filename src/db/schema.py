"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBChallenge(Base):
    """A pending challenge. Removed once accepted."""

    __tablename__ = "challenges"
    __table_args__ = (UniqueConstraint("challenger", "opponent"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    challenger: Mapped[str]
    opponent: Mapped[str]
    game_type: Mapped[str]
    created_at: Mapped[datetime] = mapped_column(default=utc_now)


class DBGameRecord(Base):
    """One active game per pair of players. `state` is stored as-is, never parsed here."""

    __tablename__ = "game_records"

    pair_key: Mapped[str] = mapped_column(primary_key=True)
    game_type: Mapped[str]
    state: Mapped[str]
    current_turn: Mapped[str]
    player1: Mapped[str]
    player2: Mapped[str]
    winner: Mapped[Optional[str]]
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)
