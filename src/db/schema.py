"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import JSON, BigInteger, Index
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBGame(Base):
    __tablename__ = "games"
    __table_args__ = (
        Index("idx_games_status", "status"),
        Index("idx_games_last_updated", "last_updated"),
    )

    id: Mapped[UUID] = mapped_column(primary_key=True)
    name: Mapped[str]
    status: Mapped[str]
    turn: Mapped[str]
    winner: Mapped[Optional[str]]
    result_reason: Mapped[Optional[str]]
    pieces: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    moves: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    # Denormalised length of `moves`: the version number for optimistic concurrency
    move_count: Mapped[int] = mapped_column(default=0)
    registered_players: Mapped[dict[str, str]] = mapped_column(JSON, default=dict)
    start_time: Mapped[int] = mapped_column(BigInteger)
    last_updated: Mapped[int] = mapped_column(BigInteger)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)
