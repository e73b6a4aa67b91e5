"""Supabase-backed session repository."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import uuid4

from supabase import Client

from poker_tracker.adapters.supabase_queries import execute, parse_timestamp
from poker_tracker.domain.errors import StoreError
from poker_tracker.domain.sessions import (
    PlayerSessionEntry,
    PlayerSessionRow,
    SessionRecord,
)
from poker_tracker.services.sessions import SessionRepository

_SESSION_COLUMNS = (
    "id, date, location, is_active, created_at, "
    "player_sessions (player_id, buy_in, cash_out)"
)

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseSessionRepository(SessionRepository):
    """Supabase implementation for sessions and player-session rows."""

    client: Client

    def create_session(
        self,
        date: datetime,
        location: str,
        is_active: bool,
        players: list[PlayerSessionEntry],
    ) -> SessionRecord:
        """Insert a session and its participants.

        If the participant insert fails the session row is removed again.
        """
        session_id = str(uuid4())
        created_at = datetime.now(tz=UTC)
        rows = execute(
            self.client.table("sessions").insert(
                {
                    "id": session_id,
                    "date": date.isoformat(),
                    "location": location,
                    "is_active": is_active,
                    "created_at": created_at.isoformat(),
                }
            ),
            "create session",
        )
        if not rows:
            raise StoreError("Failed to create session")
        try:
            self._insert_players(session_id, players)
        except StoreError:
            _logger.warning("Rolling back session without players: id=%s", session_id)
            execute(
                self.client.table("sessions").delete().eq("id", session_id),
                "roll back session",
            )
            raise
        return SessionRecord(
            id=session_id,
            date=date,
            location=location,
            players=list(players),
            is_active=is_active,
            created_at=created_at,
        )

    def list_sessions(self) -> list[SessionRecord]:
        """Return all sessions, newest date first."""
        rows = execute(
            self.client.table("sessions")
            .select(_SESSION_COLUMNS)
            .order("date", desc=True),
            "fetch sessions",
        )
        return [_parse_session(row) for row in rows]

    def get_session(self, session_id: str) -> SessionRecord | None:
        """Return a session by id, if present."""
        rows = execute(
            self.client.table("sessions")
            .select(_SESSION_COLUMNS)
            .eq("id", session_id)
            .limit(1),
            "fetch session",
        )
        if not rows:
            return None
        return _parse_session(rows[0])

    def update_session(
        self,
        session_id: str,
        date: datetime | None = None,
        location: str | None = None,
        is_active: bool | None = None,
    ) -> bool:
        """Update only the supplied session columns."""
        payload: dict[str, object] = {}
        if date is not None:
            payload["date"] = date.isoformat()
        if location is not None:
            payload["location"] = location
        if is_active is not None:
            payload["is_active"] = is_active
        if not payload:
            return self.get_session(session_id) is not None
        rows = execute(
            self.client.table("sessions").update(payload).eq("id", session_id),
            "update session",
        )
        return bool(rows)

    def replace_players(
        self, session_id: str, players: list[PlayerSessionEntry]
    ) -> None:
        """Swap the session's participant rows for a new set.

        If the insert fails the previous rows are written back.
        """
        previous = self._list_session_players(session_id)
        execute(
            self.client.table("player_sessions").delete().eq("session_id", session_id),
            "clear session players",
        )
        try:
            self._insert_players(session_id, players)
        except StoreError:
            _logger.warning("Restoring session players: id=%s", session_id)
            self._insert_players(session_id, previous)
            raise

    def set_cash_out(self, session_id: str, player_id: str, amount: int) -> None:
        """Record a participant's cash-out."""
        execute(
            self.client.table("player_sessions")
            .update({"cash_out": amount})
            .eq("session_id", session_id)
            .eq("player_id", player_id),
            "record cash-out",
        )

    def delete_session(self, session_id: str) -> bool:
        """Delete participant rows first, then the session row."""
        execute(
            self.client.table("player_sessions").delete().eq("session_id", session_id),
            "delete session players",
        )
        rows = execute(
            self.client.table("sessions").delete().eq("id", session_id),
            "delete session",
        )
        return bool(rows)

    def list_player_sessions(self) -> list[PlayerSessionRow]:
        """Return every player-session row."""
        rows = execute(
            self.client.table("player_sessions").select(
                "player_id, session_id, buy_in, cash_out"
            ),
            "fetch player sessions",
        )
        return [
            PlayerSessionRow(
                player_id=str(row["player_id"]),
                session_id=str(row["session_id"]),
                buy_in=int(row.get("buy_in") or 0),
                cash_out=_parse_cash_out(row.get("cash_out")),
            )
            for row in rows
        ]

    def has_pending_cash_out(self, player_id: str) -> bool:
        """Return True when the player has an open seat in any session."""
        rows = execute(
            self.client.table("player_sessions")
            .select("session_id")
            .eq("player_id", player_id)
            .is_("cash_out", "null")
            .limit(1),
            "check open seats",
        )
        return bool(rows)

    def _list_session_players(self, session_id: str) -> list[PlayerSessionEntry]:
        rows = execute(
            self.client.table("player_sessions")
            .select("player_id, buy_in, cash_out")
            .eq("session_id", session_id),
            "fetch session players",
        )
        return [_parse_entry(row) for row in rows]

    def _insert_players(
        self, session_id: str, players: list[PlayerSessionEntry]
    ) -> None:
        if not players:
            return
        execute(
            self.client.table("player_sessions").insert(
                [
                    {
                        "session_id": session_id,
                        "player_id": entry.player_id,
                        "buy_in": entry.buy_in,
                        "cash_out": entry.cash_out,
                    }
                    for entry in players
                ]
            ),
            "add session players",
        )


def _parse_session(row: dict[str, object]) -> SessionRecord:
    raw_players = row.get("player_sessions") or []
    players = [
        _parse_entry(entry)
        for entry in (raw_players if isinstance(raw_players, list) else [])
    ]
    return SessionRecord(
        id=str(row["id"]),
        date=parse_timestamp(row.get("date")),
        location=str(row.get("location", "")),
        players=players,
        is_active=bool(row.get("is_active")),
        created_at=parse_timestamp(row.get("created_at")),
    )


def _parse_entry(row: dict[str, object]) -> PlayerSessionEntry:
    return PlayerSessionEntry(
        player_id=str(row["player_id"]),
        buy_in=int(row.get("buy_in") or 0),
        cash_out=_parse_cash_out(row.get("cash_out")),
    )


def _parse_cash_out(raw: object) -> int | None:
    if raw is None:
        return None
    return int(raw)
