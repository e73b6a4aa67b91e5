"""Session lifecycle: creation, edits, cash-outs and deletion."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Protocol

from poker_tracker.domain.errors import (
    InvalidAmountError,
    NotFoundError,
    PoolExceededError,
    StoreError,
    ValidationError,
)
from poker_tracker.domain.sessions import (
    PlayerSessionEntry,
    PlayerSessionRow,
    SessionRecord,
    derive_is_active,
)
from poker_tracker.services.players import PlayerRepository
from poker_tracker.services.stats import StatsService

MIN_PLAYERS = 2
SESSION_STATUSES = ("all", "active", "completed")
SORT_ORDERS = ("asc", "desc")

_logger = logging.getLogger(__name__)


class SessionRepository(Protocol):
    """Persistence interface for sessions and their participants."""

    def create_session(
        self,
        date: datetime,
        location: str,
        is_active: bool,
        players: list[PlayerSessionEntry],
    ) -> SessionRecord:
        """Create a session with its participants and return it."""

    def list_sessions(
        self,
        status: str = "all",
        location: str | None = None,
        sort: str = "date",
        order: str = "desc",
    ) -> list[SessionRecord]:
        """Return sessions filtered by status and location, then sorted."""
        sessions = filter_sessions(self.repository.list_sessions(), status, location)
        return sort_sessions(sessions, sort, order)

    def get_session(self, session_id: str) -> SessionRecord:
        """Return a session or raise NotFoundError."""
        session = self.repository.get_session(session_id)
        if session is None:
            raise NotFoundError(f"Session {session_id} not found")
        return session

    def edit_session(
        self,
        session_id: str,
        date: datetime | None = None,
        location: str | None = None,
        players: list[PlayerSessionEntry] | None = None,
    ) -> SessionRecord:
        """Update session fields; a player list replaces the existing one.

        Players already seated in the session may stay even if their player
        row has since been deleted.
        """
        current = self.get_session(session_id)
        cleaned_location = _clean_location(location) if location is not None else None
        if players is not None:
            _validate_players(players)
            self._ensure_players_exist(
                players, seated={entry.player_id for entry in current.players}
            )
            self.repository.replace_players(session_id, players)

        resulting_players = players if players is not None else current.players
        try:
            self.repository.update_session(
                session_id,
                date=date,
                location=cleaned_location,
                is_active=derive_is_active(resulting_players),
            )
        except StoreError:
            if players is not None:
                _logger.warning(
                    "Restoring players after failed session update: id=%s",
                    session_id,
                )
                self.repository.replace_players(session_id, current.players)
            raise
        _logger.info(
            "Session edited: id=%s players_replaced=%s", session_id, players is not None
        )
        self.stats_service.recompute()
        return self.get_session(session_id)

    def record_cash_out(
        self, session_id: str, player_id: str, amount: object
    ) -> SessionRecord:
        """Record a cash-out, refusing any that would overdraw the pool."""
        value = parse_amount(amount)
        session = self.get_session(session_id)
        entry = session.find_entry(player_id)
        if entry is None:
            raise NotFoundError(f"Player {player_id} is not in session {session_id}")
        if entry.cash_out is not None:
            raise ValidationError("Player has already cashed out of this session")

        cashed_out_by_others = sum(
            other.cash_out or 0
            for other in session.players
            if other.player_id != player_id
        )
        pool = session.total_buy_in
        if cashed_out_by_others + value > pool:
            raise PoolExceededError(
                f"Cash-out of {value} exceeds the remaining pool of "
                f"{pool - cashed_out_by_others}"
            )

        self.repository.set_cash_out(session_id, player_id, value)
        remaining = [
            PlayerSessionEntry(other.player_id, other.buy_in, value)
            if other.player_id == player_id
            else other
            for other in session.players
        ]
        self.repository.update_session(
            session_id, is_active=derive_is_active(remaining)
        )
        _logger.info(
            "Cash-out recorded: session=%s player=%s amount=%s",
            session_id,
            player_id,
            value,
        )
        self.stats_service.recompute()
        return self.get_session(session_id)

    def delete_session(self, session_id: str) -> None:
        """Delete a session and all of its participant rows."""
        if not self.repository.delete_session(session_id):
            raise NotFoundError(f"Session {session_id} not found")
        _logger.info("Session deleted: id=%s", session_id)
        self.stats_service.recompute()

    def find_inconsistent_sessions(self) -> dict[str, list[str]]:
        """Return sessions whose stored state breaks a ledger invariant."""
        issues = {}
        for session in self.repository.list_sessions():
            problems = describe_session_issues(session)
            if problems:
                issues[session.id] = problems
        return issues

    def _ensure_players_exist(
        self, players: list[PlayerSessionEntry], seated: set[str] | None = None
    ) -> None:
        known = {player.id for player in self.player_repository.list_players()}
        known.update(seated or ())
        for entry in players:
            if entry.player_id not in known:
                raise NotFoundError(f"Player {entry.player_id} not found")


def parse_amount(value: object) -> int:
    """Parse a whole-unit, non-negative monetary amount.

    Accepts ints, integral floats and decimal strings such as "150" or "150.0".
    """
    if isinstance(value, bool):
        raise InvalidAmountError("Amount must be a number")
    if isinstance(value, int):
        amount = value
    elif isinstance(value, float | str):
        try:
            number = Decimal(value.strip() if isinstance(value, str) else value)
        except InvalidOperation:
            raise InvalidAmountError(f"Invalid amount: {value!r}") from None
        if not number.is_finite() or number != number.to_integral_value():
            raise InvalidAmountError(f"Amount must be a whole number: {value!r}")
        amount = int(number)
    else:
        raise InvalidAmountError("Amount must be a number")
    if amount < 0:
        raise InvalidAmountError("Amount cannot be negative")
    return amount


def describe_session_issues(session: SessionRecord) -> list[str]:
    """List the invariants a stored session currently violates."""
    problems = []
    if session.total_cash_out > session.total_buy_in:
        problems.append("cash-out exceeds buy-in")
    if session.is_active != derive_is_active(session.players):
        problems.append("stale active flag")
    player_ids = [entry.player_id for entry in session.players]
    if len(set(player_ids)) != len(player_ids):
        problems.append("duplicate participant")
    return problems


def _clean_location(location: str) -> str:
    cleaned = location.strip()
    if not cleaned:
        raise ValidationError("Location is required")
    return cleaned


def _validate_players(players: list[PlayerSessionEntry]) -> None:
    if len(players) < MIN_PLAYERS:
        raise ValidationError(f"A session needs at least {MIN_PLAYERS} players")

    seen: set[str] = set()
    for entry in players:
        if entry.player_id in seen:
            raise ValidationError(f"Player {entry.player_id} is listed twice")
        seen.add(entry.player_id)
        if not _is_whole(entry.buy_in) or entry.buy_in <= 0:
            raise ValidationError("Buy-in must be a positive whole amount")
        if entry.cash_out is not None and (
            not _is_whole(entry.cash_out) or entry.cash_out < 0
        ):
            raise InvalidAmountError("Cash-out must be a non-negative whole amount")

    total_buy_in = sum(entry.buy_in for entry in players)
    total_cash_out = sum(entry.cash_out or 0 for entry in players)
    if total_cash_out > total_buy_in:
        raise PoolExceededError(
            f"Total cash-out {total_cash_out} exceeds total buy-in {total_buy_in}"
        )


def _is_whole(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


_SORT_KEYS: dict[str, Callable[[SessionRecord], Any]] = {
    "date": lambda session: session.date,
    "location": lambda session: session.location.casefold(),
    "players": lambda session: len(session.players),
}


def filter_sessions(
    sessions: list[SessionRecord], status: str = "all", location: str | None = None
) -> list[SessionRecord]:
    """Keep sessions matching a status and a location substring."""
    if status not in SESSION_STATUSES:
        raise ValidationError(f"Unknown session status: {status}")
    needle = (location or "").strip().casefold()
    return [
        session
        for session in sessions
        if (status == "all" or session.is_active == (status == "active"))
        and needle in session.location.casefold()
    ]


def sort_sessions(
    sessions: list[SessionRecord], sort: str = "date", order: str = "desc"
) -> list[SessionRecord]:
    """Sort sessions by date, location or participant count."""
    key = _SORT_KEYS.get(sort)
    if key is None:
        raise ValidationError(f"Unknown sort field: {sort}")
    if order not in SORT_ORDERS:
        raise ValidationError(f"Unknown sort order: {order}")
    return sorted(sessions, key=key, reverse=order == "desc")
