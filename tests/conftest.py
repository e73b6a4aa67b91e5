"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from uuid import uuid4

import pytest

from poker_tracker.config import Settings
from poker_tracker.containers import AppContainer
from poker_tracker.domain.players import PlayerRecord
from poker_tracker.domain.sessions import (
    PlayerSessionEntry,
    PlayerSessionRow,
    SessionRecord,
)
from poker_tracker.domain.stats import PlayerTotals
from poker_tracker.services.leaderboard import LeaderboardService
from poker_tracker.services.players import PlayerRepository, PlayerService
from poker_tracker.services.sessions import SessionRepository, SessionService
from poker_tracker.services.stats import StatsService

FAKE_SERVICE_KEY = (
    "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
    "eyJyb2xlIjoic2VydmljZV9yb2xlIn0."
    "c2lnbmF0dXJl"
)


@dataclass
class InMemoryPlayerRepository(PlayerRepository):
    """In-memory player repository for tests."""

    players: dict[str, PlayerRecord] = field(default_factory=dict)
    totals_writes: list[PlayerTotals] = field(default_factory=list)

    def create_player(self, name: str) -> PlayerRecord:
        player = PlayerRecord(
            id=str(uuid4()),
            name=name,
            total_buy_in=0,
            total_cash_out=0,
            sessions_played=0,
            created_at=datetime.now(tz=UTC),
        )
        self.players[player.id] = player
        return player

    def list_players(self) -> list[PlayerRecord]:
        return list(self.players.values())

    def get_player(self, player_id: str) -> PlayerRecord | None:
        return self.players.get(player_id)

    def delete_player(self, player_id: str) -> bool:
        return self.players.pop(player_id, None) is not None

    def update_totals(self, totals: PlayerTotals) -> None:
        self.totals_writes.append(totals)
        self.players[totals.player_id] = replace(
            self.players[totals.player_id],
            total_buy_in=totals.total_buy_in,
            total_cash_out=totals.total_cash_out,
            sessions_played=totals.sessions_played,
        )


@dataclass
class InMemorySessionRepository(SessionRepository):
    """In-memory session repository for tests."""

    sessions: dict[str, SessionRecord] = field(default_factory=dict)

    def create_session(
        self,
        date: datetime,
        location: str,
        is_active: bool,
        players: list[PlayerSessionEntry],
    ) -> SessionRecord:
        session = SessionRecord(
            id=str(uuid4()),
            date=date,
            location=location,
            players=list(players),
            is_active=is_active,
            created_at=datetime.now(tz=UTC),
        )
        self.sessions[session.id] = session
        return session

    def list_sessions(self) -> list[SessionRecord]:
        return sorted(
            self.sessions.values(), key=lambda session: session.date, reverse=True
        )

    def get_session(self, session_id: str) -> SessionRecord | None:
        return self.sessions.get(session_id)

    def update_session(
        self,
        session_id: str,
        date: datetime | None = None,
        location: str | None = None,
        is_active: bool | None = None,
    ) -> bool:
        session = self.sessions.get(session_id)
        if session is None:
            return False
        self.sessions[session_id] = replace(
            session,
            date=date if date is not None else session.date,
            location=location if location is not None else session.location,
            is_active=is_active if is_active is not None else session.is_active,
        )
        return True

    def replace_players(
        self, session_id: str, players: list[PlayerSessionEntry]
    ) -> None:
        self.sessions[session_id] = replace(
            self.sessions[session_id], players=list(players)
        )

    def set_cash_out(self, session_id: str, player_id: str, amount: int) -> None:
        session = self.sessions[session_id]
        self.sessions[session_id] = replace(
            session,
            players=[
                replace(entry, cash_out=amount)
                if entry.player_id == player_id
                else entry
                for entry in session.players
            ],
        )

    def delete_session(self, session_id: str) -> bool:
        return self.sessions.pop(session_id, None) is not None

    def list_player_sessions(self) -> list[PlayerSessionRow]:
        return [
            PlayerSessionRow(
                player_id=entry.player_id,
                session_id=session.id,
                buy_in=entry.buy_in,
                cash_out=entry.cash_out,
            )
            for session in self.sessions.values()
            for entry in session.players
        ]

    def has_pending_cash_out(self, player_id: str) -> bool:
        return any(
            entry.player_id == player_id and entry.cash_out is None
            for session in self.sessions.values()
            for entry in session.players
        )


@dataclass
class Ledger:
    """In-memory repositories wired into the services under test."""

    players: InMemoryPlayerRepository
    sessions: InMemorySessionRepository
    stats_service: StatsService
    player_service: PlayerService
    session_service: SessionService
    leaderboard_service: LeaderboardService


def build_ledger() -> Ledger:
    players = InMemoryPlayerRepository()
    sessions = InMemorySessionRepository()
    stats_service = StatsService(player_repository=players, session_repository=sessions)
    return Ledger(
        players=players,
        sessions=sessions,
        stats_service=stats_service,
        player_service=PlayerService(repository=players, seat_lookup=sessions),
        session_service=SessionService(
            repository=sessions,
            player_repository=players,
            stats_service=stats_service,
        ),
        leaderboard_service=LeaderboardService(
            player_repository=players, session_repository=sessions
        ),
    )


def game_night() -> datetime:
    return datetime(2024, 3, 1, 20, 0, tzinfo=UTC)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=FAKE_SERVICE_KEY,
        admin_token="admin-token",
        environment="test",
    )


@pytest.fixture
def ledger() -> Ledger:
    return build_ledger()


@pytest.fixture
def container(settings: Settings, ledger: Ledger) -> AppContainer:
    return AppContainer(
        settings=settings,
        player_service=ledger.player_service,
        session_service=ledger.session_service,
        stats_service=ledger.stats_service,
        leaderboard_service=ledger.leaderboard_service,
    )
