"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from poker_tracker.adapters.supabase_player_repository import SupabasePlayerRepository
from poker_tracker.adapters.supabase_session_repository import (
    SupabaseSessionRepository,
)
from poker_tracker.config import Settings
from poker_tracker.services.leaderboard import LeaderboardService
from poker_tracker.services.players import PlayerService
from poker_tracker.services.sessions import SessionService
from poker_tracker.services.stats import StatsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    player_service: PlayerService
    session_service: SessionService
    stats_service: StatsService
    leaderboard_service: LeaderboardService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    player_repository = SupabasePlayerRepository(supabase_client)
    session_repository = SupabaseSessionRepository(supabase_client)
    stats_service = StatsService(
        player_repository=player_repository,
        session_repository=session_repository,
    )
    player_service = PlayerService(
        repository=player_repository,
        seat_lookup=session_repository,
    )
    session_service = SessionService(
        repository=session_repository,
        player_repository=player_repository,
        stats_service=stats_service,
    )
    leaderboard_service = LeaderboardService(
        player_repository=player_repository,
        session_repository=session_repository,
    )

    return AppContainer(
        settings=resolved_settings,
        player_service=player_service,
        session_service=session_service,
        stats_service=stats_service,
        leaderboard_service=leaderboard_service,
    )
