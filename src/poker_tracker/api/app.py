"""FastAPI application factory."""

import logging

from fastapi import FastAPI, Query, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from poker_tracker.api.admin import router as admin_router
from poker_tracker.api.models import (
    CashOutRequest,
    PlayerCreate,
    SessionCreate,
    SessionUpdate,
)
from poker_tracker.api.serializers import (
    serialize_leaderboard,
    serialize_overall_stats,
    serialize_player,
    serialize_player_report,
    serialize_session,
)
from poker_tracker.app_logging import configure_logging
from poker_tracker.config import parse_cors_origins
from poker_tracker.containers import AppContainer
from poker_tracker.domain.errors import (
    InvariantViolationError,
    NotFoundError,
    PokerTrackerError,
    StoreError,
    ValidationError,
)

_STATUS_BY_ERROR: list[tuple[type[PokerTrackerError], int]] = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (InvariantViolationError, status.HTTP_409_CONFLICT),
]


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    app = FastAPI(title="Poker Tracker")
    app.state.container = container

    origins = parse_cors_origins(container.settings.cors_allowed_origins)
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(admin_router)

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
        logger.exception(
            "Store request failed",
            extra={"path": request.url.path},
            exc_info=exc,
        )
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "detail": _format_store_error(
                    request.app.state.container, exc, "Storage is unavailable."
                )
            },
        )

    @app.exception_handler(PokerTrackerError)
    async def domain_error_handler(
        request: Request, exc: PokerTrackerError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=_status_for(exc),
            content={"detail": str(exc), "error": type(exc).__name__},
        )

    @app.get("/health")
    def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/players", status_code=status.HTTP_201_CREATED)
    def create_player(payload: PlayerCreate, request: Request) -> dict[str, object]:
        """Add a player to the roster."""
        state_container: AppContainer = request.app.state.container
        player = state_container.player_service.create_player(payload.name)
        return serialize_player(player)

    @app.get("/players")
    def list_players(
        request: Request, search: str | None = None
    ) -> dict[str, object]:
        """Return players ordered by profit, optionally searched by name."""
        state_container: AppContainer = request.app.state.container
        players = state_container.player_service.list_players(search=search)
        return {"players": [serialize_player(player) for player in players]}

    @app.get("/players/{player_id}")
    def get_player(player_id: str, request: Request) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        return serialize_player(state_container.player_service.get_player(player_id))

    @app.get("/players/{player_id}/stats")
    def player_stats(player_id: str, request: Request) -> dict[str, object]:
        """Return a player's session history and derived stats."""
        state_container: AppContainer = request.app.state.container
        report = state_container.leaderboard_service.get_player_report(player_id)
        return serialize_player_report(report)

    @app.delete("/players/{player_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_player(player_id: str, request: Request) -> Response:
        """Delete a player who is not seated in an active session."""
        state_container: AppContainer = request.app.state.container
        state_container.player_service.delete_player(player_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.post("/sessions", status_code=status.HTTP_201_CREATED)
    def create_session(payload: SessionCreate, request: Request) -> dict[str, object]:
        """Start or backfill a session."""
        state_container: AppContainer = request.app.state.container
        session = state_container.session_service.create_session(
            date=payload.date,
            location=payload.location,
            players=[seat.to_entry() for seat in payload.players],
        )
        return serialize_session(session)

    @app.get("/sessions")
    def list_sessions(
        request: Request,
        status_filter: str = Query("all", alias="status"),
        location: str | None = None,
        sort: str = "date",
        order: str = "desc",
    ) -> dict[str, object]:
        """Return sessions, newest first unless another order is requested."""
        state_container: AppContainer = request.app.state.container
        sessions = state_container.session_service.list_sessions(
            status=status_filter, location=location, sort=sort, order=order
        )
        return {"sessions": [serialize_session(session) for session in sessions]}

    @app.get("/sessions/{session_id}")
    def get_session(session_id: str, request: Request) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        return serialize_session(
            state_container.session_service.get_session(session_id)
        )

    @app.patch("/sessions/{session_id}")
    def edit_session(
        session_id: str, payload: SessionUpdate, request: Request
    ) -> dict[str, object]:
        """Edit session details; a players list replaces all participants."""
        state_container: AppContainer = request.app.state.container
        session = state_container.session_service.edit_session(
            session_id,
            date=payload.date,
            location=payload.location,
            players=(
                [seat.to_entry() for seat in payload.players]
                if payload.players is not None
                else None
            ),
        )
        return serialize_session(session)

    @app.post("/sessions/{session_id}/cash-outs")
    def record_cash_out(
        session_id: str, payload: CashOutRequest, request: Request
    ) -> dict[str, object]:
        """Record a player's cash-out."""
        state_container: AppContainer = request.app.state.container
        session = state_container.session_service.record_cash_out(
            session_id, payload.player_id, payload.amount
        )
        return serialize_session(session)

    @app.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_session(session_id: str, request: Request) -> Response:
        state_container: AppContainer = request.app.state.container
        state_container.session_service.delete_session(session_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.get("/leaderboard")
    def leaderboard(request: Request) -> dict[str, object]:
        """Return ranked players with winners and losers."""
        state_container: AppContainer = request.app.state.container
        return serialize_leaderboard(
            state_container.leaderboard_service.get_leaderboard()
        )

    @app.get("/stats")
    def overall_stats(request: Request) -> dict[str, object]:
        """Return table-wide stats."""
        state_container: AppContainer = request.app.state.container
        return serialize_overall_stats(
            state_container.leaderboard_service.get_overall_stats()
        )

    return app


def _status_for(exc: PokerTrackerError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _format_store_error(
    state_container: AppContainer, exc: Exception, fallback: str
) -> str:
    """Return a user-facing store error message with local debug info."""
    if state_container.settings.environment == "local":
        cause = exc.__cause__ or exc
        detail = f"{type(cause).__name__}: {cause}".strip()
        if detail:
            return f"{fallback} (debug: {detail})"
    return fallback
