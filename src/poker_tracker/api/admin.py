"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from poker_tracker.api.serializers import serialize_drift, serialize_totals

if TYPE_CHECKING:
    from poker_tracker.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.post("/recompute-stats", dependencies=[Depends(require_admin)])
def recompute_stats(request: Request) -> dict[str, object]:
    """Rebuild every player's totals from the player-session rows."""
    container: AppContainer = request.app.state.container
    totals = container.stats_service.recompute()
    return {"players": [serialize_totals(entry) for entry in totals]}


@router.get("/integrity", dependencies=[Depends(require_admin)])
def integrity(request: Request) -> dict[str, object]:
    """Report stored totals and sessions that disagree with the ledger rows."""
    container: AppContainer = request.app.state.container
    drift = container.stats_service.find_drift()
    sessions = container.session_service.find_inconsistent_sessions()
    return {
        "ok": not drift and not sessions,
        "stats_drift": [serialize_drift(entry) for entry in drift],
        "sessions": [
            {"session_id": session_id, "issues": issues}
            for session_id, issues in sessions.items()
        ],
    }
