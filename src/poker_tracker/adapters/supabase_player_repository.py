"""Supabase-backed player repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import uuid4

from supabase import Client

from poker_tracker.adapters.supabase_queries import execute, parse_timestamp
from poker_tracker.domain.errors import StoreError
from poker_tracker.domain.players import PlayerRecord
from poker_tracker.domain.stats import PlayerTotals
from poker_tracker.services.players import PlayerRepository

_PLAYER_COLUMNS = "id, name, total_buy_in, total_cash_out, sessions_played, created_at"


@dataclass
class SupabasePlayerRepository(PlayerRepository):
    """Supabase implementation for player persistence."""

    client: Client

    def create_player(self, name: str) -> PlayerRecord:
        """Insert a player row with zero totals and return it."""
        rows = execute(
            self.client.table("players").insert(
                {
                    "id": str(uuid4()),
                    "name": name,
                    "total_buy_in": 0,
                    "total_cash_out": 0,
                    "sessions_played": 0,
                    "created_at": datetime.now(tz=UTC).isoformat(),
                }
            ),
            "add player",
        )
        if not rows:
            raise StoreError("Failed to add player")
        return _parse_player(rows[0])

    def list_players(self) -> list[PlayerRecord]:
        """Return all players."""
        rows = execute(
            self.client.table("players").select(_PLAYER_COLUMNS), "fetch players"
        )
        return [_parse_player(row) for row in rows]

    def get_player(self, player_id: str) -> PlayerRecord | None:
        """Return a player by id, if present."""
        rows = execute(
            self.client.table("players")
            .select(_PLAYER_COLUMNS)
            .eq("id", player_id)
            .limit(1),
            "fetch player",
        )
        if not rows:
            return None
        return _parse_player(rows[0])

    def delete_player(self, player_id: str) -> bool:
        """Delete the player row only; session history is kept."""
        rows = execute(
            self.client.table("players").delete().eq("id", player_id),
            "delete player",
        )
        return bool(rows)

    def update_totals(self, totals: PlayerTotals) -> None:
        """Overwrite the stored totals for a player."""
        execute(
            self.client.table("players")
            .update(
                {
                    "total_buy_in": totals.total_buy_in,
                    "total_cash_out": totals.total_cash_out,
                    "sessions_played": totals.sessions_played,
                }
            )
            .eq("id", totals.player_id),
            "update player stats",
        )


def _parse_player(row: dict[str, object]) -> PlayerRecord:
    return PlayerRecord(
        id=str(row["id"]),
        name=str(row.get("name", "")),
        total_buy_in=int(row.get("total_buy_in") or 0),
        total_cash_out=int(row.get("total_cash_out") or 0),
        sessions_played=int(row.get("sessions_played") or 0),
        created_at=parse_timestamp(row.get("created_at")),
    )
