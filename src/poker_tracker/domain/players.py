"""Domain models for players."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class PlayerRecord:
    """Represents a player with derived lifetime totals."""

    id: str
    name: str
    total_buy_in: int
    total_cash_out: int
    sessions_played: int
    created_at: datetime

    @property
    def profit(self) -> int:
        return self.total_cash_out - self.total_buy_in
