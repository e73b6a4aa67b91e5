"""Tests for player management."""

import pytest

from poker_tracker.domain.errors import (
    NotFoundError,
    PlayerInActiveSessionError,
    ValidationError,
)
from poker_tracker.domain.sessions import PlayerSessionEntry
from poker_tracker.services.players import filter_players
from tests.conftest import Ledger, game_night


def test_create_player_strips_name(ledger: Ledger) -> None:
    player = ledger.player_service.create_player("  Alice ")

    assert player.name == "Alice"
    assert player.total_buy_in == 0
    assert player.sessions_played == 0


def test_create_player_requires_name(ledger: Ledger) -> None:
    with pytest.raises(ValidationError):
        ledger.player_service.create_player("   ")

    assert ledger.players.players == {}


def test_list_players_sorted_by_profit(ledger: Ledger) -> None:
    alice = ledger.player_service.create_player("Alice")
    bob = ledger.player_service.create_player("Bob")
    carol = ledger.player_service.create_player("Carol")
    ledger.session_service.create_session(
        game_night(),
        "Home",
        [
            PlayerSessionEntry(alice.id, 100, 40),
            PlayerSessionEntry(bob.id, 100, 190),
            PlayerSessionEntry(carol.id, 100, 70),
        ],
    )

    names = [player.name for player in ledger.player_service.list_players()]

    assert names == ["Bob", "Carol", "Alice"]


def test_get_missing_player(ledger: Ledger) -> None:
    with pytest.raises(NotFoundError):
        ledger.player_service.get_player("missing")


def test_delete_player_in_active_session_is_refused(ledger: Ledger) -> None:
    alice = ledger.player_service.create_player("Alice")
    bob = ledger.player_service.create_player("Bob")
    ledger.session_service.create_session(
        game_night(),
        "Home",
        [PlayerSessionEntry(alice.id, 100), PlayerSessionEntry(bob.id, 100, 0)],
    )

    with pytest.raises(PlayerInActiveSessionError):
        ledger.player_service.delete_player(alice.id)

    assert alice.id in ledger.players.players


def test_delete_player_keeps_session_history(ledger: Ledger) -> None:
    alice = ledger.player_service.create_player("Alice")
    bob = ledger.player_service.create_player("Bob")
    session = ledger.session_service.create_session(
        game_night(),
        "Home",
        [PlayerSessionEntry(alice.id, 100, 150), PlayerSessionEntry(bob.id, 100, 50)],
    )

    ledger.player_service.delete_player(bob.id)

    assert [player.id for player in ledger.player_service.list_players()] == [
        alice.id
    ]
    history = ledger.session_service.get_session(session.id)
    assert history.find_entry(bob.id) is not None
    with pytest.raises(NotFoundError):
        ledger.player_service.delete_player(bob.id)


def test_list_players_search_by_name(ledger: Ledger) -> None:
    ledger.player_service.create_player("Alice")
    ledger.player_service.create_player("Malik")
    ledger.player_service.create_player("Bob")

    found = ledger.player_service.list_players(search=" LI ")

    assert sorted(player.name for player in found) == ["Alice", "Malik"]
    assert len(ledger.player_service.list_players(search="")) == 3
    assert filter_players([], "bob") == []
