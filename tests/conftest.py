"""Shared fixtures for game engine tests."""

import pytest

from tictactoe.config import Settings
from tictactoe.schemas.contract import AccountAddress, ContractAddress
from tictactoe.schemas.game_engine import Game, Player, Registry
from tictactoe.services.game.engine import (
    ProcessResult,
    create_game,
    join_game,
    make_move,
    registry,
)
from tictactoe.services.host import ContractHost, InMemoryStorage

# Fixed identities for deterministic testing
INITIATOR = bytes([0] * 32)
OPPONENT = bytes([1] * 32)
STRANGER = bytes([2] * 32)

CROSS = Player.cross(INITIATOR)
CIRCLE = Player.circle(OPPONENT)

INITIATOR_SENDER = AccountAddress(address=INITIATOR)
OPPONENT_SENDER = AccountAddress(address=OPPONENT)
STRANGER_SENDER = AccountAddress(address=STRANGER)
CONTRACT_SENDER = ContractAddress(index=7, subindex=0)


def start_game() -> Game:
    """A game between INITIATOR (cross) and OPPONENT (circle), cross to move."""
    result = join_game(create_game(INITIATOR), CIRCLE)
    assert result.success
    return result.state


def play_moves(game: Game, moves: list[int]) -> Game:
    """Play `moves` alternately for whoever holds the turn, asserting each succeeds."""
    for the_move in moves:
        result = make_move(game, game.game_state.player, the_move)
        assert result.success, f"move {the_move} failed: {result.error_code}"
        game = result.state
    return game


def registry_with_game_in_progress() -> tuple[Registry, int]:
    """A registry holding one joined game; returns it with the game id."""
    created = registry.create_game(registry.create_registry(), INITIATOR)
    game_id = created.events[0].game_id
    joined: ProcessResult[Registry] = registry.join(created.state, game_id, CIRCLE)
    assert joined.success
    return joined.state, game_id


@pytest.fixture
def new_game() -> Game:
    """Game awaiting an opponent."""
    return create_game(INITIATOR)


@pytest.fixture
def game_in_progress() -> Game:
    """Joined game with cross to move."""
    return start_game()


@pytest.fixture
def settings() -> Settings:
    return Settings(CONTRACT_NAME="tictactoe", STATE_KEY="state", DEBUG=False)


@pytest.fixture
def host(settings: Settings) -> ContractHost:
    """Initialized host with empty storage."""
    contract_host = ContractHost(storage=InMemoryStorage(), settings=settings)
    result = contract_host.initialize(INITIATOR_SENDER)
    assert result.success
    return contract_host
