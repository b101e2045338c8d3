"""Tests for contract entry points run through the host.

Critical scenarios tested:
- Only accounts may call mutating entry points (NotAHuman)
- Malformed parameters fail with ParseParams before any game logic
- Rejected invocations commit nothing
- Read-only entry points return the encoded views
"""

import pytest

from tictactoe.schemas.contract import JoinParams, MakeMoveParams
from tictactoe.schemas.game_engine import GamePhase, GameState
from tictactoe.services.contract import (
    CreateGameInvocation,
    InvocationContext,
    MakeMoveInvocation,
    build_invocation,
    invoke,
)
from tictactoe.services.game.engine import (
    ContractError,
    decode_game_view,
    decode_players,
    decode_view_state,
    encode_join_params,
    encode_make_move_params,
)
from tictactoe.services.host import ContractHost, InMemoryStorage

from .conftest import (
    CIRCLE,
    CONTRACT_SENDER,
    CROSS,
    INITIATOR,
    INITIATOR_SENDER,
    OPPONENT,
    OPPONENT_SENDER,
    STRANGER_SENDER,
)


def join_param(game_id: int) -> bytes:
    return encode_join_params(JoinParams(game_id=game_id))


def move_param(game_id: int, the_move: int) -> bytes:
    return encode_make_move_params(MakeMoveParams(game_id=game_id, the_move=the_move))


def start_hosted_game(host: ContractHost) -> None:
    assert host.invoke("create_game", INITIATOR_SENDER).success
    assert host.invoke("join_game", OPPONENT_SENDER, join_param(0)).success


def play(host: ContractHost, moves: list[int]) -> None:
    senders = [INITIATOR_SENDER, OPPONENT_SENDER]
    for i, the_move in enumerate(moves):
        result = host.invoke("make_move", senders[i % 2], move_param(0, the_move))
        assert result.success, result.error_code


class TestBuildInvocation:
    """Test mapping operation names to invocation types."""

    def test_known_operations(self):
        assert isinstance(build_invocation("create_game"), CreateGameInvocation)
        invocation = build_invocation("make_move", b"\x00" * 16)
        assert isinstance(invocation, MakeMoveInvocation)
        assert invocation.parameter == b"\x00" * 16

    def test_unknown_operation(self):
        with pytest.raises(ValueError):
            build_invocation("resign")


class TestInitialize:
    """Test contract initialization."""

    def test_initialize_creates_empty_registry(self, host: ContractHost):
        state = host.load_registry()

        assert state.counter == 0
        assert state.games == {}

    def test_cannot_initialize_twice(self, host: ContractHost):
        with pytest.raises(RuntimeError):
            host.initialize()
        with pytest.raises(RuntimeError):
            host.invoke("init", INITIATOR_SENDER)

    def test_invoke_before_initialize(self, settings):
        fresh = ContractHost(storage=InMemoryStorage(), settings=settings)

        with pytest.raises(RuntimeError):
            fresh.invoke("view", INITIATOR_SENDER)

    def test_dispatch_requires_state(self):
        ctx = InvocationContext(sender=INITIATOR_SENDER)

        with pytest.raises(RuntimeError):
            invoke(None, CreateGameInvocation(), ctx)


class TestNotAHuman:
    """Test that contracts cannot call mutating entry points."""

    @pytest.mark.parametrize(
        "operation, parameter",
        [
            ("create_game", b""),
            ("join_game", b"\x00" * 8),
            ("make_move", b"\x00" * 16),
        ],
    )
    def test_contract_sender_rejected(self, host: ContractHost, operation: str, parameter: bytes):
        host.invoke("create_game", INITIATOR_SENDER)

        result = host.invoke(operation, CONTRACT_SENDER, parameter)

        assert not result.success
        assert result.error_code == ContractError.NOT_A_HUMAN
        assert result.reject_code == -6

    def test_missing_sender_rejected(self, host: ContractHost):
        result = host.invoke("create_game", None)

        assert result.error_code == ContractError.NOT_A_HUMAN

    def test_contract_sender_may_read(self, host: ContractHost):
        host.invoke("create_game", INITIATOR_SENDER)

        result = host.invoke("game_view", CONTRACT_SENDER, join_param(0))

        assert result.success


class TestParseParams:
    """Test malformed parameter payloads."""

    @pytest.mark.parametrize(
        "operation, parameter",
        [
            ("join_game", b""),
            ("join_game", b"\x00" * 7),
            ("make_move", b"\x00" * 8),
            ("game_view", b"\x01"),
            ("game_view_players", b""),
        ],
    )
    def test_short_parameter(self, host: ContractHost, operation: str, parameter: bytes):
        result = host.invoke(operation, INITIATOR_SENDER, parameter)

        assert not result.success
        assert result.error_code == ContractError.PARSE_PARAMS
        assert result.reject_code == -1


class TestMutatingEntryPoints:
    """Test create, join and move through the host."""

    def test_create_game_commits_new_game(self, host: ContractHost):
        result = host.invoke("create_game", INITIATOR_SENDER)

        assert result.success
        assert result.return_value is None
        assert result.events[0].game_id == 0
        state = host.load_registry()
        assert state.counter == 1
        assert state.get_game(0).cross == CROSS

    def test_join_game(self, host: ContractHost):
        start_hosted_game(host)

        game = host.load_registry().get_game(0)
        assert game.circle == CIRCLE
        assert game.game_state == GameState.in_progress(CROSS)

    def test_join_unknown_game(self, host: ContractHost):
        result = host.invoke("join_game", OPPONENT_SENDER, join_param(3))

        assert result.error_code == ContractError.INVALID_GAME_ID

    def test_join_own_game(self, host: ContractHost):
        host.invoke("create_game", INITIATOR_SENDER)

        result = host.invoke("join_game", INITIATOR_SENDER, join_param(0))

        assert result.error_code == ContractError.INVALID_JOIN

    def test_circle_cannot_move_first(self, host: ContractHost):
        start_hosted_game(host)

        result = host.invoke("make_move", OPPONENT_SENDER, move_param(0, 4))

        assert result.error_code == ContractError.NOT_MY_TURN

    def test_huge_move_index_is_invalid_move(self, host: ContractHost):
        start_hosted_game(host)

        result = host.invoke("make_move", INITIATOR_SENDER, move_param(0, 2**64 - 1))

        assert result.error_code == ContractError.INVALID_MOVE

    def test_full_game_to_win(self, host: ContractHost):
        start_hosted_game(host)

        play(host, [0, 1, 4, 7, 8])

        game = host.load_registry().get_game(0)
        assert game.game_state == GameState.finished(CROSS)
        result = host.invoke("make_move", OPPONENT_SENDER, move_param(0, 2))
        assert result.error_code == ContractError.INVALID_GAME_STATE

    def test_rejected_invocation_commits_nothing(self, host: ContractHost):
        start_hosted_game(host)
        play(host, [4])
        before = host.storage.get(host.settings.STATE_KEY)

        result = host.invoke("make_move", OPPONENT_SENDER, move_param(0, 4))

        assert result.error_code == ContractError.INVALID_MOVE
        assert result.state is None
        assert host.storage.get(host.settings.STATE_KEY) == before

    def test_state_is_not_shared_between_invocations(self, host: ContractHost):
        """Each invocation rebuilds the registry from the committed snapshot."""
        host.invoke("create_game", INITIATOR_SENDER)

        first = host.load_registry()
        second = host.load_registry()

        assert first == second
        assert first is not second
        assert first.get_game(0) is not second.get_game(0)


class TestReadEntryPoints:
    """Test view, game_view and game_view_players."""

    def test_view_lists_all_games(self, host: ContractHost):
        start_hosted_game(host)
        host.invoke("create_game", STRANGER_SENDER)

        result = host.invoke("view", STRANGER_SENDER)

        games = decode_view_state(result.return_value)
        assert list(games) == [0, 1]
        assert games[0].circle == CIRCLE
        assert games[1].game_state.phase == GamePhase.AWAITING_OPPONENT

    def test_game_view_returns_u32(self, host: ContractHost):
        start_hosted_game(host)
        play(host, [4])

        result = host.invoke("game_view", INITIATOR_SENDER, join_param(0))

        assert len(result.return_value) == 4
        value = int.from_bytes(result.return_value, "little")
        assert value == 2 | (1 << 12)
        assert decode_game_view(value).phase == GamePhase.IN_PROGRESS

    def test_game_view_unknown_game(self, host: ContractHost):
        result = host.invoke("game_view", INITIATOR_SENDER, join_param(0))

        assert result.error_code == ContractError.INVALID_GAME_ID
        assert result.reject_code == -2

    def test_game_view_players(self, host: ContractHost):
        host.invoke("create_game", INITIATOR_SENDER)
        assert host.invoke("game_view_players", INITIATOR_SENDER, join_param(0)).return_value == INITIATOR

        host.invoke("join_game", OPPONENT_SENDER, join_param(0))
        result = host.invoke("game_view_players", INITIATOR_SENDER, join_param(0))

        assert decode_players(result.return_value) == (INITIATOR, OPPONENT)

    def test_game_view_players_unknown_game(self, host: ContractHost):
        result = host.invoke("game_view_players", INITIATOR_SENDER, join_param(7))

        assert result.error_code == ContractError.INVALID_GAME_ID

    def test_reads_commit_nothing(self, host: ContractHost):
        host.invoke("create_game", INITIATOR_SENDER)
        before = host.storage.get(host.settings.STATE_KEY)

        host.invoke("view", INITIATOR_SENDER)
        host.invoke("game_view", INITIATOR_SENDER, join_param(0))

        assert host.storage.get(host.settings.STATE_KEY) is before
