"""Validation layer for game transitions and the ProcessResult pattern.

Separates validation from processing logic:
- validate_join() / validate_move() check a transition against current state
- ProcessResult replaces exceptions for control flow
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

from tictactoe.schemas.game_engine import BOARD_SIZE, Game, GamePhase, Mark, Player

from .events import AnyGameEvent

logger = logging.getLogger(__name__)

StateT = TypeVar("StateT")


class ContractError(str, Enum):
    """Every way an invocation can be rejected.

    Declaration order fixes the reject code reported to callers.
    """

    PARSE_PARAMS = "parse_params"
    INVALID_GAME_ID = "invalid_game_id"
    INVALID_JOIN = "invalid_join"
    NOT_MY_TURN = "not_my_turn"
    INVALID_MOVE = "invalid_move"
    NOT_A_HUMAN = "not_a_human"
    INVALID_GAME_STATE = "invalid_game_state"

    @property
    def reject_code(self) -> int:
        return -(list(ContractError).index(self) + 1)


@dataclass
class ProcessResult(Generic[StateT]):
    """Result of applying a transition.

    On failure `state` is None and the caller keeps its previous state,
    so a rejected transition never leaves partial updates behind.
    """

    state: StateT | None = None
    events: list[AnyGameEvent] = field(default_factory=list)
    success: bool = True
    error_code: ContractError | None = None
    error_message: str | None = None

    @classmethod
    def ok(
        cls,
        state: StateT,
        events: list[AnyGameEvent] | None = None,
    ) -> "ProcessResult[StateT]":
        """Create a successful result with new state and events."""
        return cls(
            state=state,
            events=events or [],
            success=True,
        )

    @classmethod
    def failure(cls, code: ContractError, message: str) -> "ProcessResult[StateT]":
        """Create a failure result with error details."""
        return cls(
            state=None,
            events=[],
            success=False,
            error_code=code,
            error_message=message,
        )


@dataclass
class ValidationResult:
    """Result of validating a transition before processing."""

    is_valid: bool = True
    error_code: ContractError | None = None
    error_message: str | None = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        """Create a successful validation result."""
        return cls(is_valid=True)

    @classmethod
    def error(cls, code: ContractError, message: str) -> "ValidationResult":
        """Create a validation failure with error details."""
        return cls(
            is_valid=False,
            error_code=code,
            error_message=message,
        )


def validate_join(game: Game, new_player: Player) -> ValidationResult:
    """Validate a join before processing.

    Checks:
    - The game still has an open seat
    - The joining player takes the circle seat
    - The joining identity is not the initiator (no self-play)
    """
    if game.game_state.phase != GamePhase.AWAITING_OPPONENT:
        logger.warning(
            "Validation failed: INVALID_JOIN, phase=%s",
            game.game_state.phase.value,
        )
        return ValidationResult.error(
            ContractError.INVALID_JOIN,
            "Game is not awaiting an opponent",
        )

    if new_player.mark != Mark.CIRCLE:
        logger.warning("Validation failed: INVALID_JOIN, mark=%s", new_player.mark.value)
        return ValidationResult.error(
            ContractError.INVALID_JOIN,
            "The joining player must play circle",
        )

    if new_player.address == game.cross.address:
        logger.warning(
            "Validation failed: INVALID_JOIN, self-play by %s",
            new_player.address.hex()[:8],
        )
        return ValidationResult.error(
            ContractError.INVALID_JOIN,
            "Cannot join your own game",
        )

    return ValidationResult.ok()


def validate_move(game: Game, player: Player, the_move: int) -> ValidationResult:
    """Validate a move before processing.

    Checks:
    - The game is in progress
    - It's this player's turn
    - The cell index is on the board and the cell is empty
    """
    state = game.game_state
    if state.phase != GamePhase.IN_PROGRESS:
        logger.warning("Validation failed: INVALID_GAME_STATE, phase=%s", state.phase.value)
        return ValidationResult.error(
            ContractError.INVALID_GAME_STATE,
            f"Cannot move in a game that is {state.phase.value}",
        )

    if state.player != player:
        logger.warning(
            "Validation failed: NOT_MY_TURN, current=%s, attempted=%s",
            state.player.short(),
            player.short(),
        )
        return ValidationResult.error(
            ContractError.NOT_MY_TURN,
            "It's not your turn",
        )

    if not 0 <= the_move < BOARD_SIZE:
        logger.warning("Validation failed: INVALID_MOVE, index=%d out of range", the_move)
        return ValidationResult.error(
            ContractError.INVALID_MOVE,
            f"Cell {the_move} is not on the board",
        )

    if game.board[the_move] is not None:
        logger.warning("Validation failed: INVALID_MOVE, cell=%d occupied", the_move)
        return ValidationResult.error(
            ContractError.INVALID_MOVE,
            f"Cell {the_move} is already occupied",
        )

    return ValidationResult.ok()
