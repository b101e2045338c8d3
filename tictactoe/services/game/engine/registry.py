"""Registry operations over all games of the contract.

Game ids are handed out from an incrementing counter and never reused;
games are never removed. Like the per-game transitions these functions
return a new Registry and leave the one passed in untouched.
"""

import logging

from tictactoe.schemas.game_engine import Game, GamePhase, Player, Registry

from . import process
from .events import GameCreated, GameEvent
from .validation import ContractError, ProcessResult

logger = logging.getLogger(__name__)


def create_registry() -> Registry:
    """An empty registry with the counter at 0."""
    return Registry()


def _with_game(registry: Registry, game_id: int, game: Game) -> Registry:
    return registry.model_copy(update={"games": {**registry.games, game_id: game}})


def _assign_game_id(events: list[GameEvent], game_id: int) -> list[GameEvent]:
    for event in events:
        event.game_id = game_id
    return events


def create_game(registry: Registry, initiator: bytes) -> ProcessResult[Registry]:
    """Create a game for `initiator` under the next free id.

    Always succeeds. The new id is carried on the GameCreated event and
    equals the returned registry's counter minus one.
    """
    game_id = registry.counter
    game = process.create_game(initiator)
    new_registry = _with_game(registry, game_id, game).model_copy(
        update={"counter": game_id + 1}
    )
    logger.info("Game created: game_id=%d, cross=%s", game_id, game.cross.short())
    return ProcessResult.ok(new_registry, [GameCreated(game_id=game_id, cross=game.cross)])


def join(registry: Registry, game_id: int, new_player: Player) -> ProcessResult[Registry]:
    """Let `new_player` join game `game_id`."""
    game = registry.get_game(game_id)
    if game is None:
        logger.warning("Join rejected: unknown game_id=%d", game_id)
        return ProcessResult.failure(ContractError.INVALID_GAME_ID, f"No game with id {game_id}")

    result = process.join_game(game, new_player)
    if not result.success:
        return ProcessResult.failure(result.error_code, result.error_message)

    return ProcessResult.ok(
        _with_game(registry, game_id, result.state),
        _assign_game_id(result.events, game_id),
    )


def make_move(
    registry: Registry,
    game_id: int,
    mover: bytes,
    the_move: int,
) -> ProcessResult[Registry]:
    """Apply a move by identity `mover` to game `game_id`.

    Resolves which seat holds the turn, then checks that `mover` is the
    identity in that seat before delegating to the game.
    """
    game = registry.get_game(game_id)
    if game is None:
        logger.warning("Move rejected: unknown game_id=%d", game_id)
        return ProcessResult.failure(ContractError.INVALID_GAME_ID, f"No game with id {game_id}")

    state = game.game_state
    if state.phase != GamePhase.IN_PROGRESS:
        logger.warning(
            "Move rejected: game_id=%d, phase=%s",
            game_id,
            state.phase.value,
        )
        return ProcessResult.failure(
            ContractError.INVALID_GAME_STATE,
            f"Game {game_id} is {state.phase.value}",
        )

    turn_holder = state.player
    if turn_holder.address != mover:
        logger.warning(
            "Move rejected: game_id=%d, turn=%s, attempted=%s",
            game_id,
            turn_holder.short(),
            mover.hex()[:8],
        )
        return ProcessResult.failure(ContractError.NOT_MY_TURN, "It's not your turn")

    result = process.make_move(game, turn_holder, the_move)
    if not result.success:
        return ProcessResult.failure(result.error_code, result.error_message)

    return ProcessResult.ok(
        _with_game(registry, game_id, result.state),
        _assign_game_id(result.events, game_id),
    )
