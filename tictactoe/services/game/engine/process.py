"""Transitions of a single game.

This module provides the per-game state machine:
- create_game(): a fresh game awaiting an opponent
- join_game(): seat the opponent and hand the first turn to cross
- make_move(): place a mark, then finish the game or pass the turn

Every transition returns a new Game; the input game is never modified.
"""

import logging

from tictactoe.schemas.game_engine import Board, Game, GameState, Player

from .events import GameEvent, GameFinished, MoveMade, PlayerJoined, TurnPassed
from .outcome import evaluate_move
from .validation import ProcessResult, validate_join, validate_move

logger = logging.getLogger(__name__)


def create_game(initiator: bytes) -> Game:
    """Create a new game where `initiator` plays cross."""
    return Game(
        game_state=GameState.awaiting_opponent(),
        board=Board.empty(),
        cross=Player.cross(initiator),
        circle=None,
    )


def other_player(game: Game, player: Player) -> Player:
    """Return whichever seated player is not `player`."""
    if player == game.cross:
        if game.circle is None:
            raise ValueError("Game has no opponent yet")
        return game.circle
    return game.cross


def join_game(game: Game, new_player: Player) -> ProcessResult[Game]:
    """Seat `new_player` as circle. The initiator always moves first.

    Args:
        game: Current game (must be awaiting an opponent).
        new_player: The joining player, playing circle.

    Returns:
        ProcessResult with the game in progress and cross to move.
    """
    validation = validate_join(game, new_player)
    if not validation.is_valid:
        return ProcessResult.failure(validation.error_code, validation.error_message)

    new_game = game.model_copy(
        update={
            "circle": new_player,
            "game_state": GameState.in_progress(game.cross),
        }
    )
    logger.info(
        "Player joined: circle=%s, cross=%s",
        new_player.short(),
        game.cross.short(),
    )
    return ProcessResult.ok(new_game, [PlayerJoined(circle=new_player)])


def make_move(game: Game, player: Player, the_move: int) -> ProcessResult[Game]:
    """Place `player`'s mark on cell `the_move` and advance the game.

    Handles:
    - Rejecting moves out of turn, off the board or onto occupied cells
    - Finishing the game on a completed line or a full board
    - Passing the turn to the other player otherwise

    Args:
        game: Current game.
        player: The player making the move.
        the_move: Board index in [0, 8].

    Returns:
        ProcessResult with the new game and the events of the move.
    """
    validation = validate_move(game, player, the_move)
    if not validation.is_valid:
        return ProcessResult.failure(validation.error_code, validation.error_message)

    board = game.board.place(the_move, player)
    events: list[GameEvent] = [MoveMade(player=player, cell=the_move)]
    logger.debug("Move applied: player=%s, cell=%d", player.short(), the_move)

    outcome = evaluate_move(board, player, the_move)
    if outcome.finished:
        game_state = GameState.finished(outcome.winner)
        events.append(GameFinished(winner=outcome.winner))
        logger.info(
            "Game finished: winner=%s",
            outcome.winner.short() if outcome.winner else "draw",
        )
    else:
        next_player = other_player(game, player)
        game_state = GameState.in_progress(next_player)
        events.append(TurnPassed(next_player=next_player))

    new_game = game.model_copy(update={"board": board, "game_state": game_state})
    return ProcessResult.ok(new_game, events)
