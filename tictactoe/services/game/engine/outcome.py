"""Win and draw detection.

Evaluated once per successful move, looking only at the lines that pass
through the cell just played instead of rescanning the whole board.
"""

import logging
from dataclasses import dataclass

from tictactoe.schemas.game_engine import Board, Player

logger = logging.getLogger(__name__)

CENTER = 4


@dataclass(frozen=True)
class Outcome:
    """Whether a move ended the game and, if so, who won (None for a draw)."""

    finished: bool
    winner: Player | None = None


ONGOING = Outcome(finished=False)


def row_check(board: Board, player: Player, the_move: int) -> bool:
    """True if `player` holds the whole row containing `the_move`."""
    row_offset = (the_move // 3) * 3
    return all(board[i] == player for i in range(row_offset, row_offset + 3))


def column_check(board: Board, player: Player, the_move: int) -> bool:
    """True if `player` holds the whole column containing `the_move`."""
    column_offset = the_move % 3
    return all(board[i] == player for i in range(column_offset, 9, 3))


def diagonal_check(board: Board, player: Player) -> bool:
    """True if `player` holds two opposite corners.

    Only meaningful once the caller has established that `player` holds
    the center, which every diagonal passes through.
    """
    upper_left = board[0] == player
    upper_right = board[2] == player
    lower_left = board[6] == player
    lower_right = board[8] == player
    return (upper_left and lower_right) or (upper_right and lower_left)


def evaluate_move(board: Board, player: Player, the_move: int) -> Outcome:
    """Decide the outcome of `player` having just played `the_move`.

    Lines are checked in order row, column, diagonal. A completed line
    always wins over a full board.
    """
    if row_check(board, player, the_move):
        logger.debug("Row win: player=%s, move=%d", player.short(), the_move)
        return Outcome(finished=True, winner=player)

    if column_check(board, player, the_move):
        logger.debug("Column win: player=%s, move=%d", player.short(), the_move)
        return Outcome(finished=True, winner=player)

    if board[CENTER] == player and diagonal_check(board, player):
        logger.debug("Diagonal win: player=%s, move=%d", player.short(), the_move)
        return Outcome(finished=True, winner=player)

    if board.is_full():
        logger.debug("Board full without a winner")
        return Outcome(finished=True, winner=None)

    return ONGOING
