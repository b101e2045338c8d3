"""Read-only views of the registry.

- build_view_state(): every game, ordered by id
- encode_game_view(): one game packed into 32 bits
- encode_players(): the raw identities seated at a game

The packed layout is consumed by external clients and must stay fixed:
bits 0-3 hold the state tag, then each cell i takes 2 bits at 4 + 2*i.
"""

from pydantic import BaseModel

from tictactoe.schemas.game_engine import (
    BOARD_SIZE,
    IDENTITY_LENGTH,
    Game,
    GamePhase,
    GameState,
    Mark,
    Registry,
)

from .codec import CodecError

STATE_BITS = 4
CELL_BITS = 2
CELL_OFFSET = 4

# State tags
AWAITING_OPPONENT_TAG = 0
CROSS_TO_MOVE_TAG = 1
CIRCLE_TO_MOVE_TAG = 2
DRAW_TAG = 3
CROSS_WON_TAG = 4
CIRCLE_WON_TAG = 5

# Cell values
EMPTY_CELL = 0
MARK_VALUES: dict[Mark, int] = {Mark.CROSS: 1, Mark.CIRCLE: 2}


class ViewState(BaseModel):
    """All games keyed by id, in ascending id order."""

    games: dict[int, Game]


class GameViewSummary(BaseModel):
    """A packed game view unpacked for display.

    `mark` is the mark to move while in progress and the winning mark once
    finished (None for a draw or while awaiting an opponent).
    """

    phase: GamePhase
    mark: Mark | None = None
    cells: tuple[Mark | None, ...]


def build_view_state(registry: Registry) -> ViewState:
    return ViewState(games={game_id: registry.games[game_id] for game_id in sorted(registry.games)})


def _state_tag(state: GameState) -> int:
    if state.phase == GamePhase.AWAITING_OPPONENT:
        return AWAITING_OPPONENT_TAG
    if state.phase == GamePhase.IN_PROGRESS:
        return CROSS_TO_MOVE_TAG if state.player.mark == Mark.CROSS else CIRCLE_TO_MOVE_TAG
    if state.player is None:
        return DRAW_TAG
    return CROSS_WON_TAG if state.player.mark == Mark.CROSS else CIRCLE_WON_TAG


def encode_game_view(game: Game) -> int:
    """Pack a game's state and board into an unsigned 32-bit value."""
    value = _state_tag(game.game_state)
    for index, cell in enumerate(game.board.cells):
        cell_value = EMPTY_CELL if cell is None else MARK_VALUES[cell.mark]
        value |= cell_value << (CELL_OFFSET + CELL_BITS * index)
    return value


def decode_game_view(value: int) -> GameViewSummary:
    """Unpack a value produced by encode_game_view."""
    if not 0 <= value < 1 << (CELL_OFFSET + CELL_BITS * BOARD_SIZE):
        raise CodecError(f"Game view {value:#x} has bits outside the packed layout")

    tag = value & ((1 << STATE_BITS) - 1)
    if tag == AWAITING_OPPONENT_TAG:
        phase, mark = GamePhase.AWAITING_OPPONENT, None
    elif tag in (CROSS_TO_MOVE_TAG, CIRCLE_TO_MOVE_TAG):
        phase = GamePhase.IN_PROGRESS
        mark = Mark.CROSS if tag == CROSS_TO_MOVE_TAG else Mark.CIRCLE
    elif tag == DRAW_TAG:
        phase, mark = GamePhase.FINISHED, None
    elif tag in (CROSS_WON_TAG, CIRCLE_WON_TAG):
        phase = GamePhase.FINISHED
        mark = Mark.CROSS if tag == CROSS_WON_TAG else Mark.CIRCLE
    else:
        raise CodecError(f"Unknown game state tag {tag}")

    marks = {cell_value: mark for mark, cell_value in MARK_VALUES.items()}
    cells: list[Mark | None] = []
    for index in range(BOARD_SIZE):
        cell_value = (value >> (CELL_OFFSET + CELL_BITS * index)) & ((1 << CELL_BITS) - 1)
        if cell_value == EMPTY_CELL:
            cells.append(None)
        elif cell_value in marks:
            cells.append(marks[cell_value])
        else:
            raise CodecError(f"Unknown cell value {cell_value} at index {index}")

    return GameViewSummary(phase=phase, mark=mark, cells=tuple(cells))


def encode_players(game: Game) -> bytes:
    """Cross's identity followed by circle's, if seated: 32 or 64 bytes."""
    out = game.cross.address
    if game.circle is not None:
        out += game.circle.address
    return out


def decode_players(data: bytes) -> tuple[bytes, bytes | None]:
    if len(data) == IDENTITY_LENGTH:
        return data, None
    if len(data) == 2 * IDENTITY_LENGTH:
        return data[:IDENTITY_LENGTH], data[IDENTITY_LENGTH:]
    raise CodecError(f"Expected 32 or 64 identity bytes, got {len(data)}")
