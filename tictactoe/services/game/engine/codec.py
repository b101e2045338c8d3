"""Binary wire format for parameters and return values.

Integers are fixed-width little-endian. Enum-like values are a one-byte
tag followed by their payload, mirroring how the hosting runtime
serializes contract types.
"""

import logging

from pydantic import ValidationError

from tictactoe.schemas.contract import JoinParams, MakeMoveParams
from tictactoe.schemas.game_engine import (
    BOARD_SIZE,
    IDENTITY_LENGTH,
    Board,
    Game,
    GamePhase,
    GameState,
    Mark,
    Player,
)

logger = logging.getLogger(__name__)

# Tags
PLAYER_TAGS: dict[Mark, int] = {Mark.CROSS: 0, Mark.CIRCLE: 1}
PHASE_TAGS: dict[GamePhase, int] = {
    GamePhase.AWAITING_OPPONENT: 0,
    GamePhase.IN_PROGRESS: 1,
    GamePhase.FINISHED: 2,
}
NONE_TAG = 0
SOME_TAG = 1


class CodecError(ValueError):
    """Raised when bytes cannot be decoded into the expected value."""


class Cursor:
    """Sequential reader over a byte payload."""

    def __init__(self, data: bytes) -> None:
        self.data = bytes(data)
        self.offset = 0

    @property
    def remaining(self) -> int:
        return len(self.data) - self.offset

    def read(self, size: int) -> bytes:
        if size > self.remaining:
            raise CodecError(
                f"Need {size} bytes at offset {self.offset}, only {self.remaining} left"
            )
        chunk = self.data[self.offset : self.offset + size]
        self.offset += size
        return chunk

    def read_u8(self) -> int:
        return self.read(1)[0]

    def read_u32(self) -> int:
        return int.from_bytes(self.read(4), "little")

    def read_u64(self) -> int:
        return int.from_bytes(self.read(8), "little")


def encode_u32(value: int) -> bytes:
    return value.to_bytes(4, "little")


def encode_u64(value: int) -> bytes:
    return value.to_bytes(8, "little")


# --- Parameters ---


def encode_join_params(params: JoinParams) -> bytes:
    return encode_u64(params.game_id)


def decode_join_params(data: bytes) -> JoinParams:
    """Read `{game_id: u64}`. Trailing bytes are ignored."""
    cursor = Cursor(data)
    return JoinParams(game_id=cursor.read_u64())


def encode_make_move_params(params: MakeMoveParams) -> bytes:
    return encode_u64(params.game_id) + encode_u64(params.the_move)


def decode_make_move_params(data: bytes) -> MakeMoveParams:
    """Read `{game_id: u64, the_move: u64}`. Trailing bytes are ignored."""
    cursor = Cursor(data)
    game_id = cursor.read_u64()
    the_move = cursor.read_u64()
    return MakeMoveParams(game_id=game_id, the_move=the_move)


# --- Game values ---


def encode_player(player: Player) -> bytes:
    return bytes([PLAYER_TAGS[player.mark]]) + player.address


def _read_player(cursor: Cursor) -> Player:
    tag = cursor.read_u8()
    marks = {value: mark for mark, value in PLAYER_TAGS.items()}
    if tag not in marks:
        raise CodecError(f"Unknown player tag {tag}")
    return Player(mark=marks[tag], address=cursor.read(IDENTITY_LENGTH))


def encode_option_player(player: Player | None) -> bytes:
    if player is None:
        return bytes([NONE_TAG])
    return bytes([SOME_TAG]) + encode_player(player)


def _read_option_player(cursor: Cursor) -> Player | None:
    tag = cursor.read_u8()
    if tag == NONE_TAG:
        return None
    if tag == SOME_TAG:
        return _read_player(cursor)
    raise CodecError(f"Unknown option tag {tag}")


def encode_game_state(state: GameState) -> bytes:
    tag = bytes([PHASE_TAGS[state.phase]])
    if state.phase == GamePhase.AWAITING_OPPONENT:
        return tag
    if state.phase == GamePhase.IN_PROGRESS:
        return tag + encode_player(state.player)
    return tag + encode_option_player(state.player)


def _read_game_state(cursor: Cursor) -> GameState:
    tag = cursor.read_u8()
    if tag == PHASE_TAGS[GamePhase.AWAITING_OPPONENT]:
        return GameState.awaiting_opponent()
    if tag == PHASE_TAGS[GamePhase.IN_PROGRESS]:
        return GameState.in_progress(_read_player(cursor))
    if tag == PHASE_TAGS[GamePhase.FINISHED]:
        return GameState.finished(_read_option_player(cursor))
    raise CodecError(f"Unknown game state tag {tag}")


def encode_board(board: Board) -> bytes:
    # A cell serializes like an optional player: Empty or Occupied(player)
    return b"".join(encode_option_player(cell) for cell in board.cells)


def _read_board(cursor: Cursor) -> Board:
    return Board(cells=tuple(_read_option_player(cursor) for _ in range(BOARD_SIZE)))


def encode_game(game: Game) -> bytes:
    return (
        encode_game_state(game.game_state)
        + encode_board(game.board)
        + encode_player(game.cross)
        + encode_option_player(game.circle)
    )


def _read_game(cursor: Cursor) -> Game:
    game_state = _read_game_state(cursor)
    board = _read_board(cursor)
    cross = _read_player(cursor)
    circle = _read_option_player(cursor)
    return Game(game_state=game_state, board=board, cross=cross, circle=circle)


def decode_game(data: bytes) -> Game:
    cursor = Cursor(data)
    try:
        game = _read_game(cursor)
    except ValidationError as e:
        raise CodecError(f"Decoded game is inconsistent: {e}") from e
    if cursor.remaining:
        raise CodecError(f"{cursor.remaining} trailing bytes after game")
    return game


# --- Full view ---


def encode_view_state(games: dict[int, Game]) -> bytes:
    """Encode games as a u32 count followed by (u64 id, game) in ascending id order."""
    parts = [encode_u32(len(games))]
    for game_id in sorted(games):
        parts.append(encode_u64(game_id))
        parts.append(encode_game(games[game_id]))
    return b"".join(parts)


def decode_view_state(data: bytes) -> dict[int, Game]:
    cursor = Cursor(data)
    count = cursor.read_u32()
    games: dict[int, Game] = {}
    previous_id: int | None = None
    try:
        for _ in range(count):
            game_id = cursor.read_u64()
            if previous_id is not None and game_id <= previous_id:
                raise CodecError(f"Game ids out of order: {game_id} after {previous_id}")
            games[game_id] = _read_game(cursor)
            previous_id = game_id
    except ValidationError as e:
        raise CodecError(f"Decoded game is inconsistent: {e}") from e
    if cursor.remaining:
        raise CodecError(f"{cursor.remaining} trailing bytes after view state")
    logger.debug("Decoded view state with %d games", len(games))
    return games
