from enum import Enum
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
    model_validator,
)

BOARD_SIZE = 9
IDENTITY_LENGTH = 32
U64_MAX = 2**64 - 1


def _identity_from_hex(value: Any) -> Any:
    if isinstance(value, str):
        return bytes.fromhex(value)
    return value


# Opaque 32-byte account identity, hex encoded in JSON
Identity = Annotated[
    bytes,
    BeforeValidator(_identity_from_hex),
    Field(min_length=IDENTITY_LENGTH, max_length=IDENTITY_LENGTH),
    PlainSerializer(lambda value: value.hex(), return_type=str, when_used="json"),
]

GameId = Annotated[int, Field(ge=0, le=U64_MAX)]


class Mark(str, Enum):
    CROSS = "cross"
    CIRCLE = "circle"


class GamePhase(str, Enum):
    AWAITING_OPPONENT = "awaiting_opponent"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


class Player(BaseModel):
    """An identity seated at a game with a mark."""

    model_config = ConfigDict(frozen=True)

    mark: Mark
    address: Identity

    @classmethod
    def cross(cls, address: bytes) -> "Player":
        return cls(mark=Mark.CROSS, address=address)

    @classmethod
    def circle(cls, address: bytes) -> "Player":
        return cls(mark=Mark.CIRCLE, address=address)

    def short(self) -> str:
        """Abbreviated form for log lines."""
        return f"{self.mark.value}:{self.address.hex()[:8]}"


# A cell is either empty (None) or occupied by a player
Cell = Player | None


class Board(BaseModel):
    """Row-major 3x3 grid, index = row * 3 + col."""

    model_config = ConfigDict(frozen=True)

    cells: tuple[Player | None, ...] = Field(
        default=(None,) * BOARD_SIZE,
        min_length=BOARD_SIZE,
        max_length=BOARD_SIZE,
    )

    @classmethod
    def empty(cls) -> "Board":
        return cls()

    def __getitem__(self, index: int) -> Cell:
        return self.cells[index]

    def place(self, index: int, player: Player) -> "Board":
        """Return a new board with `player` occupying `index`."""
        cells = list(self.cells)
        cells[index] = player
        return self.model_copy(update={"cells": tuple(cells)})

    def is_full(self) -> bool:
        return all(cell is not None for cell in self.cells)


class GameState(BaseModel):
    """Lifecycle state of a game.

    `player` is the turn holder while IN_PROGRESS, the winner once FINISHED
    (None for a draw) and always None while AWAITING_OPPONENT.
    """

    model_config = ConfigDict(frozen=True)

    phase: GamePhase
    player: Player | None = None

    @model_validator(mode="after")
    def check_player_matches_phase(self) -> "GameState":
        if self.phase == GamePhase.AWAITING_OPPONENT and self.player is not None:
            raise ValueError("A game awaiting an opponent has no player to move")
        if self.phase == GamePhase.IN_PROGRESS and self.player is None:
            raise ValueError("A game in progress must have a turn holder")
        return self

    @classmethod
    def awaiting_opponent(cls) -> "GameState":
        return cls(phase=GamePhase.AWAITING_OPPONENT)

    @classmethod
    def in_progress(cls, player: Player) -> "GameState":
        return cls(phase=GamePhase.IN_PROGRESS, player=player)

    @classmethod
    def finished(cls, winner: Player | None) -> "GameState":
        return cls(phase=GamePhase.FINISHED, player=winner)

    @property
    def turn_holder(self) -> Player | None:
        return self.player if self.phase == GamePhase.IN_PROGRESS else None

    @property
    def winner(self) -> Player | None:
        return self.player if self.phase == GamePhase.FINISHED else None

    @property
    def is_draw(self) -> bool:
        return self.phase == GamePhase.FINISHED and self.player is None


class Game(BaseModel):
    """A single game of tic tac toe. The initiator always plays cross."""

    game_state: GameState
    board: Board
    cross: Player
    circle: Player | None = None

    @model_validator(mode="after")
    def check_seats(self) -> "Game":
        if self.cross.mark != Mark.CROSS:
            raise ValueError("The initiator must play cross")
        if self.circle is not None:
            if self.circle.mark != Mark.CIRCLE:
                raise ValueError("The opponent must play circle")
            if self.circle.address == self.cross.address:
                raise ValueError("A player cannot play against themself")
        return self


class Registry(BaseModel):
    """All games of the contract, keyed by a monotonically assigned id."""

    counter: GameId = 0
    games: dict[GameId, Game] = Field(default_factory=dict)

    @model_validator(mode="after")
    def check_ids_below_counter(self) -> "Registry":
        for game_id in self.games:
            if game_id >= self.counter:
                raise ValueError(f"Game id {game_id} is not below counter {self.counter}")
        return self

    def get_game(self, game_id: int) -> Game | None:
        return self.games.get(game_id)
