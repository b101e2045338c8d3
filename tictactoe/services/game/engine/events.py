"""Game event types - emitted by successful state transitions.

Events describe what happened during an invocation, letting callers:
- Render updates without re-reading the full view
- Keep an audit log of moves
"""

from typing import Annotated, Literal

from pydantic import BaseModel, Field

from tictactoe.schemas.game_engine import Player


class GameEvent(BaseModel):
    """Base class for all game events."""

    event_type: str
    game_id: int | None = None  # Assigned by the registry


class GameCreated(GameEvent):
    """A new game was created and awaits an opponent."""

    event_type: Literal["game_created"] = "game_created"
    cross: Player


class PlayerJoined(GameEvent):
    """An opponent took the circle seat; cross moves first."""

    event_type: Literal["player_joined"] = "player_joined"
    circle: Player


class MoveMade(GameEvent):
    """A player put a mark on the board."""

    event_type: Literal["move_made"] = "move_made"
    player: Player
    cell: int = Field(..., ge=0, le=8)


class TurnPassed(GameEvent):
    """The turn moved to the other player."""

    event_type: Literal["turn_passed"] = "turn_passed"
    next_player: Player


class GameFinished(GameEvent):
    """The game ended with a winner or, when winner is None, a draw."""

    event_type: Literal["game_finished"] = "game_finished"
    winner: Player | None = None


AnyGameEvent = Annotated[
    GameCreated | PlayerJoined | MoveMade | TurnPassed | GameFinished,
    Field(discriminator="event_type"),
]
