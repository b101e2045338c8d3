"""Invocation types - one per contract entry point."""

from typing import Annotated, Literal

from pydantic import BaseModel, Field

from tictactoe.schemas.contract import Operation


class InitInvocation(BaseModel):
    """Set up an empty registry."""

    operation: Literal["init"] = "init"


class CreateGameInvocation(BaseModel):
    """Sender creates a game and plays cross."""

    operation: Literal["create_game"] = "create_game"


class JoinGameInvocation(BaseModel):
    """Sender joins a game as circle. Parameter: `{game_id: u64}`."""

    operation: Literal["join_game"] = "join_game"
    parameter: bytes = b""


class MakeMoveInvocation(BaseModel):
    """Sender marks a cell. Parameter: `{game_id: u64, the_move: u64}`."""

    operation: Literal["make_move"] = "make_move"
    parameter: bytes = b""


class ViewInvocation(BaseModel):
    """Read every game."""

    operation: Literal["view"] = "view"


class GameViewInvocation(BaseModel):
    """Read one game packed into 32 bits. Parameter: `{game_id: u64}`."""

    operation: Literal["game_view"] = "game_view"
    parameter: bytes = b""


class GameViewPlayersInvocation(BaseModel):
    """Read the identities seated at a game. Parameter: `{game_id: u64}`."""

    operation: Literal["game_view_players"] = "game_view_players"
    parameter: bytes = b""


# Union type for all invocations
Invocation = Annotated[
    InitInvocation
    | CreateGameInvocation
    | JoinGameInvocation
    | MakeMoveInvocation
    | ViewInvocation
    | GameViewInvocation
    | GameViewPlayersInvocation,
    Field(discriminator="operation"),
]


def build_invocation(operation: str, parameter: bytes = b"") -> Invocation:
    """Build a typed invocation from an operation name and raw parameter bytes.

    Operations that take no parameter ignore `parameter`.

    Raises:
        ValueError: If the operation name is unknown.
    """
    op = Operation(operation)

    if op == Operation.INIT:
        return InitInvocation()
    elif op == Operation.CREATE_GAME:
        return CreateGameInvocation()
    elif op == Operation.JOIN_GAME:
        return JoinGameInvocation(parameter=parameter)
    elif op == Operation.MAKE_MOVE:
        return MakeMoveInvocation(parameter=parameter)
    elif op == Operation.VIEW:
        return ViewInvocation()
    elif op == Operation.GAME_VIEW:
        return GameViewInvocation(parameter=parameter)
    else:
        return GameViewPlayersInvocation(parameter=parameter)
