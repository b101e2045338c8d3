from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from .game_engine import U64_MAX, GameId, Identity

U64 = Annotated[int, Field(ge=0, le=U64_MAX)]


class Operation(str, Enum):
    """Entry points exposed by the contract."""

    # Mutating
    INIT = "init"
    CREATE_GAME = "create_game"
    JOIN_GAME = "join_game"
    MAKE_MOVE = "make_move"

    # Read-only
    VIEW = "view"
    GAME_VIEW = "game_view"
    GAME_VIEW_PLAYERS = "game_view_players"

    @property
    def is_mutating(self) -> bool:
        return self in (
            Operation.INIT,
            Operation.CREATE_GAME,
            Operation.JOIN_GAME,
            Operation.MAKE_MOVE,
        )


# Caller addresses supplied by the host
class AccountAddress(BaseModel):
    """An end-user account."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["account"] = "account"
    address: Identity


class ContractAddress(BaseModel):
    """Another contract instance."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["contract"] = "contract"
    index: U64
    subindex: U64 = 0


Address = Annotated[AccountAddress | ContractAddress, Field(discriminator="kind")]


# Decoded parameter payloads
class JoinParams(BaseModel):
    game_id: GameId


class MakeMoveParams(BaseModel):
    game_id: GameId
    the_move: U64
