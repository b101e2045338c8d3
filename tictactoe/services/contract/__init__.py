"""Contract entry points and dispatcher."""

from .base import InvocationContext, InvocationResult
from .dispatch import invoke
from .invocations import (
    CreateGameInvocation,
    GameViewInvocation,
    GameViewPlayersInvocation,
    InitInvocation,
    Invocation,
    JoinGameInvocation,
    MakeMoveInvocation,
    ViewInvocation,
    build_invocation,
)

__all__ = [
    "InvocationContext",
    "InvocationResult",
    "invoke",
    "Invocation",
    "InitInvocation",
    "CreateGameInvocation",
    "JoinGameInvocation",
    "MakeMoveInvocation",
    "ViewInvocation",
    "GameViewInvocation",
    "GameViewPlayersInvocation",
    "build_invocation",
]
