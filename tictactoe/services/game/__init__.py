"""Game service module.

Provides:
- Game engine processing (engine/)
"""

# Re-export from engine for convenience
from .engine import (
    ContractError,
    ProcessResult,
    create_game,
    join_game,
    make_move,
    registry,
)

__all__ = [
    "ContractError",
    "ProcessResult",
    "create_game",
    "join_game",
    "make_move",
    "registry",
]
