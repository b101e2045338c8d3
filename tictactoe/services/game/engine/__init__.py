"""Game engine module - pure functional game logic.

This module provides the core game engine with:
- Per-game transitions (create, join, move) with win/draw detection
- Registry operations keyed by incrementing game ids
- ProcessResult pattern for error handling
- Compact views and the binary wire codec

Usage:
    from tictactoe.services.game.engine import registry, ContractError

    result = registry.make_move(state, game_id=0, mover=address, the_move=4)

    if result.success:
        new_state = result.state
        events = result.events
    else:
        # Handle error
        print(f"Error: {result.error_code} - {result.error_message}")
"""

from . import registry

# Codec
from .codec import (
    CodecError,
    decode_game,
    decode_join_params,
    decode_make_move_params,
    decode_view_state,
    encode_game,
    encode_join_params,
    encode_make_move_params,
    encode_view_state,
)

# Events
from .events import (
    AnyGameEvent,
    GameCreated,
    GameEvent,
    GameFinished,
    MoveMade,
    PlayerJoined,
    TurnPassed,
)

# Win detection
from .outcome import Outcome, evaluate_move

# Single-game transitions
from .process import create_game, join_game, make_move, other_player

# Result types
from .validation import (
    ContractError,
    ProcessResult,
    ValidationResult,
    validate_join,
    validate_move,
)

# Views
from .views import (
    GameViewSummary,
    ViewState,
    build_view_state,
    decode_game_view,
    decode_players,
    encode_game_view,
    encode_players,
)

__all__ = [
    "registry",
    # Codec
    "CodecError",
    "decode_game",
    "decode_join_params",
    "decode_make_move_params",
    "decode_view_state",
    "encode_game",
    "encode_join_params",
    "encode_make_move_params",
    "encode_view_state",
    # Events
    "GameEvent",
    "AnyGameEvent",
    "GameCreated",
    "PlayerJoined",
    "MoveMade",
    "TurnPassed",
    "GameFinished",
    # Processing
    "Outcome",
    "evaluate_move",
    "create_game",
    "join_game",
    "make_move",
    "other_player",
    # Validation
    "ContractError",
    "ProcessResult",
    "ValidationResult",
    "validate_join",
    "validate_move",
    # Views
    "ViewState",
    "GameViewSummary",
    "build_view_state",
    "encode_game_view",
    "decode_game_view",
    "encode_players",
    "decode_players",
]
