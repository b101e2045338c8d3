"""Main entry point for contract invocations.

Decodes parameters, checks the sender, runs the registry operation and
encodes the return value. Exactly one branch per invocation type.
"""

import logging
from typing import assert_never

from tictactoe.schemas.game_engine import Game, Player, Registry
from tictactoe.services.game.engine import (
    ContractError,
    build_view_state,
    decode_join_params,
    decode_make_move_params,
    encode_game_view,
    encode_players,
    encode_view_state,
    registry,
)
from tictactoe.services.game.engine.codec import encode_u32

from .base import (
    InvocationContext,
    InvocationResult,
    error_response,
    from_process_result,
    parse_params,
    require_account,
)
from .invocations import (
    CreateGameInvocation,
    GameViewInvocation,
    GameViewPlayersInvocation,
    InitInvocation,
    Invocation,
    JoinGameInvocation,
    MakeMoveInvocation,
    ViewInvocation,
)

logger = logging.getLogger(__name__)


def invoke(
    state: Registry | None,
    invocation: Invocation,
    ctx: InvocationContext,
) -> InvocationResult:
    """Run one invocation against the current registry.

    Args:
        state: The committed registry, or None before initialization.
        invocation: The typed invocation to run.
        ctx: Sender and contract details from the host.

    Returns:
        InvocationResult. On success of a mutating invocation `state`
        holds the registry to commit; on failure nothing is to be
        committed.

    Raises:
        RuntimeError: If a non-init invocation arrives before initialization.
    """
    name = ctx.receive_name(invocation.operation)
    logger.info("Processing invocation: %s", name)

    if isinstance(invocation, InitInvocation):
        result = InvocationResult(success=True, state=registry.create_registry())
    else:
        if state is None:
            raise RuntimeError(f"{ctx.contract_name} is not initialized")

        if isinstance(invocation, CreateGameInvocation):
            result = _handle_create_game(state, ctx)
        elif isinstance(invocation, JoinGameInvocation):
            result = _handle_join_game(state, invocation, ctx)
        elif isinstance(invocation, MakeMoveInvocation):
            result = _handle_make_move(state, invocation, ctx)
        elif isinstance(invocation, ViewInvocation):
            result = _handle_view(state)
        elif isinstance(invocation, GameViewInvocation):
            result = _handle_game_view(state, invocation)
        elif isinstance(invocation, GameViewPlayersInvocation):
            result = _handle_game_view_players(state, invocation)
        else:
            assert_never(invocation)

    if result.success:
        logger.info("Invocation succeeded: %s, events=%d", name, len(result.events))
    else:
        logger.warning(
            "Invocation rejected: %s, code=%s (%d), message=%s",
            name,
            result.error_code.value,
            result.reject_code,
            result.error_message,
        )
    return result


def _handle_create_game(state: Registry, ctx: InvocationContext) -> InvocationResult:
    sender, error = require_account(ctx)
    if error:
        return error
    return from_process_result(registry.create_game(state, sender))


def _handle_join_game(
    state: Registry,
    invocation: JoinGameInvocation,
    ctx: InvocationContext,
) -> InvocationResult:
    sender, error = require_account(ctx)
    if error:
        return error
    params, error = parse_params(invocation.parameter, decode_join_params)
    if error:
        return error
    logger.debug("join_game params: game_id=%d", params.game_id)
    return from_process_result(registry.join(state, params.game_id, Player.circle(sender)))


def _handle_make_move(
    state: Registry,
    invocation: MakeMoveInvocation,
    ctx: InvocationContext,
) -> InvocationResult:
    sender, error = require_account(ctx)
    if error:
        return error
    params, error = parse_params(invocation.parameter, decode_make_move_params)
    if error:
        return error
    logger.debug(
        "make_move params: game_id=%d, the_move=%d",
        params.game_id,
        params.the_move,
    )
    return from_process_result(
        registry.make_move(state, params.game_id, sender, params.the_move)
    )


def _handle_view(state: Registry) -> InvocationResult:
    view = build_view_state(state)
    return InvocationResult(success=True, return_value=encode_view_state(view.games))


def _lookup_game(
    state: Registry,
    parameter: bytes,
) -> tuple[Game | None, InvocationResult | None]:
    params, error = parse_params(parameter, decode_join_params)
    if error:
        return None, error
    game = state.get_game(params.game_id)
    if game is None:
        return None, error_response(
            ContractError.INVALID_GAME_ID,
            f"No game with id {params.game_id}",
        )
    return game, None


def _handle_game_view(state: Registry, invocation: GameViewInvocation) -> InvocationResult:
    game, error = _lookup_game(state, invocation.parameter)
    if error:
        return error
    return InvocationResult(success=True, return_value=encode_u32(encode_game_view(game)))


def _handle_game_view_players(
    state: Registry,
    invocation: GameViewPlayersInvocation,
) -> InvocationResult:
    game, error = _lookup_game(state, invocation.parameter)
    if error:
        return error
    return InvocationResult(success=True, return_value=encode_players(game))
