"""Base types and helpers for contract entry points."""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TypeVar

from tictactoe.schemas.contract import AccountAddress, Address
from tictactoe.schemas.game_engine import Registry
from tictactoe.services.game.engine import CodecError, ContractError, GameEvent, ProcessResult


@dataclass
class InvocationContext:
    """Context supplied by the host for each invocation."""

    sender: Address | None
    contract_name: str = "tictactoe"

    def receive_name(self, operation: str) -> str:
        return f"{self.contract_name}.{operation}"


@dataclass
class InvocationResult:
    """Result returned by an entry point.

    `state` is the registry to commit; it is only set when a mutating
    invocation succeeded.
    """

    success: bool
    state: Registry | None = None
    return_value: bytes | None = None
    events: list[GameEvent] = field(default_factory=list)
    error_code: ContractError | None = None
    error_message: str | None = None

    @property
    def reject_code(self) -> int | None:
        return self.error_code.reject_code if self.error_code else None


def error_response(error_code: ContractError, message: str) -> InvocationResult:
    """Build an error InvocationResult."""
    return InvocationResult(
        success=False,
        error_code=error_code,
        error_message=message,
    )


def from_process_result(result: ProcessResult[Registry]) -> InvocationResult:
    """Translate a registry ProcessResult into an InvocationResult."""
    if not result.success:
        return error_response(
            result.error_code,
            result.error_message or "Failed to process invocation",
        )
    return InvocationResult(success=True, state=result.state, events=result.events)


def require_account(ctx: InvocationContext) -> tuple[bytes | None, InvocationResult | None]:
    """Require the sender to be an end-user account.

    Returns:
        Tuple of (account_identity, error_result). One will be None.
    """
    if not isinstance(ctx.sender, AccountAddress):
        return None, error_response(
            ContractError.NOT_A_HUMAN,
            "Only accounts may call this entry point",
        )
    return ctx.sender.address, None


T = TypeVar("T")


def parse_params(
    parameter: bytes,
    decoder: Callable[[bytes], T],
) -> tuple[T | None, InvocationResult | None]:
    """Decode a parameter payload.

    Returns:
        Tuple of (params, error_result). One will be None.
    """
    try:
        return decoder(parameter), None
    except CodecError as e:
        return None, error_response(ContractError.PARSE_PARAMS, str(e))
