"""In-process stand-in for the hosting environment.

The host owns contract storage and runs invocations one at a time. Each
invocation starts from the last committed snapshot and its new state is
committed only if it succeeded, so rejected calls leave storage untouched.
"""

import logging
from typing import Any, Protocol

from tictactoe.config import Settings, get_settings
from tictactoe.schemas.contract import Address, Operation
from tictactoe.schemas.game_engine import Registry

from .contract import (
    Invocation,
    InvocationContext,
    InvocationResult,
    build_invocation,
    invoke,
)

logger = logging.getLogger(__name__)


class HostStorage(Protocol):
    """Durable key-value storage provided by the host."""

    def get(self, key: str) -> dict[str, Any] | None: ...

    def set(self, key: str, value: dict[str, Any]) -> None: ...


class InMemoryStorage:
    """Dict-backed HostStorage for local use and tests."""

    def __init__(self) -> None:
        self._data: dict[str, dict[str, Any]] = {}

    def get(self, key: str) -> dict[str, Any] | None:
        return self._data.get(key)

    def set(self, key: str, value: dict[str, Any]) -> None:
        self._data[key] = value


class ContractHost:
    """Runs contract invocations against host storage."""

    def __init__(
        self,
        storage: HostStorage | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.storage = storage if storage is not None else InMemoryStorage()
        self.settings = settings or get_settings()

    @property
    def is_initialized(self) -> bool:
        return self.storage.get(self.settings.STATE_KEY) is not None

    def load_registry(self) -> Registry:
        """Rebuild the registry from the committed snapshot."""
        snapshot = self.storage.get(self.settings.STATE_KEY)
        if snapshot is None:
            raise RuntimeError(f"{self.settings.CONTRACT_NAME} is not initialized")
        return Registry.model_validate(snapshot)

    def initialize(self, sender: Address | None = None) -> InvocationResult:
        """Create the empty registry. Fails if already initialized."""
        if self.is_initialized:
            raise RuntimeError(f"{self.settings.CONTRACT_NAME} is already initialized")
        return self._run(None, build_invocation(Operation.INIT.value), sender)

    def invoke(
        self,
        operation: str,
        sender: Address | None,
        parameter: bytes = b"",
    ) -> InvocationResult:
        """Run a named entry point as `sender` with raw `parameter` bytes.

        Raises:
            ValueError: If the operation name is unknown.
            RuntimeError: If the contract is not initialized.
        """
        invocation = build_invocation(operation, parameter)
        if invocation.operation == Operation.INIT.value:
            return self.initialize(sender)
        return self._run(self.load_registry(), invocation, sender)

    def _run(
        self,
        state: Registry | None,
        invocation: Invocation,
        sender: Address | None,
    ) -> InvocationResult:
        ctx = InvocationContext(sender=sender, contract_name=self.settings.CONTRACT_NAME)
        result = invoke(state, invocation, ctx)

        if result.success and Operation(invocation.operation).is_mutating:
            self.storage.set(self.settings.STATE_KEY, result.state.model_dump())
            logger.debug(
                "Committed state: counter=%d, games=%d",
                result.state.counter,
                len(result.state.games),
            )
        return result
