"""Transport client boundary.

The concrete client (browser automation, bridge process, test double) lives
outside the engine. It pushes TransportEvents onto the dispatcher queue and
accepts the calls below.
"""

from collections.abc import Callable
from typing import Protocol, runtime_checkable


@runtime_checkable
class TransportClient(Protocol):
    """Messaging transport session client."""

    async def initialize(self) -> None:
        """Start the session; events follow on the dispatcher queue."""
        ...

    async def destroy(self) -> None:
        """Tear the session down, keeping persisted credentials."""
        ...

    async def logout(self) -> None:
        """Tear the session down and discard persisted credentials."""
        ...

    async def send(self, address: str, text: str) -> bool:
        """Send a text message; returns False if the transport refused it."""
        ...


ClientFactory = Callable[[], TransportClient]
