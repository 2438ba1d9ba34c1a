"""Protocol for swarm coordination strategies."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from colony.protocols.agent import Agent
    from colony.swarm.models import Message
    from colony.swarm.swarm import Swarm


@runtime_checkable
class Coordinator(Protocol):
    """Structural interface for a pluggable coordination strategy.

    Strategies are swapped on a :class:`~colony.swarm.Swarm` by composition;
    they do not inherit from one another.
    """

    def coordinate(self, swarm: Swarm, input: Any = None) -> Any: ...
    def assign_task(self, swarm: Swarm, agent_or_id: Agent | str, task: Any) -> Any: ...
    def route_message(
        self, swarm: Swarm, message: Message, recipient: Agent | str | None = None
    ) -> None: ...
    def broadcast_message(
        self, swarm: Swarm, message: Message, sender: Agent | str | None = None
    ) -> None: ...
