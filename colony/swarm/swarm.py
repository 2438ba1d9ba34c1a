"""Agent registry and append-only message ledger."""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

from colony.logging import get_logger
from colony.swarm.coordinator import DefaultCoordinator
from colony.swarm.models import (
    AgentNotFoundError,
    ConfigurationError,
    Message,
    MessageType,
)

if TYPE_CHECKING:
    from colony.protocols import Agent, Coordinator

logger = get_logger("swarm")

MessageListener = Callable[[Message], None]


class Swarm:
    """A set of agents working together, plus the ledger of their messages.

    The swarm owns no agents: it holds references keyed by ``agent.name``.
    Registering a name that already exists replaces the earlier agent
    (last write wins). The ledger is append-only and kept in append order.

    All registry and ledger access goes through a single
    :class:`threading.RLock` so concurrent coordination calls keep the
    append order and never lose a registration.
    """

    def __init__(
        self,
        coordinator: Coordinator | None = None,
        agents: Iterable[Agent] = (),
    ):
        self._coordinator: Coordinator | None = coordinator or DefaultCoordinator()
        self._agents: dict[str, Agent] = {}
        self._messages: list[Message] = []
        self._listeners: list[MessageListener] = []
        self._lock = threading.RLock()

        for agent in agents:
            self.add_agent(agent)

    # --- Registry ---

    def add_agent(self, agent: Agent) -> None:
        """Register an agent under its name, replacing any agent of that name."""
        with self._lock:
            if agent.name in self._agents:
                logger.debug(f"Replacing agent {agent.name!r}")
            self._agents[agent.name] = agent
        logger.debug(f"Agent {agent.name!r} registered")

    def remove_agent(self, agent_id: str) -> bool:
        """Unregister an agent. Returns False if it was not registered."""
        with self._lock:
            if agent_id not in self._agents:
                return False
            del self._agents[agent_id]
        logger.debug(f"Agent {agent_id!r} removed")
        return True

    @property
    def agents(self) -> dict[str, Agent]:
        """Snapshot of the registry in registration order."""
        with self._lock:
            return dict(self._agents)

    def get_agent(self, agent_id: str) -> Agent | None:
        with self._lock:
            return self._agents.get(agent_id)

    def resolve_agent(self, agent_or_id: Agent | str) -> Agent:
        """Return the agent itself, or look a string id up in the registry.

        Raises:
            AgentNotFoundError: If a string id is not registered.
        """
        if not isinstance(agent_or_id, str):
            return agent_or_id
        agent = self.get_agent(agent_or_id)
        if agent is None:
            raise AgentNotFoundError(agent_or_id)
        return agent

    def __len__(self) -> int:
        with self._lock:
            return len(self._agents)

    def __contains__(self, agent_id: object) -> bool:
        with self._lock:
            return agent_id in self._agents

    # --- Coordination ---

    @property
    def coordinator(self) -> Coordinator | None:
        return self._coordinator

    @coordinator.setter
    def coordinator(self, coordinator: Coordinator | None) -> None:
        self._coordinator = coordinator
        logger.debug(f"Coordinator set to {type(coordinator).__name__}")

    def run(self, input: Any = None) -> Any:
        """Run the active coordinator on ``input`` and return its result verbatim.

        Raises:
            ConfigurationError: If no agents are registered or no coordinator is set.
        """
        if not len(self):
            raise ConfigurationError("Cannot run swarm with no agents")
        coordinator = self._coordinator
        if coordinator is None:
            raise ConfigurationError("Cannot run swarm without a coordinator")

        logger.info(f"Running swarm with {len(self)} agents via {type(coordinator).__name__}")
        return coordinator.coordinate(self, input)

    # --- Ledger ---

    def add_message(self, message: Message) -> None:
        """Append a message to the ledger and notify subscribers."""
        if not isinstance(message, Message):
            raise TypeError(f"Expected Message, got {type(message).__name__}")
        with self._lock:
            self._messages.append(message)
            listeners = list(self._listeners)
        logger.debug(
            f"Ledger +{message.message_type.value} {message.id[:8]} "
            f"{message.sender_id} -> {list(message.recipient_ids) or '*'}",
            extra={
                "message_id": message.id,
                "sender_id": message.sender_id,
                "recipients": list(message.recipient_ids),
                "message_type": message.message_type.value,
            },
        )
        for listener in listeners:
            listener(message)

    @property
    def messages(self) -> list[Message]:
        """Snapshot of the ledger in append order."""
        with self._lock:
            return list(self._messages)

    def find_messages(
        self,
        sender: str | None = None,
        recipient: str | None = None,
        message_type: MessageType | str | None = None,
    ) -> list[Message]:
        """Filter the ledger. A recipient filter also matches broadcasts."""
        wanted_type = MessageType(message_type) if message_type is not None else None
        found = []
        for message in self.messages:
            if sender is not None and message.sender_id != sender:
                continue
            if recipient is not None and not (
                message.is_broadcast or recipient in message.recipient_ids
            ):
                continue
            if wanted_type is not None and message.message_type != wanted_type:
                continue
            found.append(message)
        return found

    def subscribe(self, listener: MessageListener) -> Callable[[], None]:
        """Call ``listener`` with every message appended from now on.

        Returns:
            A callable that removes the subscription.
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe
