"""Default coordination strategy: flat dispatch and ledger-only routing."""

from __future__ import annotations

import json
import time
from typing import TYPE_CHECKING, Any

from colony.logging import get_logger
from colony.swarm.models import Message, MessageType

if TYPE_CHECKING:
    from colony.protocols import Agent
    from colony.swarm.swarm import Swarm

logger = get_logger("swarm.coordinator")

SYSTEM_SENDER = "system"


def agent_name(agent_or_id: Agent | str) -> str:
    """Return the registry key for an agent or a bare agent id."""
    if isinstance(agent_or_id, str):
        return agent_or_id
    return agent_or_id.name


def task_to_string(task: Any) -> str:
    """Render a task for an agent; non-string tasks are JSON encoded."""
    return task if isinstance(task, str) else json.dumps(task)


def task_message(sender_id: str, agent: Agent, task: str) -> Message:
    """Build the ledger record of a task assignment."""
    return Message(
        sender_id=sender_id,
        recipient_ids=(agent.name,),
        content=task,
        message_type=MessageType.TASK,
        metadata={"assigned_at": int(time.time())},
    )


class DefaultCoordinator:
    """Minimal coordinator without task decomposition.

    A string task goes to the first registered agent. Messages are recorded
    in the ledger and routed logically; nothing is delivered to an agent's
    ``run`` as a side effect of routing or broadcasting.
    """

    def coordinate(self, swarm: Swarm, input: Any = None) -> Any:
        agents = swarm.agents
        if not agents:
            return None

        if isinstance(input, Message):
            self.route_message(swarm, input)
            return input

        if isinstance(input, str) and input:
            first_agent = next(iter(agents.values()))
            return self.assign_task(swarm, first_agent, input)

        return None

    def assign_task(self, swarm: Swarm, agent_or_id: Agent | str, task: Any) -> Any:
        """Record a task message from the system and run the agent on it.

        Returns:
            The agent's response, unmodified.

        Raises:
            AgentNotFoundError: If a string id is not registered.
        """
        agent = swarm.resolve_agent(agent_or_id)
        task_string = task_to_string(task)

        self.route_message(swarm, task_message(SYSTEM_SENDER, agent, task_string), agent)

        logger.debug(f"Running agent {agent.name!r}")
        return agent.run(task_string)

    def route_message(
        self,
        swarm: Swarm,
        message: Message,
        recipient: Agent | str | None = None,
    ) -> None:
        """Record a message and resolve where it is addressed.

        The message is always recorded first. Routing is logical: an explicit
        recipient is validated but not run. A message without recipients is
        then handed to :meth:`broadcast_message` with its sender excluded,
        which records it a second time.
        """
        swarm.add_message(message)

        if recipient is not None:
            swarm.resolve_agent(recipient)
            return

        if message.is_broadcast:
            self.broadcast_message(swarm, message, message.sender_id)
            return

        for recipient_id in message.recipient_ids:
            if recipient_id not in swarm:
                logger.debug(f"Message {message.id[:8]} addressed to unknown agent {recipient_id!r}")

    def broadcast_message(
        self,
        swarm: Swarm,
        message: Message,
        sender: Agent | str | None = None,
    ) -> None:
        """Record a message once, addressed to every agent except the sender.

        Record-only: no agent is run. Consuming the broadcast is left to the
        caller or to a strategy that delivers it.
        """
        swarm.add_message(message)

        sender_id = agent_name(sender) if sender is not None else None
        recipients = [name for name in swarm.agents if name != sender_id]
        logger.debug(f"Broadcast {message.id[:8]} from {sender_id!r} reaches {recipients}")
