"""Protocols for the agents a swarm coordinates."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class AgentResponse(Protocol):
    """Structural interface for the result of an agent run."""

    final_answer: str


@runtime_checkable
class Agent(Protocol):
    """Structural interface for a uniquely named, synchronous task executor."""

    name: str

    def run(self, task: str, context: dict[str, Any] | None = None) -> AgentResponse: ...
