"""
Colony Agents

Ready-made agents satisfying the :class:`~colony.protocols.Agent` protocol:
a deterministic scripted agent and an adapter for plain callables.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from colony.logging import get_logger

logger = get_logger("agents")


@dataclass
class AgentResponse:
    """Result of one agent run."""

    task: str
    final_answer: str
    trace: list[dict] = field(default_factory=list)
    execution_time: float = 0.0
    success: bool = True
    error: str | None = None
    token_usage: dict[str, int] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "task": self.task,
            "final_answer": self.final_answer,
            "trace": self.trace,
            "execution_time": self.execution_time,
            "success": self.success,
            "error": self.error,
            "token_usage": self.token_usage,
            "metadata": self.metadata,
        }


class ScriptedAgent:
    """Deterministic agent for demos and tests without a live model.

    Answers with the first ``response_map`` value whose key occurs in the
    task, falling back to ``default_response``.
    """

    def __init__(
        self,
        name: str,
        default_response: str = "This is a scripted response.",
        response_map: dict[str, str] | None = None,
    ):
        self.name = name
        self.default_response = default_response
        self.response_map: dict[str, str] = dict(response_map or {})
        self.calls: list[dict] = []

    def run(self, task: str, context: dict[str, Any] | None = None) -> AgentResponse:
        started = time.perf_counter()
        self.calls.append({"task": task, "context": context})

        answer = self.default_response
        for substring, response in self.response_map.items():
            if substring in task:
                answer = response
                break

        logger.debug(f"ScriptedAgent {self.name!r} answered {len(answer)} chars")
        return AgentResponse(
            task=task,
            final_answer=answer,
            execution_time=time.perf_counter() - started,
        )

    def reset(self) -> None:
        """Clear call history."""
        self.calls.clear()

    def __repr__(self) -> str:
        return f"ScriptedAgent(name={self.name!r})"


class CallableAgent:
    """Wraps ``func(task, context) -> str`` as an agent."""

    def __init__(self, name: str, func: Callable[[str, dict[str, Any]], str]):
        self.name = name
        self.func = func

    def run(self, task: str, context: dict[str, Any] | None = None) -> AgentResponse:
        started = time.perf_counter()
        answer = self.func(task, context or {})
        return AgentResponse(
            task=task,
            final_answer=answer,
            execution_time=time.perf_counter() - started,
        )

    def __repr__(self) -> str:
        return f"CallableAgent(name={self.name!r})"
