"""Shared test fixtures for Colony test suite."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest

from colony.agents import AgentResponse, ScriptedAgent

COLONY_ENV_VARS = (
    "COLONY_LOG_LEVEL",
    "COLONY_LOG_FILE",
    "COLONY_LOG_FORMAT",
    "COLONY_COORDINATOR",
    "COLONY_MASTER",
    "COLONY_MAX_WORKERS",
)


@pytest.fixture(autouse=True)
def clean_colony_env(monkeypatch):
    """Keep configuration tests independent of the caller's environment."""
    for var in COLONY_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def reset_colony_logger():
    """Drop handlers installed by configure_logging (e.g. via the CLI)."""
    yield
    logger = logging.getLogger("colony")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def mock_agent_factory():
    """Factory for MagicMock agents whose run() returns a fixed answer."""

    def _make(name: str, answer: str = "Mock answer.") -> MagicMock:
        agent = MagicMock()
        agent.name = name
        agent.run.return_value = AgentResponse(task="", final_answer=answer)
        return agent

    return _make


@pytest.fixture
def scripted_agent_factory():
    """Factory for deterministic ScriptedAgents."""

    def _make(
        name: str,
        default_response: str = "Scripted answer.",
        response_map: dict[str, str] | None = None,
    ) -> ScriptedAgent:
        return ScriptedAgent(name, default_response=default_response, response_map=response_map)

    return _make
