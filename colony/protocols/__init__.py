"""Protocol interface contracts for Colony components."""

from colony.protocols.agent import Agent, AgentResponse
from colony.protocols.coordinator import Coordinator

__all__ = [
    "Agent",
    "AgentResponse",
    "Coordinator",
]
