"""Colony - Registry, ledger, and coordination strategies for cooperating agents."""

__version__ = "0.1.0"

from colony.agents import AgentResponse, CallableAgent, ScriptedAgent
from colony.config import ColonyConfig
from colony.protocols import Agent, Coordinator
from colony.swarm import (
    AgentNotFoundError,
    ConfigurationError,
    CoordinationPhase,
    DefaultCoordinator,
    MasterWorkerCoordinator,
    Message,
    MessageType,
    Swarm,
    SwarmError,
    load_swarm,
    load_swarm_str,
    parse_subtasks,
)

__all__ = [
    "Agent",
    "AgentNotFoundError",
    "AgentResponse",
    "CallableAgent",
    "ColonyConfig",
    "ConfigurationError",
    "CoordinationPhase",
    "Coordinator",
    "DefaultCoordinator",
    "MasterWorkerCoordinator",
    "Message",
    "MessageType",
    "ScriptedAgent",
    "Swarm",
    "SwarmError",
    "__version__",
    "load_swarm",
    "load_swarm_str",
    "parse_subtasks",
]
