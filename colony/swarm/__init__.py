"""Colony Swarm: agent registry, message ledger, and coordination strategies."""

from colony.swarm.coordinator import DefaultCoordinator
from colony.swarm.loader import create_coordinator, load_swarm, load_swarm_str
from colony.swarm.master_worker import MasterWorkerCoordinator, parse_subtasks
from colony.swarm.models import (
    AgentNotFoundError,
    ConfigurationError,
    CoordinationPhase,
    Message,
    MessageType,
    SwarmError,
)
from colony.swarm.swarm import Swarm

__all__ = [
    "AgentNotFoundError",
    "ConfigurationError",
    "CoordinationPhase",
    "DefaultCoordinator",
    "MasterWorkerCoordinator",
    "Message",
    "MessageType",
    "Swarm",
    "SwarmError",
    "create_coordinator",
    "load_swarm",
    "load_swarm_str",
    "parse_subtasks",
]
