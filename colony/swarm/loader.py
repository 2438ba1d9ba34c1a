"""YAML swarm loader with validation."""

from pathlib import Path

import yaml

from colony.agents import ScriptedAgent
from colony.logging import get_logger
from colony.protocols import Coordinator
from colony.swarm.coordinator import DefaultCoordinator
from colony.swarm.master_worker import MasterWorkerCoordinator
from colony.swarm.models import ConfigurationError
from colony.swarm.swarm import Swarm

logger = get_logger("swarm.loader")

COORDINATORS = ("default", "master_worker")


def create_coordinator(
    strategy: str = "default",
    master: str | None = None,
    max_workers: int = 1,
) -> Coordinator:
    """Build a coordination strategy by name.

    Raises:
        ConfigurationError: For an unknown strategy, or master_worker without a master.
    """
    if strategy == "default":
        return DefaultCoordinator()
    if strategy == "master_worker":
        if not master:
            raise ConfigurationError("master_worker coordinator requires a 'master' agent")
        return MasterWorkerCoordinator(master, max_workers=max_workers)
    raise ConfigurationError(f"Unknown coordinator {strategy!r}; expected one of {COORDINATORS}")


def load_swarm(path: Path) -> Swarm:
    """Load a scripted swarm from a YAML file.

    Args:
        path: Path to the YAML swarm definition.

    Returns:
        Swarm with its agents registered and coordinator installed.

    Raises:
        ConfigurationError: If the file is missing or the definition is invalid.
    """
    if not path.exists():
        raise ConfigurationError(f"Swarm file not found: {path}")
    return load_swarm_str(path.read_text())


def load_swarm_str(yaml_str: str) -> Swarm:
    """Load a scripted swarm from a YAML string.

    Raises:
        ConfigurationError: If the definition is invalid.
    """
    try:
        data = yaml.safe_load(yaml_str)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigurationError("Swarm YAML must be a mapping")

    raw_agents = data.get("agents") or []
    if not raw_agents:
        raise ConfigurationError("Swarm must have at least one agent")
    agents = _parse_agents(raw_agents)

    strategy = data.get("coordinator", "default")
    master = data.get("master")
    if master is not None and master not in {a.name for a in agents}:
        raise ConfigurationError(f"Master {master!r} is not a defined agent")

    raw_workers = data.get("max_workers", 1)
    try:
        max_workers = int(raw_workers)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"max_workers must be an integer, got {raw_workers!r}") from exc

    coordinator = create_coordinator(strategy, master=master, max_workers=max_workers)
    logger.info(f"Loaded swarm: {len(agents)} agents, coordinator={strategy!r}")
    return Swarm(coordinator=coordinator, agents=agents)


def _parse_agents(raw: list) -> list[ScriptedAgent]:
    """Parse and validate scripted agent entries."""
    agents: list[ScriptedAgent] = []
    seen_names: set[str] = set()

    for i, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise ConfigurationError(f"Agent at index {i} must be a mapping")

        name = entry.get("name")
        if not name:
            raise ConfigurationError(f"Agent at index {i} must have a 'name'")
        if name in seen_names:
            raise ConfigurationError(f"Duplicate agent name: {name!r}")
        seen_names.add(name)

        responses = entry.get("responses", {})
        if not isinstance(responses, dict):
            raise ConfigurationError(f"Agent {name!r} 'responses' must be a mapping")

        agents.append(
            ScriptedAgent(
                name=name,
                default_response=str(entry.get("default_response", "This is a scripted response.")),
                response_map={str(k): str(v) for k, v in responses.items()},
            )
        )

    return agents
