"""
Colony Configuration Management

Loads configuration from YAML file with environment variable overrides.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from colony.logging import LOG_FORMATS
from colony.protocols import Coordinator
from colony.swarm.loader import create_coordinator
from colony.swarm.models import ConfigurationError

STRATEGY_FIELDS = frozenset({"coordinator", "master", "max_workers"})


def _as_int(value, source: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{source} must be an integer, got {value!r}") from exc


@dataclass
class ColonyConfig:
    """Settings for logging and for the coordination strategy.

    ``explicit`` names the strategy fields that were set by a config file,
    the environment or :meth:`select_strategy`. Only those override the
    coordinator a swarm definition brings with it.
    """

    log_level: str = "INFO"
    log_file: Path | None = None
    log_to_file: bool = False
    log_format: str = "text"  # "text" or "json"
    coordinator: str = "default"  # "default" or "master_worker"
    master: str | None = None
    max_workers: int = 1
    explicit: set[str] = field(default_factory=set, repr=False, compare=False)

    def __post_init__(self):
        if isinstance(self.log_file, str):
            self.log_file = Path(self.log_file).expanduser()

        # Environment overrides
        self.log_level = os.environ.get("COLONY_LOG_LEVEL", self.log_level)
        if env_log_file := os.environ.get("COLONY_LOG_FILE"):
            self.log_file = Path(env_log_file).expanduser()
            self.log_to_file = True
        if env_format := os.environ.get("COLONY_LOG_FORMAT"):
            self.log_format = env_format
        if self.log_format not in LOG_FORMATS:
            raise ConfigurationError(
                f"log_format must be one of {LOG_FORMATS}, got {self.log_format!r}"
            )
        if env_coordinator := os.environ.get("COLONY_COORDINATOR"):
            self.coordinator = env_coordinator
            self.explicit.add("coordinator")
        if env_master := os.environ.get("COLONY_MASTER"):
            self.master = env_master
            self.explicit.add("master")
        if env_workers := os.environ.get("COLONY_MAX_WORKERS"):
            self.max_workers = _as_int(env_workers, "COLONY_MAX_WORKERS")
            self.explicit.add("max_workers")

    def select_strategy(self, coordinator: str | None = None, master: str | None = None) -> None:
        """Apply command-line strategy choices on top of file and environment."""
        if coordinator is not None:
            self.coordinator = coordinator
            self.explicit.add("coordinator")
        if master is not None:
            self.master = master
            self.explicit.add("master")

    def build_coordinator(self) -> Coordinator:
        """Instantiate the configured coordination strategy."""
        return create_coordinator(self.coordinator, master=self.master, max_workers=self.max_workers)

    def coordinator_override(self) -> Coordinator | None:
        """The coordinator chosen outside the swarm file, or None if none was.

        A master given without an explicit strategy implies ``master_worker``.
        ``max_workers`` alone does not choose a strategy.
        """
        if not self.explicit & {"coordinator", "master"}:
            return None
        strategy = self.coordinator if "coordinator" in self.explicit else "master_worker"
        return create_coordinator(strategy, master=self.master, max_workers=self.max_workers)

    def to_dict(self) -> dict:
        """Convert config to dictionary for serialization."""
        return {
            "log_level": self.log_level,
            "log_file": str(self.log_file) if self.log_file else None,
            "log_to_file": self.log_to_file,
            "log_format": self.log_format,
            "coordinator": self.coordinator,
            "master": self.master,
            "max_workers": self.max_workers,
        }

    def save(self, path: Path) -> None:
        """Save configuration to YAML file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    @classmethod
    def load(cls, config_path: Path | None = None) -> "ColonyConfig":
        """
        Load configuration from file.

        Precedence (highest to lowest):
        1. Environment variables
        2. Config file values
        3. Default values
        """
        config = cls()

        if config_path is None or not config_path.exists():
            return config

        try:
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {config_path} must be a mapping")

        if "log_level" in data:
            config.log_level = data["log_level"]
        if data.get("log_file"):
            config.log_file = Path(data["log_file"]).expanduser()
        if "log_to_file" in data:
            config.log_to_file = bool(data["log_to_file"])
        if "log_format" in data:
            config.log_format = data["log_format"]
        if "coordinator" in data:
            config.coordinator = data["coordinator"]
        if "master" in data:
            config.master = data["master"]
        if "max_workers" in data:
            config.max_workers = _as_int(data["max_workers"], f"max_workers in {config_path}")
        config.explicit.update(k for k in STRATEGY_FIELDS & data.keys() if data[k] is not None)

        # Re-apply environment overrides
        config.__post_init__()

        return config
