"""Tests for Colony configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from colony.config import ColonyConfig
from colony.swarm import ConfigurationError, DefaultCoordinator, MasterWorkerCoordinator


class TestColonyConfig:
    def test_defaults(self):
        config = ColonyConfig()
        assert config.log_level == "INFO"
        assert config.log_file is None
        assert config.log_to_file is False
        assert config.log_format == "text"
        assert config.coordinator == "default"
        assert config.master is None
        assert config.max_workers == 1

    def test_env_overrides(self, monkeypatch, tmp_path: Path):
        monkeypatch.setenv("COLONY_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("COLONY_LOG_FILE", str(tmp_path / "colony.log"))
        monkeypatch.setenv("COLONY_COORDINATOR", "master_worker")
        monkeypatch.setenv("COLONY_MASTER", "boss")
        monkeypatch.setenv("COLONY_MAX_WORKERS", "4")
        monkeypatch.setenv("COLONY_LOG_FORMAT", "json")

        config = ColonyConfig()

        assert config.log_level == "DEBUG"
        assert config.log_format == "json"
        assert config.log_file == tmp_path / "colony.log"
        assert config.log_to_file is True
        assert config.coordinator == "master_worker"
        assert config.master == "boss"
        assert config.max_workers == 4

    def test_bad_max_workers_env(self, monkeypatch):
        monkeypatch.setenv("COLONY_MAX_WORKERS", "many")
        with pytest.raises(ConfigurationError, match="COLONY_MAX_WORKERS"):
            ColonyConfig()

    def test_string_log_file_becomes_path(self):
        assert ColonyConfig(log_file="logs/colony.log").log_file == Path("logs/colony.log")


class TestLoadSave:
    def test_missing_file_gives_defaults(self, tmp_path: Path):
        config = ColonyConfig.load(tmp_path / "missing.yaml")
        assert config.coordinator == "default"

    def test_no_path_gives_defaults(self):
        assert ColonyConfig.load().master is None

    def test_load_from_file(self, tmp_path: Path):
        path = tmp_path / "colony.yaml"
        path.write_text(
            yaml.dump(
                {
                    "log_level": "WARNING",
                    "coordinator": "master_worker",
                    "master": "planner",
                    "max_workers": 2,
                }
            )
        )

        config = ColonyConfig.load(path)

        assert config.log_level == "WARNING"
        assert config.coordinator == "master_worker"
        assert config.master == "planner"
        assert config.max_workers == 2

    def test_env_beats_file(self, tmp_path: Path, monkeypatch):
        path = tmp_path / "colony.yaml"
        path.write_text("master: planner\n")
        monkeypatch.setenv("COLONY_MASTER", "boss")
        assert ColonyConfig.load(path).master == "boss"

    def test_save_roundtrip(self, tmp_path: Path):
        path = tmp_path / "nested" / "colony.yaml"
        original = ColonyConfig(
            log_level="DEBUG",
            log_file=tmp_path / "c.log",
            log_to_file=True,
            log_format="json",
            coordinator="master_worker",
            master="planner",
            max_workers=3,
        )
        original.save(path)

        assert ColonyConfig.load(path).to_dict() == original.to_dict()

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "colony.yaml"
        path.write_text("log_level: [unclosed")
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            ColonyConfig.load(path)

    def test_non_mapping(self, tmp_path: Path):
        path = tmp_path / "colony.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError, match="mapping"):
            ColonyConfig.load(path)

    def test_invalid_max_workers_in_file(self, tmp_path: Path):
        path = tmp_path / "colony.yaml"
        path.write_text("max_workers: lots\n")
        with pytest.raises(ConfigurationError, match="max_workers"):
            ColonyConfig.load(path)

    def test_file_strategy_keys_are_explicit(self, tmp_path: Path):
        path = tmp_path / "colony.yaml"
        path.write_text("log_level: DEBUG\ncoordinator: default\nmaster: null\n")
        assert ColonyConfig.load(path).explicit == {"coordinator"}


class TestCoordinatorOverride:
    def test_nothing_explicit(self):
        assert ColonyConfig().coordinator_override() is None

    def test_constructor_values_are_not_overrides(self):
        assert ColonyConfig(coordinator="master_worker", master="boss").coordinator_override() is None

    def test_env_strategy(self, monkeypatch):
        monkeypatch.setenv("COLONY_COORDINATOR", "master_worker")
        monkeypatch.setenv("COLONY_MASTER", "boss")
        monkeypatch.setenv("COLONY_MAX_WORKERS", "3")

        coordinator = ColonyConfig().coordinator_override()

        assert isinstance(coordinator, MasterWorkerCoordinator)
        assert coordinator.master_id == "boss"
        assert coordinator.max_workers == 3

    def test_master_implies_master_worker(self, monkeypatch):
        monkeypatch.setenv("COLONY_MASTER", "boss")
        coordinator = ColonyConfig().coordinator_override()
        assert isinstance(coordinator, MasterWorkerCoordinator)

    def test_max_workers_alone_is_not_a_strategy(self, monkeypatch):
        monkeypatch.setenv("COLONY_MAX_WORKERS", "4")
        config = ColonyConfig()
        assert config.coordinator_override() is None
        assert "max_workers" in config.explicit

    def test_select_strategy(self):
        config = ColonyConfig()
        config.select_strategy(coordinator="default")
        assert isinstance(config.coordinator_override(), DefaultCoordinator)

    def test_selected_strategy_beats_env(self, monkeypatch):
        monkeypatch.setenv("COLONY_COORDINATOR", "master_worker")
        monkeypatch.setenv("COLONY_MASTER", "boss")
        config = ColonyConfig()
        config.select_strategy(coordinator="default")
        assert isinstance(config.coordinator_override(), DefaultCoordinator)

    def test_empty_env_ignored(self, monkeypatch):
        monkeypatch.setenv("COLONY_COORDINATOR", "")
        config = ColonyConfig()
        assert config.coordinator == "default"
        assert config.explicit == set()



class TestBuildCoordinator:
    def test_default(self):
        assert isinstance(ColonyConfig().build_coordinator(), DefaultCoordinator)

    def test_master_worker(self):
        config = ColonyConfig(coordinator="master_worker", master="boss", max_workers=2)
        coordinator = config.build_coordinator()
        assert isinstance(coordinator, MasterWorkerCoordinator)
        assert coordinator.master_id == "boss"
        assert coordinator.max_workers == 2

    def test_master_worker_without_master(self):
        with pytest.raises(ConfigurationError, match="master"):
            ColonyConfig(coordinator="master_worker").build_coordinator()

    def test_unknown_strategy(self):
        with pytest.raises(ConfigurationError, match="Unknown coordinator"):
            ColonyConfig(coordinator="hive").build_coordinator()
