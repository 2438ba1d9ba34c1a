"""Verify concrete classes conform to Protocol interfaces."""

from colony.agents import AgentResponse, CallableAgent, ScriptedAgent
from colony.protocols import Agent, Coordinator
from colony.protocols import AgentResponse as AgentResponseProtocol
from colony.swarm import DefaultCoordinator, MasterWorkerCoordinator


class TestAgentConformance:
    def test_scripted_agent(self):
        assert isinstance(ScriptedAgent("a"), Agent)

    def test_callable_agent(self):
        assert isinstance(CallableAgent("a", lambda t, c: t), Agent)

    def test_agent_response(self):
        assert isinstance(AgentResponse(task="t", final_answer="a"), AgentResponseProtocol)


class TestCoordinatorConformance:
    def test_default_coordinator(self):
        assert issubclass(DefaultCoordinator, Coordinator)

    def test_master_worker_coordinator(self):
        assert issubclass(MasterWorkerCoordinator, Coordinator)

    def test_strategies_are_independent(self):
        assert not issubclass(MasterWorkerCoordinator, DefaultCoordinator)
