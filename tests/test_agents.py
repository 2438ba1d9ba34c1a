"""Tests for the ready-made Colony agents."""

from __future__ import annotations

from colony.agents import AgentResponse, CallableAgent, ScriptedAgent


class TestScriptedAgent:
    def test_default_response(self):
        agent = ScriptedAgent("bot", default_response="hello")
        response = agent.run("anything")
        assert response.final_answer == "hello"
        assert response.task == "anything"
        assert response.success is True

    def test_response_map_first_match_wins(self):
        agent = ScriptedAgent(
            "bot",
            response_map={"plan": "the plan", "plan and more": "never"},
        )
        assert agent.run("make a plan and more").final_answer == "the plan"

    def test_calls_recorded_and_reset(self):
        agent = ScriptedAgent("bot")
        agent.run("one")
        agent.run("two", {"k": "v"})
        assert agent.calls == [
            {"task": "one", "context": None},
            {"task": "two", "context": {"k": "v"}},
        ]
        agent.reset()
        assert agent.calls == []

    def test_repr(self):
        assert repr(ScriptedAgent("bot")) == "ScriptedAgent(name='bot')"


class TestCallableAgent:
    def test_wraps_function(self):
        seen = []

        def answer(task, context):
            seen.append(context)
            return task[::-1]

        agent = CallableAgent("rev", answer)
        assert agent.run("abc").final_answer == "cba"
        assert agent.run("x", {"a": 1}).final_answer == "x"
        assert seen == [{}, {"a": 1}]


class TestAgentResponse:
    def test_to_dict(self):
        response = AgentResponse(task="t", final_answer="a", token_usage={"total": 3})
        data = response.to_dict()
        assert data["final_answer"] == "a"
        assert data["token_usage"] == {"total": 3}
        assert data["error"] is None
