#!/usr/bin/env python3
"""
master_worker.py: a planner splits a task, two specialists do the work.

The planner's plan is a numbered list, so each item becomes a subtask.
Subtasks go round robin to the other agents; the planner merges the answers.

Run:
    pip install -e .
    python examples/master_worker.py
"""

from colony import CallableAgent, MasterWorkerCoordinator, ScriptedAgent, Swarm

planner = ScriptedAgent(
    "planner",
    response_map={
        "Analyze this task": (
            "Here is the plan:\n"
            "1. List the supported file formats\n"
            "2. Benchmark the parser on large inputs\n"
            "3. Summarise the error messages"
        ),
        "Aggregate these results": "Release notes drafted from three findings.",
    },
)
researcher = CallableAgent("researcher", lambda task, ctx: f"notes on '{task}'")
tester = CallableAgent("tester", lambda task, ctx: f"measurements for '{task}'")

swarm = Swarm(MasterWorkerCoordinator("planner"), agents=[planner, researcher, tester])
swarm.subscribe(lambda m: print(f"  ledger: {m.sender_id} -> {', '.join(m.recipient_ids)}: {m.content}"))

print("Running swarm...")
response = swarm.run("Draft release notes for the 2.0 parser")

print(f"\nAggregation prompt:\n  {planner.calls[-1]['task']}")
print(f"\nFinal answer:\n  {response.final_answer}")
