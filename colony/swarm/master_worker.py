"""Master-worker coordination: decompose, distribute, aggregate."""

from __future__ import annotations

import re
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from colony.logging import get_logger
from colony.swarm.coordinator import task_message, task_to_string
from colony.swarm.models import ConfigurationError, CoordinationPhase, Message

if TYPE_CHECKING:
    from colony.protocols import Agent
    from colony.swarm.swarm import Swarm

logger = get_logger("swarm.master_worker")

DECOMPOSE_PROMPT = "Analyze this task and break it down into subtasks: {task}"
AGGREGATE_PROMPT = "Aggregate these results into a final answer: {results}"
RESULT_SEPARATOR = " | "

_NUMBERED_ITEM = re.compile(r"\d+\.\s+([^\n]+)")


def parse_subtasks(plan: str) -> list[str]:
    """Extract subtasks from a master's free-text plan.

    Numbered items (``"1. Do this"``) win: when any are present, only they
    are returned, in match order. Otherwise every non-blank line is a
    subtask, stripped, in original order.
    """
    numbered = _NUMBERED_ITEM.findall(plan)
    if numbered:
        return numbered
    return [line.strip() for line in plan.split("\n") if line.strip()]


@contextmanager
def _phase(phase: CoordinationPhase) -> Iterator[None]:
    """Tag any exception escaping the block with the coordination phase."""
    try:
        yield
    except Exception as exc:
        exc.add_note(f"master-worker phase: {phase.value}")
        logger.error(
            f"Phase {phase.value!r} failed: {type(exc).__name__}: {exc}",
            extra={"phase": phase.value},
        )
        raise


class MasterWorkerCoordinator:
    """One master agent plans and aggregates; the other agents work.

    ``coordinate`` runs three sequential phases:

    1. *decompose*: the master turns the task into a plan, parsed with
       :func:`parse_subtasks`. An empty plan makes the master run the
       original task directly.
    2. *distribute*: subtask ``i`` goes to worker ``i % len(workers)``,
       workers being every other agent in registration order. Without
       workers the master runs each subtask itself.
    3. *aggregate*: the master merges the answers, joined with ``" | "``.

    Agent errors propagate unchanged, with a note naming the failed phase.
    With ``max_workers > 1`` workers run concurrently on a thread pool, each
    working through its own subtasks in order; answers keep subtask order.
    """

    def __init__(self, master_id: str, max_workers: int = 1):
        if max_workers < 1:
            raise ConfigurationError(f"max_workers must be at least 1, got {max_workers}")
        self.master_id = master_id
        self.max_workers = max_workers

    def coordinate(self, swarm: Swarm, input: Any = None) -> Any:
        """Run the master-worker protocol for a string task.

        Raises:
            ConfigurationError: If the master is not registered in ``swarm``.
        """
        master = swarm.get_agent(self.master_id)
        if master is None:
            raise ConfigurationError(f"Master agent with ID {self.master_id!r} not found in swarm")

        if isinstance(input, Message):
            self.route_message(swarm, input)
            return input

        if not (isinstance(input, str) and input):
            return None

        with _phase(CoordinationPhase.DECOMPOSE):
            plan = master.run(DECOMPOSE_PROMPT.format(task=input)).final_answer
        subtasks = parse_subtasks(plan)

        if not subtasks:
            logger.info(f"Master {self.master_id!r} produced no subtasks; running task directly")
            with _phase(CoordinationPhase.FALLBACK):
                return master.run(input)

        workers = self._worker_agents(swarm)
        logger.info(f"Distributing {len(subtasks)} subtasks across {len(workers)} workers")

        with _phase(CoordinationPhase.DISTRIBUTE):
            if not workers:
                results = [master.run(subtask).final_answer for subtask in subtasks]
            else:
                results = self._distribute(swarm, workers, subtasks)

        with _phase(CoordinationPhase.AGGREGATE):
            return master.run(AGGREGATE_PROMPT.format(results=RESULT_SEPARATOR.join(results)))

    def assign_task(self, swarm: Swarm, agent_or_id: Agent | str, task: Any) -> Any:
        """Record a task message from the master and run the agent on it.

        Raises:
            AgentNotFoundError: If a string id is not registered.
        """
        agent = swarm.resolve_agent(agent_or_id)
        task_string = task_to_string(task)

        swarm.add_message(task_message(self.master_id, agent, task_string))

        logger.debug(f"Master {self.master_id!r} assigned task to {agent.name!r}")
        return agent.run(task_string)

    def route_message(
        self,
        swarm: Swarm,
        message: Message,
        recipient: Agent | str | None = None,
    ) -> None:
        """Record a message once, broadcasts included.

        All traffic is steered by the master, so nothing is delivered.
        """
        swarm.add_message(message)
        if recipient is not None:
            swarm.resolve_agent(recipient)

    def broadcast_message(
        self,
        swarm: Swarm,
        message: Message,
        sender: Agent | str | None = None,
    ) -> None:
        """Record a broadcast. Broadcasts are controlled by the master."""
        swarm.add_message(message)

    def _worker_agents(self, swarm: Swarm) -> list[Agent]:
        """Every agent except the master, in registration order."""
        return [agent for name, agent in swarm.agents.items() if name != self.master_id]

    def _distribute(self, swarm: Swarm, workers: list[Agent], subtasks: list[str]) -> list[str]:
        """Round-robin subtasks over workers and collect answers in subtask order.

        In parallel mode each worker gets a single job that runs its own
        subtasks in order, so no agent is called from two threads at once.
        The lowest-index failure is raised once every job has finished.
        """
        if self.max_workers == 1:
            return [
                self.assign_task(swarm, workers[i % len(workers)], subtask).final_answer
                for i, subtask in enumerate(subtasks)
            ]

        batches = [
            (workers[w], range(w, len(subtasks), len(workers)))
            for w in range(min(len(workers), len(subtasks)))
        ]
        answers: list[str] = [""] * len(subtasks)
        failures: dict[int, Exception] = {}

        def run_batch(worker: Agent, indices: range) -> None:
            for i in indices:
                try:
                    answers[i] = self.assign_task(swarm, worker, subtasks[i]).final_answer
                except Exception as exc:
                    failures[i] = exc
                    return

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(batches))) as executor:
            for worker, indices in batches:
                executor.submit(run_batch, worker, indices)

        if failures:
            raise failures[min(failures)]
        return answers
