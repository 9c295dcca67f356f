"""
Branch-and-bound search over visiting orders (the "optimal" tier).

Depth-first enumeration of orderings that extends a prefix one place at a
time with the feasibility simulator, so shared prefixes are simulated once.
A branch is cut when the optimistic bound of its best completion cannot beat
the incumbent, or when another prefix over the same places reached the same
position at the same clock with no more distance and travel time.

The incumbent starts as the greedy ordering. If the node limit or the
deadline is hit first, the incumbent is returned and flagged as not proven
optimal.
"""

import logging
import time
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from ...core.evaluator import ScoreFunction
from ...core.settings import BranchBoundParams
from ...core.simulator import SimulationState
from ..heuristics.constructive import construct_greedy_route

logger = logging.getLogger(__name__)

_EPS = 1e-12
_DEADLINE_CHECK_EVERY = 512


@dataclass
class SearchStats:
    """Counters of one branch-and-bound run."""

    expanded: int = 0
    pruned_bound: int = 0
    pruned_dominance: int = 0
    leaves: int = 0
    improvements: int = 0
    aborted: bool = False


class _LimitReached(Exception):
    """Raised inside the search to unwind on node limit or deadline."""


class BranchAndBound:
    """
    Exact search for the best ordering of a small instance.

    Args:
        evaluator: Score function of the problem
        params: Search safeguards
        deadline: time.perf_counter() value at which to stop
    """

    def __init__(
        self,
        evaluator: ScoreFunction,
        params: Optional[BranchBoundParams] = None,
        deadline: Optional[float] = None,
    ):
        self.evaluator = evaluator
        self.simulator = evaluator.simulator
        self.params = params if params is not None else BranchBoundParams()
        self.deadline = deadline
        self.stats = SearchStats()

        self._best: List[int] = []
        self._best_fitness = float("-inf")
        # (processed mask, skipped mask, position, clock) -> labels of
        # (distance, travel time) already explored.
        self._labels: Dict[Tuple[int, int, int, float], List[Tuple[float, float]]] = {}

    def _leaf_fitness(self, state: SimulationState) -> float:
        overflow = max(
            0.0,
            state.clock - self.simulator.start_time - self.simulator.total_time_available,
        )
        return self.evaluator.breakdown(state, overflow).fitness

    def _dominated(
        self, processed: int, skipped: int, state: SimulationState
    ) -> bool:
        """Record the label of state, returning True if an explored one dominates it."""
        key = (processed, skipped, state.position, state.clock)
        label = (state.distance, state.travel_time)
        labels = self._labels.get(key)
        if labels is None:
            self._labels[key] = [label]
            return False
        for d, t in labels:
            if d <= label[0] + _EPS and t <= label[1] + _EPS:
                return True
        labels[:] = [
            (d, t) for d, t in labels if not (label[0] <= d and label[1] <= t)
        ]
        labels.append(label)
        return False

    def _check_limits(self) -> None:
        if self.stats.expanded >= self.params.node_limit:
            raise _LimitReached("node limit")
        if (
            self.deadline is not None
            and self.stats.expanded % _DEADLINE_CHECK_EVERY == 1
            and time.perf_counter() >= self.deadline
        ):
            raise _LimitReached("deadline")

    def _search(
        self,
        state: SimulationState,
        prefix: List[int],
        remaining: List[int],
        processed: int,
        skipped: int,
    ) -> None:
        if not remaining:
            self.stats.leaves += 1
            fitness = self._leaf_fitness(state)
            if fitness > self._best_fitness + _EPS:
                self._best_fitness = fitness
                self._best = list(prefix)
                self.stats.improvements += 1
            return

        if self.evaluator.upper_bound(state, remaining) <= self._best_fitness + _EPS:
            self.stats.pruned_bound += 1
            return

        self.stats.expanded += 1
        self._check_limits()

        # Most promising moves first, so good incumbents appear early.
        origin = state.position
        children = sorted(
            remaining, key=lambda v: (-self.evaluator.place_score(origin, v), v)
        )
        for node in children:
            nxt, record = self.simulator.step(state, node)
            child_processed = processed | (1 << node)
            child_skipped = skipped if record.visited else skipped | (1 << node)
            if self._dominated(child_processed, child_skipped, nxt):
                self.stats.pruned_dominance += 1
                continue
            prefix.append(node)
            rest = [v for v in remaining if v != node]
            self._search(nxt, prefix, rest, child_processed, child_skipped)
            prefix.pop()

    def run(self, initial: Optional[Sequence[int]] = None) -> Tuple[List[int], float, bool]:
        """
        Run the search.

        Args:
            initial: Incumbent ordering (greedy by default)

        Returns:
            Tuple of (best ordering, fitness, proven optimal)
        """
        incumbent = list(initial) if initial is not None else construct_greedy_route(self.evaluator)
        self._best = incumbent
        self._best_fitness = self.evaluator.fitness(incumbent)

        nodes = list(self.evaluator.problem.place_nodes)
        try:
            self._search(self.simulator.initial_state(), [], nodes, 0, 0)
        except _LimitReached as exc:
            self.stats.aborted = True
            logger.warning(
                "Branch-and-bound stopped early (%s) after %d nodes; returning best found",
                exc,
                self.stats.expanded,
            )

        logger.debug(
            "B&B expanded=%d leaves=%d pruned(bound=%d, dominance=%d) improvements=%d",
            self.stats.expanded,
            self.stats.leaves,
            self.stats.pruned_bound,
            self.stats.pruned_dominance,
            self.stats.improvements,
        )
        return list(self._best), self._best_fitness, not self.stats.aborted


def optimize_branch_bound(
    evaluator: ScoreFunction,
    params: Optional[BranchBoundParams] = None,
    *,
    deadline: Optional[float] = None,
    initial: Optional[Sequence[int]] = None,
) -> Tuple[List[int], float, bool]:
    """
    Find the best ordering by branch-and-bound.

    Args:
        evaluator: Score function of the problem
        params: Search safeguards (node limit)
        deadline: time.perf_counter() value at which to stop
        initial: Incumbent ordering (greedy by default)

    Returns:
        Tuple of (best ordering, fitness, proven optimal)
    """
    return BranchAndBound(evaluator, params, deadline).run(initial)
