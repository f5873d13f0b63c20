"""
Holds the current plan and discards results of superseded planning attempts.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from typing import Dict, Optional

from ...data.models import PlanningRequest, PlanStatus, RoutePlan
from ...exceptions import InvalidInputError, PlannerError
from .route_planner import RoutePlanner

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlanState:
    """Snapshot of the container: the latest generation and its outcome."""
    generation: int
    status: PlanStatus
    plan: Optional[RoutePlan] = None
    error: Optional[Exception] = None

    @property
    def is_pending(self) -> bool:
        return self.status == PlanStatus.PENDING


class PlanStateContainer:
    """
    Explicit owner of the current plan.

    Every ``submit`` starts a new generation and resets the state to PENDING.
    Planning runs on a worker thread; when it finishes, its result is applied
    only if its generation is still the latest one. In-flight network calls
    are never aborted, their results are just dropped on arrival.
    """

    def __init__(self, planner: RoutePlanner, max_workers: int = 4):
        self.planner = planner
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="route-planner")
        self._lock = threading.Lock()
        self._generation = 0
        self._state = PlanState(generation=0, status=PlanStatus.IDLE)
        self._futures: Dict[int, Future] = {}

    def submit(self, request: PlanningRequest) -> int:
        """
        Start planning for new inputs, superseding any attempt in flight.

        Invalid inputs are reported straight away as a FAILED state and no
        planning is started.

        Returns:
            Generation number of this attempt
        """
        with self._lock:
            self._generation += 1
            generation = self._generation
            # Only the latest attempt can still be waited on meaningfully
            self._futures = {g: f for g, f in self._futures.items() if not f.done()}

            try:
                request.validate()
            except InvalidInputError as e:
                logger.warning(f"Generation {generation} rejected: {e}")
                self._state = PlanState(generation=generation, status=PlanStatus.FAILED, error=e)
                return generation

            self._state = PlanState(generation=generation, status=PlanStatus.PENDING)
            self._futures[generation] = self._executor.submit(self._run, generation, request)

        logger.debug(f"Submitted planning generation {generation}")
        return generation

    def current_plan(self) -> PlanState:
        """Get the state of the latest generation."""
        with self._lock:
            return self._state

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def wait(self, generation: int, timeout: Optional[float] = None) -> PlanState:
        """
        Block until the given generation has finished, then return the current state.

        The returned state belongs to a newer generation if one was submitted
        in the meantime.
        """
        with self._lock:
            future = self._futures.get(generation)
        if future is not None:
            try:
                future.result(timeout=timeout)
            except FutureTimeoutError:
                logger.debug(f"Timed out waiting for generation {generation}")
        return self.current_plan()

    def shutdown(self, wait: bool = False) -> None:
        self._executor.shutdown(wait=wait)

    def _run(self, generation: int, request: PlanningRequest) -> None:
        try:
            plan = self.planner.plan(request)
            state = PlanState(generation=generation, status=plan.status, plan=plan)
        except PlannerError as e:
            logger.error(f"Planning generation {generation} failed: {e}")
            state = PlanState(generation=generation, status=PlanStatus.FAILED, error=e)
        except Exception as e:
            logger.exception(f"Unexpected error in planning generation {generation}")
            state = PlanState(generation=generation, status=PlanStatus.FAILED, error=e)

        self._apply(state)

    def _apply(self, state: PlanState) -> bool:
        with self._lock:
            if state.generation != self._generation:
                logger.debug(f"Discarding stale result of generation {state.generation} "
                             f"(current generation {self._generation})")
                return False
            self._state = state
            return True
