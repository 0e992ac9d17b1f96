"""Workflow cursor, execution modes and live reload."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from ..errors import DefinitionParseError, PersistenceError
from .executor import StepExecutor, StepOutcome, StepStatus
from .models import Step, WorkflowDefinition
from .storage import DefinitionSource
from .variables import VariableStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RunAllResult:
    """Outcomes of a run-to-completion batch."""

    outcomes: List[StepOutcome] = field(default_factory=list)
    failed_step_index: Optional[int] = None

    @property
    def success(self) -> bool:
        return self.failed_step_index is None


@dataclass(slots=True)
class ReloadResult:
    reloaded: bool
    error: Optional[DefinitionParseError] = None


class WorkflowEngine:
    """Owns the step sequence, the cursor and the variable store.

    The cursor marks the next step to run sequentially; ``cursor ==
    len(steps)`` means the workflow is complete. Reload replaces the steps
    wholesale but keeps variables learned during the session and does not
    touch the cursor.
    """

    def __init__(
        self,
        definition: WorkflowDefinition,
        *,
        source: DefinitionSource,
        executor: StepExecutor,
        start_at: int = 0,
    ) -> None:
        self.definition = definition
        self.variables = VariableStore(definition.variables)
        self._source = source
        self._executor = executor
        self.cursor = min(max(start_at, 0), len(definition.steps))

    # ------------------------------------------------------------------
    # queries
    # ------------------------------------------------------------------
    @property
    def steps(self) -> List[Step]:
        return self.definition.steps

    @property
    def step_count(self) -> int:
        return len(self.definition.steps)

    @property
    def completed(self) -> bool:
        return self.cursor >= self.step_count

    def next_step(self) -> Optional[Step]:
        if self.completed:
            return None
        return self.definition.steps[self.cursor]

    # ------------------------------------------------------------------
    # execution modes
    # ------------------------------------------------------------------
    def run_next(self) -> Optional[StepOutcome]:
        """Run the step at the cursor with confirmation; ``None`` when complete."""
        if self.completed:
            return None
        outcome = self._executor.execute(self.cursor, self.definition, self.variables, confirm=True)
        if outcome.succeeded:
            self.cursor += 1
        return outcome

    def run_step(self, index: int, *, confirm: bool = True) -> StepOutcome:
        """Run an arbitrary step; the cursor only moves when ``index`` is the cursor."""
        if not 0 <= index < self.step_count:
            raise IndexError(f"step index {index} is out of range")
        outcome = self._executor.execute(index, self.definition, self.variables, confirm=confirm)
        if outcome.succeeded and index == self.cursor:
            self.cursor += 1
        return outcome

    def run_all(
        self,
        *,
        skip_confirmation: bool,
        on_start: Optional[Callable[[int], None]] = None,
        on_outcome: Optional[Callable[[StepOutcome], None]] = None,
    ) -> RunAllResult:
        """Run every step from the cursor, stopping at the first failure.

        ``on_start`` receives the step index before it runs and ``on_outcome``
        each outcome as soon as it is known.
        """
        result = RunAllResult()
        while not self.completed:
            if on_start is not None:
                on_start(self.cursor)
            outcome = self._executor.execute(
                self.cursor,
                self.definition,
                self.variables,
                confirm=not skip_confirmation,
            )
            result.outcomes.append(outcome)
            if on_outcome is not None:
                on_outcome(outcome)
            if outcome.status is StepStatus.FAILED:
                result.failed_step_index = self.cursor
                logger.info("run stopped at step %d", self.cursor + 1)
                break
            # Cancelled steps are skipped.
            self.cursor += 1
        return result

    # ------------------------------------------------------------------
    # variables
    # ------------------------------------------------------------------
    def set_variable(self, name: str, value: str) -> Optional[PersistenceError]:
        """Overwrite a variable and persist the store; returns the save failure, if any."""
        self.variables.set(name, value)
        self.definition.variables = self.variables.to_dict()
        try:
            self._source.save(self.definition)
        except PersistenceError as exc:
            logger.warning("variable %s kept in memory only: %s", name, exc)
            return exc
        return None

    # ------------------------------------------------------------------
    # reload
    # ------------------------------------------------------------------
    def reload(self) -> ReloadResult:
        try:
            fresh = self._source.load()
        except DefinitionParseError as exc:
            logger.warning("reload abandoned: %s", exc)
            return ReloadResult(reloaded=False, error=exc)

        variables = self.variables.copy()
        variables.merge_preserving_existing(fresh.variables)
        fresh.variables = variables.to_dict()
        self.definition = fresh
        self.variables = variables
        logger.info("reloaded %d requests, %d variables", self.step_count, len(variables))
        return ReloadResult(reloaded=True)


__all__ = ["ReloadResult", "RunAllResult", "WorkflowEngine"]
