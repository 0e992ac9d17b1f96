"""Interactive menu loop for apiline."""
from __future__ import annotations

import logging
from typing import Optional

from ..watch import ChangeSignal
from ..workflows.engine import WorkflowEngine
from ..workflows.executor import DECLINE_ANSWERS, StepOutcome, StepStatus
from .console import ConsoleView

logger = logging.getLogger(__name__)


class ApilineRepl:
    """Reads menu commands and drives the workflow engine."""

    def __init__(
        self,
        engine: WorkflowEngine,
        view: ConsoleView,
        signal: Optional[ChangeSignal] = None,
    ) -> None:
        self.engine = engine
        self.view = view
        self.signal = signal
        self.running = True

    # ------------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------------
    def run(self) -> None:
        """Start the interactive prompt loop."""
        while self.running:
            self.drain_signals()
            self.view.menu(self.engine.next_step(), self.engine.cursor)
            try:
                choice = self.view.ask("\nChoose option:")
            except KeyboardInterrupt:
                continue
            except EOFError:
                break
            try:
                if not self.handle(choice.strip()):
                    break
            except KeyboardInterrupt:
                self.view.warn("\nInterrupted")
                continue
            except EOFError:
                break

    def drain_signals(self) -> None:
        if self.signal is None or not self.signal.poll():
            return
        self.view.warn("Config file changed, reloading...")
        result = self.engine.reload()
        if result.reloaded:
            self.view.info("Config reloaded successfully!")
            self.view.info("   Variables from previous session preserved")
        else:
            self.view.error(f"Failed to reload config: {result.error}")
            self.view.warn("   Continuing with previous config")

    # ------------------------------------------------------------------
    # commands
    # ------------------------------------------------------------------
    def handle(self, choice: str) -> bool:
        """Run one menu command; returns ``False`` when the session should end."""
        if choice in {"q", "quit"}:
            self.view.info("Goodbye!")
            self.running = False
            return False
        if choice in {"v", "vars"}:
            self.view.variables(self.engine.variables.to_dict())
        elif choice in {"l", "list"}:
            self.view.requests(self.engine.steps, self.engine.cursor)
        elif choice in {"s", "set"}:
            self._command_set()
        elif choice in {"n", "next"}:
            self._command_next()
        elif choice in {"a", "all"}:
            self._command_all()
        elif choice.isdecimal():
            self._command_step(int(choice))
        else:
            self.view.error("Invalid option. Try 'v', 's', 'l', 'n', 'a', or a step number.")
        return True

    def _command_set(self) -> None:
        name = self.view.ask("Variable name:").strip()
        if not name:
            self.view.error("Variable name cannot be empty")
            return
        current = self.engine.variables.get(name)
        if current is not None:
            self.view.info(f"Current value: {current}")
        value = self.view.ask("New value:").strip()
        error = self.engine.set_variable(name, value)
        self.view.info(f"Set {name}: {value}")
        if error is not None:
            self.view.persisted(error)

    def _command_next(self) -> None:
        outcome = self.engine.run_next()
        if outcome is None:
            self.view.warn("No more requests to execute")
            return
        self._report(outcome)
        if outcome.succeeded and self.engine.completed:
            self.view.info("All requests completed!")

    def _command_all(self) -> None:
        answer = self.view.ask("Execute all remaining requests without confirmation? [Y/n]")
        skip_confirmation = answer.strip().lower() not in DECLINE_ANSWERS
        self.view.info("Executing all remaining requests...")
        total = self.engine.step_count
        self.engine.run_all(
            skip_confirmation=skip_confirmation,
            on_start=lambda index: self.view.info(f"\nStep {index + 1}/{total}"),
            on_outcome=self._report_batch,
        )
        if self.engine.completed:
            self.view.info("All requests completed!")

    def _report_batch(self, outcome: StepOutcome) -> None:
        if outcome.status is StepStatus.CANCELLED:
            self.view.warn(f"Step {outcome.index + 1} skipped")
        elif outcome.status is StepStatus.FAILED:
            self.view.error(outcome.reason or "step failed")
            self.view.warn("Stopping execution. Use 'n' to continue from here.")

    def _command_step(self, number: int) -> None:
        if not 1 <= number <= self.engine.step_count:
            self.view.error("Invalid step number")
            return
        outcome = self.engine.run_step(number - 1)
        self._report(outcome)
        if outcome.succeeded:
            self.view.info("Request completed successfully")

    def _report(self, outcome: StepOutcome) -> None:
        if outcome.status is StepStatus.CANCELLED:
            self.view.warn("Request cancelled")
        elif outcome.status is StepStatus.FAILED:
            self.view.error(outcome.reason or "step failed")


__all__ = ["ApilineRepl"]
