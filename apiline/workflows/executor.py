"""Execution of a single workflow step."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Protocol

from ..errors import MalformedResponse, PersistenceError, StepError, UnexpectedStatus
from ..transport import Transport
from .extract import extract_value
from .models import Step, WorkflowDefinition
from .request import DEFAULT_JWT_VARIABLE, ResolvedRequest, build_request
from .storage import DefinitionSource
from .variables import VariableStore

logger = logging.getLogger(__name__)

_EXCERPT_LIMIT = 200
DECLINE_ANSWERS = frozenset({"n", "no"})


class StepView(Protocol):
    """Presentation and input used while a step runs."""

    def preview(self, index: int, step: Step, request: ResolvedRequest) -> None:  # pragma: no cover
        ...

    def ask(self, prompt: str) -> str:  # pragma: no cover
        ...

    def response(self, status: int, body: str) -> None:  # pragma: no cover
        ...

    def saved(self, name: str, value: str) -> None:  # pragma: no cover
        ...

    def persisted(self, error: Optional[PersistenceError]) -> None:  # pragma: no cover
        ...


class StepStatus(str, Enum):
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(slots=True)
class StepOutcome:
    """Terminal result of one step invocation."""

    index: int
    step: Step
    status: StepStatus
    extracted: Dict[str, str] = field(default_factory=dict)
    error: Optional[StepError] = None
    persist_error: Optional[PersistenceError] = None

    @property
    def succeeded(self) -> bool:
        return self.status is StepStatus.COMPLETED

    @property
    def extracted_count(self) -> int:
        return len(self.extracted)

    @property
    def reason(self) -> Optional[str]:
        return str(self.error) if self.error is not None else None


class StepExecutor:
    """Build, preview, confirm, dispatch, extract and persist one step."""

    def __init__(
        self,
        *,
        transport: Transport,
        source: DefinitionSource,
        view: StepView,
        base_url: str,
        default_admin_key: str = "",
        jwt_variable: str = DEFAULT_JWT_VARIABLE,
    ) -> None:
        self._transport = transport
        self._source = source
        self._view = view
        self._base_url = base_url
        self._default_admin_key = default_admin_key
        self._jwt_variable = jwt_variable

    def execute(
        self,
        index: int,
        definition: WorkflowDefinition,
        variables: VariableStore,
        *,
        confirm: bool = True,
    ) -> StepOutcome:
        step = definition.steps[index]
        try:
            request = build_request(
                step,
                variables,
                base_url=self._base_url,
                default_admin_key=self._default_admin_key,
                jwt_variable=self._jwt_variable,
            )
            self._view.preview(index, step, request)

            if confirm and not self._confirmed():
                logger.debug("step %d cancelled", index + 1)
                return StepOutcome(index=index, step=step, status=StepStatus.CANCELLED)

            status, body = self._transport.send(request.method, request.url, request.headers, request.body)
            self._view.response(status, body)
            if status != step.expected_status:
                raise UnexpectedStatus(step.expected_status, status, body)

            extracted = self._extract(step, _parse_body(body))
        except StepError as exc:
            logger.info("step %d (%s) failed: %s", index + 1, step.name, exc)
            return StepOutcome(index=index, step=step, status=StepStatus.FAILED, error=exc)

        for name, value in extracted.items():
            variables.set(name, value)
            self._view.saved(name, value)

        outcome = StepOutcome(index=index, step=step, status=StepStatus.COMPLETED, extracted=extracted)
        if extracted:
            outcome.persist_error = self._persist(definition, variables)
        return outcome

    def _confirmed(self) -> bool:
        answer = self._view.ask("Execute this request? [Y/n]")
        return answer.strip().lower() not in DECLINE_ANSWERS

    @staticmethod
    def _extract(step: Step, response: Any) -> Dict[str, str]:
        extracted: Dict[str, str] = {}
        if step.save_as is not None and step.extract_path is not None:
            value = extract_value(response, step.extract_path)
            if value is not None:
                extracted[step.save_as] = value
        for name, path in (step.save_multiple or {}).items():
            value = extract_value(response, path)
            if value is not None:
                extracted[name] = value
        return extracted

    def _persist(self, definition: WorkflowDefinition, variables: VariableStore) -> Optional[PersistenceError]:
        definition.variables = variables.to_dict()
        try:
            self._source.save(definition)
        except PersistenceError as exc:
            logger.warning("variables kept in memory only: %s", exc)
            self._view.persisted(exc)
            return exc
        self._view.persisted(None)
        return None


def _parse_body(body: str) -> Any:
    if not body.strip():
        return {}
    try:
        return json.loads(body)
    except ValueError as exc:
        raise MalformedResponse(_excerpt(body)) from exc


def _excerpt(body: str) -> str:
    if len(body) > _EXCERPT_LIMIT:
        return body[: _EXCERPT_LIMIT - 3] + "..."
    return body


__all__ = ["DECLINE_ANSWERS", "StepExecutor", "StepOutcome", "StepStatus", "StepView"]
