from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple, Union

import pytest

from apiline.errors import DefinitionParseError, NetworkError, PersistenceError
from apiline.workflows import StepExecutor, WorkflowDefinition, WorkflowEngine
from apiline.workflows.models import Step
from apiline.workflows.request import ResolvedRequest


class FakeTransport:
    """Replays canned ``(status, body)`` pairs or raises queued errors."""

    def __init__(self, responses: Optional[List[Union[Tuple[int, str], Exception]]] = None) -> None:
        self.responses = list(responses or [])
        self.calls: List[Dict[str, Any]] = []

    def send(self, method, url, headers, body=None):
        self.calls.append({"method": method, "url": url, "headers": dict(headers), "body": body})
        if not self.responses:
            raise NetworkError("no response queued")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class FakeView:
    def __init__(self, answers: Optional[List[str]] = None) -> None:
        self.answers = list(answers or [])
        self.prompts: List[str] = []
        self.previews: List[ResolvedRequest] = []
        self.saved_values: Dict[str, str] = {}
        self.persist_results: List[Optional[PersistenceError]] = []

    def preview(self, index: int, step: Step, request: ResolvedRequest) -> None:
        self.previews.append(request)

    def ask(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.answers.pop(0) if self.answers else ""

    def response(self, status: int, body: str) -> None:
        pass

    def saved(self, name: str, value: str) -> None:
        self.saved_values[name] = value

    def persisted(self, error: Optional[PersistenceError]) -> None:
        self.persist_results.append(error)


class MemorySource:
    """Definition source kept as a plain dict."""

    def __init__(self, data: dict) -> None:
        self.data = data
        self.broken = False
        self.fail_save = False
        self.saved: List[dict] = []

    def load(self) -> WorkflowDefinition:
        if self.broken:
            raise DefinitionParseError("Failed to parse YAML config: broken")
        return WorkflowDefinition.from_dict(self.data)

    def save(self, definition: WorkflowDefinition) -> None:
        if self.fail_save:
            raise PersistenceError("disk full")
        self.saved.append(definition.to_dict())


@pytest.fixture
def definition_data() -> dict:
    return {
        "variables": {"user": "alice"},
        "requests": [
            {
                "name": "Login",
                "method": "post",
                "endpoint": "/login",
                "payload": {"username": "${user}"},
                "auth": "none",
                "save_as": "jwt_token",
                "extract_path": "$.token",
            },
            {
                "name": "Create item",
                "method": "POST",
                "endpoint": "/items",
                "payload": {"title": "item of ${user}"},
                "auth": "jwt",
                "expected_status": 201,
                "save_multiple": {"item_id": "$.id", "owner": "$.owner"},
            },
            {
                "name": "Fetch item",
                "method": "GET",
                "endpoint": "/items/latest",
                "auth": "admin",
            },
        ],
    }


@pytest.fixture
def make_engine():
    def _make(data: dict, responses=None, answers=None, start_at: int = 0):
        source = MemorySource(data)
        transport = FakeTransport(responses)
        view = FakeView(answers)
        executor = StepExecutor(
            transport=transport,
            source=source,
            view=view,
            base_url="http://api.test",
            default_admin_key="admin-key",
        )
        engine = WorkflowEngine(source.load(), source=source, executor=executor, start_at=start_at)
        return engine, source, transport, view

    return _make
