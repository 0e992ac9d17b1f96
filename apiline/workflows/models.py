"""Workflow definition data model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

DEFAULT_EXPECTED_STATUS = 200


@dataclass(slots=True)
class Step:
    """A single declared HTTP request of a workflow."""

    name: str
    method: str
    endpoint: str
    payload: Any = None
    auth: str = "none"
    expected_status: int = DEFAULT_EXPECTED_STATUS
    save_as: Optional[str] = None
    extract_path: Optional[str] = None
    save_multiple: Optional[Dict[str, str]] = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if not self.name:
            raise ValueError("request is missing a name")
        if not self.method:
            raise ValueError(f"request '{self.name}' is missing a method")
        if not self.endpoint:
            raise ValueError(f"request '{self.name}' is missing an endpoint")
        if isinstance(self.expected_status, bool) or not isinstance(self.expected_status, int):
            raise ValueError(f"request '{self.name}' has a non-integer expected_status")
        if (self.save_as is None) != (self.extract_path is None):
            raise ValueError(f"request '{self.name}' must declare save_as and extract_path together")
        if not _is_json_value(self.payload):
            raise ValueError(f"request '{self.name}' has a payload that cannot be sent as JSON")
        if self.save_multiple is not None:
            if not isinstance(self.save_multiple, dict):
                raise ValueError(f"request '{self.name}' has a save_multiple that is not a mapping")
            for var_name, path in self.save_multiple.items():
                if not isinstance(var_name, str) or not isinstance(path, str):
                    raise ValueError(f"request '{self.name}' has a non-string save_multiple entry")

    @property
    def saves_variables(self) -> bool:
        return self.save_as is not None or bool(self.save_multiple)

    def to_dict(self) -> dict:
        data: Dict[str, Any] = {
            "name": self.name,
            "method": self.method,
            "endpoint": self.endpoint,
        }
        if self.payload is not None:
            data["payload"] = self.payload
        data["auth"] = self.auth
        data["expected_status"] = self.expected_status
        if self.save_as is not None:
            data["save_as"] = self.save_as
            data["extract_path"] = self.extract_path
        if self.save_multiple:
            data["save_multiple"] = dict(self.save_multiple)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Step":
        if not isinstance(data, dict):
            raise ValueError("each request must be a mapping")
        return cls(
            name=str(data.get("name") or ""),
            method=str(data.get("method") or ""),
            endpoint=str(data.get("endpoint") or ""),
            payload=data.get("payload"),
            auth=str(data.get("auth") or "none"),
            expected_status=data.get("expected_status", DEFAULT_EXPECTED_STATUS),
            save_as=data.get("save_as"),
            extract_path=data.get("extract_path"),
            save_multiple=data.get("save_multiple"),
        )


@dataclass(slots=True)
class WorkflowDefinition:
    """Ordered steps plus the declared variable snapshot."""

    steps: List[Step] = field(default_factory=list)
    variables: Dict[str, str] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.steps)

    def to_dict(self) -> dict:
        return {
            "variables": dict(self.variables),
            "requests": [step.to_dict() for step in self.steps],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WorkflowDefinition":
        if not isinstance(data, dict):
            raise ValueError("definition must be a mapping with 'variables' and 'requests'")
        variables = data.get("variables") or {}
        if not isinstance(variables, dict):
            raise ValueError("'variables' must be a mapping")
        requests = data.get("requests")
        if not isinstance(requests, list):
            raise ValueError("'requests' must be a list")
        return cls(
            steps=[Step.from_dict(item) for item in requests],
            variables={str(key): _stringify(value) for key, value in variables.items()},
        )

    def copy(self) -> "WorkflowDefinition":
        return WorkflowDefinition.from_dict(self.to_dict())


def _is_json_value(value: Any) -> bool:
    if value is None or isinstance(value, (str, bool, int, float)):
        return True
    if isinstance(value, list):
        return all(_is_json_value(item) for item in value)
    if isinstance(value, dict):
        return all(isinstance(key, str) and _is_json_value(item) for key, item in value.items())
    return False


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
