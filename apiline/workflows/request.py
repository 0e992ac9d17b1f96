"""Turn a declared step into a concrete, dispatchable request."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..errors import UnknownAuthKind, UnsupportedMethod
from .models import Step
from .variables import VariableStore

SUPPORTED_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH")
DEFAULT_JWT_VARIABLE = "jwt_token"

_PLACEHOLDER = re.compile(r"\$\{([^}]*)\}")


@dataclass(slots=True)
class ResolvedRequest:
    """Request ready to be handed to the transport."""

    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Any = None
    auth_label: str = "none"


def resolve_method(method: str) -> str:
    normalized = method.strip().upper()
    if normalized not in SUPPORTED_METHODS:
        raise UnsupportedMethod(method)
    return normalized


def resolve_auth_headers(
    auth: str,
    variables: VariableStore,
    *,
    default_admin_key: str,
    jwt_variable: str = DEFAULT_JWT_VARIABLE,
) -> Dict[str, str]:
    if auth == "none":
        return {}
    if auth == "admin":
        return {"api-key": default_admin_key}
    if auth == "jwt":
        # A missing token still produces a header with an empty bearer value.
        token = variables.get(jwt_variable) or ""
        return {"Authorization": f"Bearer {token}"}
    if auth.startswith("Bearer "):
        return {"Authorization": auth}
    if auth.startswith("api-key:"):
        return {"api-key": auth[len("api-key:"):]}
    raise UnknownAuthKind(auth)


def substitute_variables(value: Any, variables: VariableStore) -> Any:
    """Return a copy of ``value`` with ``${name}`` placeholders replaced.

    String leaves are rewritten in a single pass, so substituted text is
    never expanded again. Undefined placeholders are left verbatim and
    non-string leaves are returned unchanged.
    """
    if isinstance(value, str):
        return _substitute_text(value, variables)
    if isinstance(value, dict):
        return {key: substitute_variables(item, variables) for key, item in value.items()}
    if isinstance(value, list):
        return [substitute_variables(item, variables) for item in value]
    return value


def _substitute_text(text: str, variables: VariableStore) -> str:
    def _replace(match: "re.Match[str]") -> str:
        resolved = variables.get(match.group(1))
        return match.group(0) if resolved is None else resolved

    return _PLACEHOLDER.sub(_replace, text)


def build_request(
    step: Step,
    variables: VariableStore,
    *,
    base_url: str,
    default_admin_key: str = "",
    jwt_variable: str = DEFAULT_JWT_VARIABLE,
) -> ResolvedRequest:
    method = resolve_method(step.method)
    headers = {"Content-Type": "application/json"}
    headers.update(
        resolve_auth_headers(
            step.auth,
            variables,
            default_admin_key=default_admin_key,
            jwt_variable=jwt_variable,
        )
    )
    body: Optional[Any] = None
    if step.payload is not None:
        body = substitute_variables(step.payload, variables)
    return ResolvedRequest(
        method=method,
        url=f"{base_url}{step.endpoint}",
        headers=headers,
        body=body,
        auth_label=step.auth,
    )


__all__ = [
    "DEFAULT_JWT_VARIABLE",
    "ResolvedRequest",
    "SUPPORTED_METHODS",
    "build_request",
    "resolve_auth_headers",
    "resolve_method",
    "substitute_variables",
]
