"""Response value extraction for ``save_as`` / ``save_multiple``."""

from __future__ import annotations

import json
from typing import Any, Optional

from ..errors import ExtractionError

PATH_PREFIX = "$."


def extract_value(response: Any, path: str) -> Optional[str]:
    """Read a top-level field of ``response`` selected by ``$.<field>``.

    Only the top-level subset is understood: no nesting, indexing or
    wildcards. Paths that do not start with ``$.`` and absent fields yield
    ``None``; composite values are returned as compact JSON text.
    """
    if not isinstance(path, str):
        raise ExtractionError(f"Extract path must be a string, got {type(path).__name__}")
    if not path.startswith(PATH_PREFIX):
        return None
    field = path[len(PATH_PREFIX):]
    if not field:
        raise ExtractionError(f"Extract path '{path}' does not name a field")
    if not isinstance(response, dict) or field not in response:
        return None
    return stringify(response[field])


def stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


__all__ = ["PATH_PREFIX", "extract_value", "stringify"]
