"""In-memory variable store threaded through workflow steps."""

from __future__ import annotations

from typing import Dict, Iterator, Mapping, Optional, Tuple


class VariableStore:
    """Mapping of variable name to string value."""

    def __init__(self, initial: Optional[Mapping[str, str]] = None) -> None:
        self._values: Dict[str, str] = dict(initial or {})

    def get(self, name: str) -> Optional[str]:
        return self._values.get(name)

    def set(self, name: str, value: str) -> None:
        self._values[name] = value

    def merge_preserving_existing(self, incoming: "VariableStore | Mapping[str, str]") -> None:
        """Insert names from ``incoming`` that are not already present.

        Existing entries are never overwritten, so values learned at runtime
        survive a reload of the definition file.
        """
        items = incoming.items()
        for name, value in items:
            self._values.setdefault(name, value)

    def items(self) -> Iterator[Tuple[str, str]]:
        return iter(list(self._values.items()))

    def to_dict(self) -> Dict[str, str]:
        return dict(self._values)

    def copy(self) -> "VariableStore":
        return VariableStore(self._values)

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VariableStore):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        return f"VariableStore({self._values!r})"


__all__ = ["VariableStore"]
