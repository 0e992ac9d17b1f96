"""YAML-backed workflow definition source."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import yaml

from ..errors import DefinitionParseError, PersistenceError
from .models import WorkflowDefinition

logger = logging.getLogger(__name__)


class DefinitionSource(Protocol):
    """Where a workflow definition is loaded from and saved back to."""

    def load(self) -> WorkflowDefinition:  # pragma: no cover - protocol definition
        ...

    def save(self, definition: WorkflowDefinition) -> None:  # pragma: no cover - protocol definition
        ...


class _NoAliasDumper(yaml.SafeDumper):
    def ignore_aliases(self, data) -> bool:
        return True


class _DefinitionLoader(yaml.SafeLoader):
    """Safe loader that keeps date-like scalars as plain strings."""


_DefinitionLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:timestamp"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


@dataclass(slots=True)
class YamlDefinitionSource:
    """Reads and writes a definition file with ``variables`` and ``requests``."""

    path: Path

    def load(self) -> WorkflowDefinition:
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise DefinitionParseError(f"Failed to read config: {self.path}: {exc}") from exc
        try:
            data = yaml.load(text, Loader=_DefinitionLoader)
        except yaml.YAMLError as exc:
            raise DefinitionParseError(f"Failed to parse YAML config: {exc}") from exc
        try:
            definition = WorkflowDefinition.from_dict(data)
        except (ValueError, TypeError) as exc:
            raise DefinitionParseError(f"Invalid workflow definition: {exc}") from exc
        logger.debug("loaded %d requests from %s", len(definition.steps), self.path)
        return definition

    def save(self, definition: WorkflowDefinition) -> None:
        try:
            text = yaml.dump(
                definition.to_dict(),
                Dumper=_NoAliasDumper,
                sort_keys=False,
                allow_unicode=True,
            )
        except yaml.YAMLError as exc:
            raise PersistenceError(f"Failed to serialize config to YAML: {exc}") from exc
        try:
            self.path.write_text(text, encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(f"Failed to write config to {self.path}: {exc}") from exc
        logger.debug("saved %d variables to %s", len(definition.variables), self.path)


__all__ = ["DefinitionSource", "YamlDefinitionSource"]
