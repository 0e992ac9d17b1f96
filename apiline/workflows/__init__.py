"""Workflow definition, execution and reload."""

from .engine import ReloadResult, RunAllResult, WorkflowEngine
from .executor import StepExecutor, StepOutcome, StepStatus, StepView
from .extract import extract_value
from .models import Step, WorkflowDefinition
from .request import ResolvedRequest, build_request, substitute_variables
from .storage import DefinitionSource, YamlDefinitionSource
from .variables import VariableStore

__all__ = [
    "DefinitionSource",
    "ReloadResult",
    "ResolvedRequest",
    "RunAllResult",
    "Step",
    "StepExecutor",
    "StepOutcome",
    "StepStatus",
    "StepView",
    "VariableStore",
    "WorkflowDefinition",
    "WorkflowEngine",
    "YamlDefinitionSource",
    "build_request",
    "extract_value",
    "substitute_variables",
]
