"""Locate elements in Angular apps through bindings, models and repeaters."""

from .config import NgConfig, Timeouts
from .exceptions import (
    AngularNotFoundError,
    AngularSyncError,
    ElementNotFoundError,
    LocatorUsageError,
    NgLocatorError,
    ScriptExecutionError,
    ScriptRegistrationError,
    UnknownLocatorError,
    UnknownScriptError,
)
from .executor import CommandDriver, ScriptExecutor
from .locators import LocatorDescriptor, NgBy, RepeaterLocator, RepeaterQuery
from .page import AngularPage
from .registry import FinderFunction, ScriptCommand, ScriptRegistry, build_default_registry, wrap_script

__all__ = [
    "AngularPage",
    "NgBy",
    "LocatorDescriptor",
    "RepeaterLocator",
    "RepeaterQuery",
    "FinderFunction",
    "ScriptCommand",
    "ScriptRegistry",
    "ScriptExecutor",
    "CommandDriver",
    "build_default_registry",
    "wrap_script",
    "NgConfig",
    "Timeouts",
    "NgLocatorError",
    "ScriptRegistrationError",
    "UnknownScriptError",
    "UnknownLocatorError",
    "LocatorUsageError",
    "ScriptExecutionError",
    "ElementNotFoundError",
    "AngularNotFoundError",
    "AngularSyncError",
]
