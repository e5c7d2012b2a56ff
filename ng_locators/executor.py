"""Dispatches finder commands to a driver and normalizes in-browser failures."""

import logging
from abc import ABC, abstractmethod
from typing import Any, List, Optional

from selenium.common.exceptions import JavascriptException

from .exceptions import ScriptExecutionError
from .registry import ScriptCommand, ScriptRegistry

logger = logging.getLogger(__name__)


class CommandDriver(ABC):
    """
    Driver that runs finders by name instead of by source text.

    Implemented by in-process harnesses that interpret a fixed function
    table; a real WebDriver gets the wrapped source instead.
    """

    @abstractmethod
    def run_command(self, name: str, *args: Any) -> Any:
        """Run a synchronous finder."""

    @abstractmethod
    def run_async_command(self, name: str, *args: Any) -> Any:
        """Run an asynchronous finder and return the value passed to its callback."""


class ScriptExecutor:
    """Runs registry finders against a driver."""

    def __init__(self, registry: ScriptRegistry):
        self.registry = registry

    def execute(self, driver, command: ScriptCommand, *extra: Any) -> Any:
        """
        Run a synchronous finder.

        Args:
            driver: Selenium WebDriver or CommandDriver
            command: Finder name and bound arguments
            extra: Arguments appended after the bound ones (usually the scope element)

        Returns:
            Whatever the finder returned

        Raises:
            ScriptExecutionError: If the finder threw inside the browser
        """
        args = command.args + extra
        logger.debug(f"Running {command.name} with {len(args)} argument(s)")
        try:
            if isinstance(driver, CommandDriver):
                return driver.run_command(command.name, *args)
            return driver.execute_script(self.registry.to_executable_string(command.name), *args)
        except JavascriptException as e:
            raise ScriptExecutionError(command.name, e.msg) from e

    def execute_async(self, driver, command: ScriptCommand, *extra: Any) -> Any:
        """Run an asynchronous finder; the driver supplies the trailing callback."""
        args = command.args + extra
        logger.debug(f"Running async {command.name} with {len(args)} argument(s)")
        try:
            if isinstance(driver, CommandDriver):
                return driver.run_async_command(command.name, *args)
            return driver.execute_async_script(self.registry.to_executable_string(command.name), *args)
        except JavascriptException as e:
            raise ScriptExecutionError(command.name, e.msg) from e

    def find_elements(self, driver, command: ScriptCommand, using: Optional[Any] = None) -> List[Any]:
        """Run an element finder scoped to ``using`` (whole document when None)."""
        result = self.execute(driver, command, using)
        if result is None:
            return []
        return list(result)
