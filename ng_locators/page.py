"""Base page class for Angular applications."""

import logging
from typing import Any, List, Optional, Tuple, Union

from selenium.common.exceptions import TimeoutException
from selenium.webdriver.support.ui import WebDriverWait

from . import clientscripts
from .config import NgConfig, Timeouts
from .exceptions import AngularNotFoundError, AngularSyncError, ElementNotFoundError
from .executor import ScriptExecutor
from .locators import LocatorDescriptor, NgBy
from .registry import ScriptCommand, ScriptRegistry, build_default_registry

logger = logging.getLogger(__name__)

Locator = Union[LocatorDescriptor, Tuple[str, str]]


class AngularPage:
    """Base class for page objects of Angular apps."""

    def __init__(self, driver, base_url: str, config: Optional[NgConfig] = None, registry: Optional[ScriptRegistry] = None):
        """
        Initialize page object.

        Args:
            driver: Selenium WebDriver instance or CommandDriver
            base_url: Base URL for the application
            config: Synchronization settings
            registry: Finder registry shared with the locators in use
        """
        self.driver = driver
        self.base_url = base_url
        self.config = config or NgConfig()
        self.registry = registry if registry is not None else build_default_registry()
        self.executor = ScriptExecutor(self.registry)
        self.by = NgBy(self.registry)
        self.driver.set_script_timeout(self.config.script_timeout)

    def navigate_to(self, path: str = "") -> None:
        """Navigate to a path and make sure Angular is there."""
        url = f"{self.base_url}{path}"
        logger.info(f"Navigating to {url}")
        self.driver.get(url)
        if not self.config.ignore_synchronization:
            self.test_for_angular()

    def test_for_angular(self, attempts: Optional[int] = None) -> None:
        """
        Check that the page runs a bootstrapped Angular app.

        Args:
            attempts: Seconds the browser keeps polling, config.bootstrap_attempts by default

        Raises:
            AngularNotFoundError: If Angular never showed up or cannot be resumed
        """
        if attempts is None:
            attempts = self.config.bootstrap_attempts
        command = ScriptCommand(clientscripts.TEST_FOR_ANGULAR.name, (attempts,))
        found, message = self.executor.execute_async(self.driver, command)
        if not found:
            raise AngularNotFoundError(f"Angular could not be found on the page {self.driver.current_url}: {message}")
        logger.info("Angular found on page")

    def wait_for_angular(self) -> None:
        """
        Wait until Angular has no outstanding $http calls and has finished rendering.

        Raises:
            AngularSyncError: If the browser reported an error or the script timed out
        """
        if self.config.ignore_synchronization:
            return
        command = ScriptCommand(clientscripts.WAIT_FOR_ANGULAR.name, (self.config.root_selector,))
        try:
            error = self.executor.execute_async(self.driver, command)
        except TimeoutException as e:
            raise AngularSyncError(f"Timed out waiting for Angular on {self.config.root_selector}") from e
        if error is not None:
            raise AngularSyncError(f"Error while waiting to sync with the page: {error}")

    def find_elements(self, locator: Locator, using: Optional[Any] = None) -> List[Any]:
        """
        Find multiple elements.

        Args:
            locator: Angular locator or a selenium (By.TYPE, value) tuple
            using: Element scoping an Angular locator

        Returns:
            List of elements
        """
        self.wait_for_angular()
        if isinstance(locator, LocatorDescriptor):
            return locator.find_elements_override(self.driver, using)
        return self.driver.find_elements(*locator)

    def find_element(self, locator: Locator, timeout: int = Timeouts.SHORT_WAIT, using: Optional[Any] = None) -> Any:
        """
        Find element with explicit wait.

        Raises:
            ElementNotFoundError: If element not found within timeout
        """
        try:
            wait = WebDriverWait(self.driver, timeout)
            elements = wait.until(lambda d: self.find_elements(locator, using))
            return elements[0]
        except TimeoutException as e:
            raise ElementNotFoundError(f"Element not found: {locator}") from e

    def is_element_present(self, locator: Locator) -> bool:
        """Check if element is present in DOM."""
        return len(self.find_elements(locator)) > 0

    def get_location_abs_url(self) -> str:
        """Return the app's current $location.absUrl()."""
        self.wait_for_angular()
        command = ScriptCommand(clientscripts.GET_LOCATION_ABS_URL.name, (self.config.root_selector,))
        return self.executor.execute(self.driver, command)

    def set_location(self, url: str) -> None:
        """Navigate in-app, e.g. '/path?search=a&b=c#hash', without reloading."""
        self.wait_for_angular()
        logger.info(f"Setting in-app location to {url}")
        command = ScriptCommand(clientscripts.SET_LOCATION.name, (self.config.root_selector, url))
        self.executor.execute(self.driver, command)

    def evaluate(self, element: Any, expression: str) -> Any:
        """Evaluate an Angular expression in the scope of ``element``."""
        self.wait_for_angular()
        command = ScriptCommand(clientscripts.EVALUATE.name, (element, expression))
        return self.executor.execute(self.driver, command)

    def allow_animations(self, element: Any, allow: Optional[bool] = None) -> Any:
        """Enable/disable ngAnimate for ``element``; with no value, report the current setting."""
        self.wait_for_angular()
        command = ScriptCommand(clientscripts.ALLOW_ANIMATIONS.name, (element, allow))
        return self.executor.execute(self.driver, command)

    def install_client_side_scripts(self) -> None:
        """Expose every registered finder as window.<install_namespace> for debugging from the browser console."""
        logger.info(f"Installing client side scripts as window.{self.config.install_namespace}")
        self.driver.execute_script(self.registry.install_script(self.config.install_namespace))
