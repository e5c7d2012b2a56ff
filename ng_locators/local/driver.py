"""Driver that runs finders in-process against a parsed HTML page."""

import logging
from typing import Any, Callable, Dict, List, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag
from selenium.common.exceptions import JavascriptException, TimeoutException
from selenium.webdriver.common.by import By

from ..exceptions import ScriptRegistrationError
from ..executor import CommandDriver
from .angular import LocalAngular, LocalWindow
from .finders import FUNCTIONS

logger = logging.getLogger(__name__)

# selenium strategies expressible as CSS
_CSS_STRATEGIES: Dict[str, Callable[[str], str]] = {
    By.CSS_SELECTOR: lambda value: value,
    By.ID: lambda value: f"#{value}",
    By.CLASS_NAME: lambda value: f".{value}",
    By.TAG_NAME: lambda value: value,
    By.NAME: lambda value: f'[name="{value}"]',
}


class LocalDriver(CommandDriver):
    """
    Runs finder commands against an in-memory page.

    No source text is evaluated: a command name selects a Python function from
    an explicitly registered table, so custom locators need a matching
    register() call. Failures surface as selenium's JavascriptException, the
    same as from a real browser.
    """

    def __init__(self, html: str = "", angular: Optional[LocalAngular] = None, url: str = "http://localhost/"):
        """
        Initialize local driver.

        Args:
            html: Page markup
            angular: Angular app state, None for a page without Angular
            url: Value reported as current_url
        """
        self.window = LocalWindow(BeautifulSoup(html, "html.parser"), angular)
        self.current_url = url
        self.script_timeout: Optional[float] = None
        self._functions: Dict[str, Callable[..., Any]] = dict(FUNCTIONS)

    @property
    def document(self) -> BeautifulSoup:
        return self.window.document

    def register(self, name: str, function: Callable[..., Any]) -> None:
        """Add a command; ``function`` receives the LocalWindow followed by the command arguments."""
        if name in self._functions:
            raise ScriptRegistrationError(f"Local command already registered: {name}")
        self._functions[name] = function

    def run_command(self, name: str, *args: Any) -> Any:
        function = self._lookup(name)
        try:
            return function(self.window, *args)
        except Exception as e:
            raise JavascriptException(f"{type(e).__name__}: {e}") from e

    def run_async_command(self, name: str, *args: Any) -> Any:
        function = self._lookup(name)
        results: List[Any] = []

        def callback(value: Any = None) -> None:
            results.append(value)

        try:
            function(self.window, *args, callback)
            self.window.run_timers(until=lambda: bool(results))
        except Exception as e:
            raise JavascriptException(f"{type(e).__name__}: {e}") from e
        if not results:
            raise TimeoutException(f"{name} never invoked its callback")
        return results[0]

    def get(self, url: str) -> None:
        logger.info(f"Local navigation to {url}")
        self.current_url = url

    def set_script_timeout(self, time_to_wait: float) -> None:
        self.script_timeout = time_to_wait

    def find_elements(self, by: str = By.ID, value: Optional[str] = None) -> List[Tag]:
        """Plain selenium-style lookup for the strategies that map onto CSS."""
        try:
            to_css = _CSS_STRATEGIES[by]
        except KeyError as e:
            raise NotImplementedError(f"Local driver does not support {by!r} lookups") from e
        return self.document.select(to_css(value or ""))

    def _lookup(self, name: str) -> Callable[..., Any]:
        try:
            return self._functions[name]
        except KeyError as e:
            raise JavascriptException(f"TypeError: {name} is not a function") from e
