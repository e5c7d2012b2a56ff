"""In-process stand-ins for the browser window and Angular's testability API."""

import heapq
import itertools
import logging
import re
from typing import Any, Callable, Dict, List, Mapping, Optional

from bs4 import BeautifulSoup
from bs4.element import PageElement

from .dom import is_element, is_text

logger = logging.getLogger(__name__)

BIND_ATTRS = ("ng-bind", "data-ng-bind", "ng:bind", "ng-bind-template", "data-ng-bind-template")
MODEL_ATTRS = ("ng-model", "data-ng-model", "ng:model")
INTERPOLATION = re.compile(r"\{\{(.*?)\}\}")


def binding_matches(expression: str, binding: str, exact_match: bool) -> bool:
    """
    Check one binding expression against a searched binding.

    Substring search for partial matches. An exact match compares against
    the whole expression or any single {{...}} interpolation, with or
    without the braces.
    """
    if not exact_match:
        return binding in expression
    wanted = binding.strip()
    if wanted.startswith("{{") and wanted.endswith("}}"):
        wanted = wanted[2:-2].strip()
    expressions = [found.strip() for found in INTERPOLATION.findall(expression)] or [expression.strip()]
    return wanted in expressions


class LocalAngular:
    """State of one Angular app: scope values, location and pending requests."""

    def __init__(self, scope: Optional[Mapping[str, Any]] = None, location: str = "", resume_bootstrap: bool = True):
        self.scope: Dict[str, Any] = dict(scope or {})
        self.location = location
        self.resume_bootstrap = resume_bootstrap
        self.animations_allowed = True
        self.outstanding_requests = 0
        self._idle_callbacks: List[Callable[[], None]] = []

    def get_testability(self, element: Optional[PageElement]) -> "LocalTestability":
        if element is None:
            raise ValueError("no injector found for element argument to getTestability")
        return LocalTestability(self, element)

    def start_request(self) -> None:
        self.outstanding_requests += 1

    def finish_request(self) -> None:
        self.outstanding_requests = max(0, self.outstanding_requests - 1)
        if self.outstanding_requests == 0:
            callbacks, self._idle_callbacks = self._idle_callbacks, []
            for callback in callbacks:
                callback()

    def when_idle(self, callback: Callable[[], None]) -> None:
        if self.outstanding_requests == 0:
            callback()
        else:
            self._idle_callbacks.append(callback)


class LocalTestability:
    """Testability API bound to the element it was requested for."""

    def __init__(self, angular: LocalAngular, element: PageElement):
        self.angular = angular
        self.element = element

    def find_bindings(self, binding: str, exact_match: bool) -> List[PageElement]:
        """Return bound elements and interpolated text nodes below the element, in document order."""
        matches = []
        for node in self.element.descendants:
            if is_element(node):
                expressions = [node[attr] for attr in BIND_ATTRS if node.has_attr(attr)]
            elif is_text(node) and "{{" in node:
                expressions = [str(node)]
            else:
                continue
            if any(binding_matches(expression, binding, exact_match) for expression in expressions):
                matches.append(node)
        return matches

    def find_models(self, model: str) -> List[PageElement]:
        return [
            node
            for node in self.element.descendants
            if is_element(node) and any(node.get(attr) == model for attr in MODEL_ATTRS)
        ]

    def get_location(self) -> str:
        return self.angular.location

    def set_location(self, url: str) -> None:
        logger.debug(f"Local location change: {self.angular.location} -> {url}")
        self.angular.location = url

    def eval(self, expression: str) -> Any:
        """Resolve a dotted path against the scope; None where Angular yields undefined."""
        value: Any = self.angular.scope
        for part in expression.strip().split("."):
            if not isinstance(value, Mapping) or part not in value:
                return None
            value = value[part]
        return value

    def allow_animations(self, allow: Optional[bool] = None) -> bool:
        if allow is not None:
            self.angular.animations_allowed = bool(allow)
        return self.angular.animations_allowed

    def notify_when_no_outstanding_requests(self, callback: Callable[[], None]) -> None:
        self.angular.when_idle(callback)


class LocalWindow:
    """Document, optional Angular app and a virtual clock for setTimeout."""

    def __init__(self, document: BeautifulSoup, angular: Optional[LocalAngular] = None):
        self.document = document
        self.angular = angular
        self.now = 0
        self.console: List[str] = []
        self._timers: List[tuple] = []
        self._sequence = itertools.count()

    def set_timeout(self, callback: Callable[[], None], delay_ms: int = 0) -> None:
        heapq.heappush(self._timers, (self.now + delay_ms, next(self._sequence), callback))

    def run_timers(self, until: Optional[Callable[[], bool]] = None) -> None:
        """Fire pending timers in due order, advancing the clock, until ``until()`` holds or none are left."""
        while self._timers and not (until and until()):
            due, _, callback = heapq.heappop(self._timers)
            self.now = max(self.now, due)
            callback()

    def get_testability(self, element: Optional[PageElement]) -> LocalTestability:
        if self.angular is None:
            raise NameError("angular is not defined")
        return self.angular.get_testability(element)

    def query_selector(self, selector: str) -> Optional[PageElement]:
        return self.document.select_one(selector)
