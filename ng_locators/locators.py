"""Angular-aware locators: find elements by binding, model, repeater and more."""

import functools
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from . import clientscripts
from .exceptions import LocatorUsageError, ScriptRegistrationError, UnknownLocatorError
from .executor import ScriptExecutor
from .registry import FinderFunction, ScriptCommand, ScriptRegistry, build_default_registry

logger = logging.getLogger(__name__)

LocatorScript = Union[FinderFunction, str]


def render_message(locator_name: str, args: Sequence[Any]) -> str:
    """Render ``by.name("a", "b")`` for error messages."""
    joined = '", "'.join(str(arg) for arg in args)
    return f'by.{locator_name}("{joined}")'


@dataclass(frozen=True)
class LocatorDescriptor:
    """
    Recipe for locating elements: a finder command plus a diagnostic message.

    Holds no browser state; every call to find_elements_override runs the
    finder again.
    """

    command: ScriptCommand
    message: str
    executor: ScriptExecutor = field(repr=False, compare=False)

    def find_elements_override(self, driver, using: Optional[Any] = None) -> List[Any]:
        """
        Run the finder.

        Args:
            driver: Selenium WebDriver or CommandDriver
            using: Element scoping the search, None for the whole document

        Returns:
            Matching elements in the order the finder returned them
        """
        return self.executor.find_elements(driver, self.command, using)

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class RepeaterQuery:
    """A repeater, optionally narrowed to a row index and/or a column binding."""

    repeater: str
    index: Optional[int] = None
    binding: Optional[str] = None

    def to_command(self) -> ScriptCommand:
        # row+column resolves through findRepeaterElement whichever axis came first
        if self.index is not None and self.binding is not None:
            return ScriptCommand(clientscripts.FIND_REPEATER_ELEMENT.name, (self.repeater, self.index, self.binding))
        if self.index is not None:
            return ScriptCommand(clientscripts.FIND_REPEATER_ROWS.name, (self.repeater, self.index))
        if self.binding is not None:
            return ScriptCommand(clientscripts.FIND_REPEATER_COLUMN.name, (self.repeater, self.binding))
        return ScriptCommand(clientscripts.FIND_ALL_REPEATER_ROWS.name, (self.repeater,))


@dataclass(frozen=True)
class RepeaterLocator(LocatorDescriptor):
    """Locator for ng-repeat rows that can be narrowed by row and column."""

    query: RepeaterQuery = field(default=None)  # type: ignore[assignment]

    def row(self, index: int) -> "RepeaterLocator":
        """Narrow to the row at ``index`` (all elements of a segment for ng-repeat-start)."""
        if self.query.index is not None:
            raise LocatorUsageError(f"{self.message} already selects a row")
        return self._narrow(replace(self.query, index=index), f'.row("{index}")')

    def column(self, binding: str) -> "RepeaterLocator":
        """Narrow to the elements bound to ``binding``, e.g. '{{cat.name}}'."""
        if self.query.binding is not None:
            raise LocatorUsageError(f"{self.message} already selects a column")
        return self._narrow(replace(self.query, binding=binding), f'.column("{binding}")')

    def _narrow(self, query: RepeaterQuery, suffix: str) -> "RepeaterLocator":
        return RepeaterLocator(query.to_command(), self.message + suffix, self.executor, query)


class NgBy:
    """
    Factory for Angular locators.

    Built-in locators are methods; custom ones live in an explicit name map
    filled by add_locator() and are looked up when accessed.

    Example:
        by = NgBy()
        page.find_element(by.model("person.name"))
        page.find_element(by.repeater("cat in pets").row(0).column("{{cat.name}}"))
    """

    BUILTIN_LOCATORS = (
        "binding",
        "exact_binding",
        "model",
        "button_text",
        "partial_button_text",
        "css_containing_text",
        "repeater",
    )

    def __init__(self, registry: Optional[ScriptRegistry] = None, extensions: Optional[Mapping[str, LocatorScript]] = None):
        """
        Initialize the locator factory.

        Args:
            registry: Finder registry, a fresh default registry when omitted
            extensions: Custom locators to add, name -> script
        """
        self.registry = registry if registry is not None else build_default_registry()
        self.executor = ScriptExecutor(self.registry)
        self._locators: Dict[str, Callable[..., LocatorDescriptor]] = {
            name: getattr(self, name) for name in self.BUILTIN_LOCATORS
        }
        for name, script in (extensions or {}).items():
            self.add_locator(name, script)

    def add_locator(self, name: str, script: LocatorScript) -> None:
        """
        Add a custom locator, usable afterwards as ``by.<name>(*args)``.

        Args:
            name: Locator name
            script: FinderFunction, or a script body reading ``arguments``.
                It receives the locator arguments followed by the scope
                element (or null) and must return an array of elements.

        Raises:
            ScriptRegistrationError: If the locator or finder name is taken
        """
        if name in self._locators:
            raise ScriptRegistrationError(f"Locator already defined: {name}")
        if isinstance(script, FinderFunction):
            finder = script
            if finder.name not in self.registry:
                self.registry.register(finder)
            elif self.registry.get(finder.name) != finder:
                raise ScriptRegistrationError(f"Finder already registered with a different body: {finder.name}")
        else:
            finder = FinderFunction(name=name, body=script)
            self.registry.register(finder)

        logger.debug(f"Added locator by.{name} -> {finder.name}")
        self._locators[name] = functools.partial(self._custom, name, finder.name)

    def resolve(self, name: str) -> Callable[..., LocatorDescriptor]:
        """Return the factory registered as ``name``."""
        try:
            return self._locators[name]
        except KeyError as e:
            raise UnknownLocatorError(f"No locator named '{name}'") from e

    def locator_names(self) -> List[str]:
        return list(self._locators)

    def __getattr__(self, name: str) -> Callable[..., LocatorDescriptor]:
        locators = self.__dict__.get("_locators", {})
        if name in locators:
            return locators[name]
        raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")

    def _custom(self, locator_name: str, finder_name: str, *args: Any) -> LocatorDescriptor:
        return LocatorDescriptor(ScriptCommand(finder_name, args), render_message(locator_name, args), self.executor)

    def _builtin(self, locator_name: str, finder: FinderFunction, args: tuple, shown: tuple) -> LocatorDescriptor:
        return LocatorDescriptor(ScriptCommand(finder.name, args), render_message(locator_name, shown), self.executor)

    def binding(self, binding_descriptor: str) -> LocatorDescriptor:
        """
        Find elements by binding, matching substrings.

        <span>{{person.name}}</span> and <span ng-bind="person.email"></span>
        are found by binding('person.name') and binding('person.email').
        """
        return self._builtin("binding", clientscripts.FIND_BINDINGS, (binding_descriptor, False), (binding_descriptor,))

    def exact_binding(self, binding_descriptor: str) -> LocatorDescriptor:
        """Same as binding() but without partial matches."""
        return self._builtin("exact_binding", clientscripts.FIND_BINDINGS, (binding_descriptor, True), (binding_descriptor,))

    def model(self, model: str) -> LocatorDescriptor:
        """Find elements by ng-model expression, e.g. <input ng-model="person.name">."""
        return self._builtin("model", clientscripts.FIND_BY_MODEL, (model,), (model,))

    def button_text(self, search_text: str) -> LocatorDescriptor:
        """Find buttons whose text (or value for inputs) equals ``search_text``."""
        return self._builtin("button_text", clientscripts.FIND_BY_BUTTON_TEXT, (search_text,), (search_text,))

    def partial_button_text(self, search_text: str) -> LocatorDescriptor:
        """Find buttons whose text (or value for inputs) contains ``search_text``."""
        return self._builtin(
            "partial_button_text", clientscripts.FIND_BY_PARTIAL_BUTTON_TEXT, (search_text,), (search_text,)
        )

    def css_containing_text(self, css_selector: str, search_text: str) -> LocatorDescriptor:
        """Find elements matching ``css_selector`` whose text contains ``search_text``."""
        args = (css_selector, search_text)
        return self._builtin("css_containing_text", clientscripts.FIND_BY_CSS_CONTAINING_TEXT, args, args)

    def repeater(self, repeat_descriptor: str) -> RepeaterLocator:
        """
        Find elements inside an ng-repeat.

        by.repeater('cat in pets') returns every row; .row(1) the second row;
        .column('{{cat.name}}') the name bindings of all rows; row(0).column(b)
        and column(b).row(0) both return the binding inside the first row.
        For ng-repeat-start/ng-repeat-end, a row is all elements of the segment.
        """
        query = RepeaterQuery(repeat_descriptor)
        return RepeaterLocator(query.to_command(), render_message("repeater", (repeat_descriptor,)), self.executor, query)
