"""Named registry of browser finders and the wrapper they are shipped in."""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Tuple

from .exceptions import ScriptRegistrationError, UnknownScriptError

logger = logging.getLogger(__name__)

# Anything thrown that is not an Error (dart2js throws plain values) reaches
# webdriver as "unknown error" with no stack, so it gets wrapped here.
SCRIPT_TEMPLATE = "try {{ return ({source}).apply(this, arguments); }}\ncatch(e) {{ throw (e instanceof Error) ? e : new Error(e); }}"


def wrap_script(source: str) -> str:
    """Wrap a function expression so the driver always sees an Error on failure."""
    return SCRIPT_TEMPLATE.format(source=source)


@dataclass(frozen=True)
class FinderFunction:
    """A self-contained JavaScript function transmitted to the browser."""

    name: str
    params: Tuple[str, ...] = ()
    body: str = ""

    @property
    def source(self) -> str:
        """Return the function expression, e.g. ``function(a, b) {...}``."""
        return f"function({', '.join(self.params)}) {{{self.body}}}"


@dataclass(frozen=True)
class ScriptCommand:
    """Finder name plus the arguments bound to it at locator construction."""

    name: str
    args: Tuple = field(default_factory=tuple)

    def with_args(self, *extra) -> "ScriptCommand":
        return ScriptCommand(self.name, self.args + tuple(extra))


class ScriptRegistry:
    """Holds every finder under a stable name."""

    def __init__(self):
        self._finders: Dict[str, FinderFunction] = {}

    def register(self, finder: FinderFunction) -> None:
        """
        Store a finder.

        Args:
            finder: Finder to register. Its body must not reference outer
                variables; that is only detected when the script runs.

        Raises:
            ScriptRegistrationError: If the name is already taken
        """
        if finder.name in self._finders:
            raise ScriptRegistrationError(f"Finder already registered: {finder.name}")
        logger.debug(f"Registered finder {finder.name}")
        self._finders[finder.name] = finder

    def get(self, name: str) -> FinderFunction:
        try:
            return self._finders[name]
        except KeyError as e:
            raise UnknownScriptError(f"No finder registered as '{name}'") from e

    def names(self) -> List[str]:
        return list(self._finders)

    def to_executable_string(self, name: str) -> str:
        """Return the finder wrapped for execute_script / execute_async_script."""
        return wrap_script(self.get(name).source)

    def install_script(self, namespace: str = "clientSideScripts") -> str:
        """
        Return a script publishing every finder on ``window.<namespace>``.

        Meant for poking at a live session from the browser console; locators
        never rely on it.
        """
        entries = ", ".join(f"{name}: {finder.source}" for name, finder in self._finders.items())
        return f"window.{namespace} = {{{entries}}};"

    def __contains__(self, name: object) -> bool:
        return name in self._finders

    def __iter__(self) -> Iterator[FinderFunction]:
        return iter(self._finders.values())

    def __len__(self) -> int:
        return len(self._finders)


def build_default_registry() -> ScriptRegistry:
    """Create a registry holding every built-in finder."""
    from .clientscripts import ALL_FINDERS

    registry = ScriptRegistry()
    for finder in ALL_FINDERS:
        registry.register(finder)
    return registry
