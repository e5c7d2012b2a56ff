"""Custom exceptions for the Angular locator framework."""


class NgLocatorError(Exception):
    """Base exception for all locator failures."""

    pass


class ScriptRegistrationError(NgLocatorError):
    """A finder or locator was registered under a name that is already taken."""

    pass


class UnknownScriptError(NgLocatorError, KeyError):
    """No finder is registered under the requested name."""

    def __str__(self) -> str:
        # KeyError would quote the message
        return NgLocatorError.__str__(self)


class UnknownLocatorError(NgLocatorError, KeyError):
    """No locator factory is registered under the requested name."""

    def __str__(self) -> str:
        return NgLocatorError.__str__(self)


class LocatorUsageError(NgLocatorError):
    """A locator was composed in a way it does not support."""

    pass


class ScriptExecutionError(NgLocatorError):
    """A finder raised an error while running inside the browser."""

    def __init__(self, script_name: str, message: str):
        super().__init__(f"{script_name} failed in browser: {message}")
        self.script_name = script_name
        self.browser_message = message


class ElementNotFoundError(NgLocatorError):
    """Element was not found on the page."""

    pass


class AngularNotFoundError(NgLocatorError):
    """The page never exposed a usable Angular runtime."""

    pass


class AngularSyncError(NgLocatorError):
    """Waiting for Angular to settle failed."""

    pass
