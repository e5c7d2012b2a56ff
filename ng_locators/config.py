"""Configuration classes for Angular-aware element lookup."""

from dataclasses import dataclass


class Timeouts:
    """Timeout constants for different wait scenarios."""

    SCRIPT = 11  # Selenium async script timeout (waitForAngular, testForAngular)
    SHORT_WAIT = 5  # Quick element waits


@dataclass
class NgConfig:
    """Settings shared by the page helper and the script registry."""

    # Element housing ng-app; waitForAngular and location scripts query it
    root_selector: str = "body"
    # testForAngular polls once per second this many times
    bootstrap_attempts: int = 10
    # Skip waitForAngular/testForAngular for non-Angular pages
    ignore_synchronization: bool = False
    script_timeout: int = Timeouts.SCRIPT
    install_namespace: str = "clientSideScripts"
