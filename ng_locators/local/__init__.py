"""In-process harness running finders against parsed HTML instead of a browser."""

from .angular import LocalAngular, LocalTestability, LocalWindow
from .dom import dedup_dom_nodes, ensure_elements
from .driver import LocalDriver
from .finders import FUNCTIONS

__all__ = [
    "LocalAngular",
    "LocalTestability",
    "LocalWindow",
    "LocalDriver",
    "FUNCTIONS",
    "dedup_dom_nodes",
    "ensure_elements",
]
