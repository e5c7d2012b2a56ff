"""
Python counterparts of the browser finders, keyed by the same names.

Each takes the LocalWindow first, then the arguments the JavaScript version
receives. Asynchronous ones take the callback last.
"""

from typing import Any, Callable, Dict, List, Optional, Tuple

from bs4.element import PageElement, Tag

from .angular import LocalWindow
from .dom import dedup_dom_nodes, ensure_elements, is_comment, is_element

REPEAT_PREFIXES = ("ng-", "ng_", "data-ng-", "x-ng-", "ng:")
BUTTON_SELECTOR = 'button, input[type="button"], input[type="submit"]'


def _scope(window: LocalWindow, using: Optional[PageElement]) -> PageElement:
    return window.document if using is None else using


def _with_attr(scope: Tag, attr: str) -> List[Tag]:
    return scope.find_all(attrs={attr: True})


def _segment(start: PageElement, repeater: str) -> List[PageElement]:
    """Element siblings from an ng-repeat-start up to its end-marker comment."""
    row = []
    node = start
    while node is not None and not (is_comment(node) and repeater in node):
        if is_element(node):
            row.append(node)
        node = node.next_sibling
    return row


def _repeater_rows(repeater: str, scope: Tag) -> Tuple[List[Tag], List[List[PageElement]]]:
    rows = []
    for prefix in REPEAT_PREFIXES:
        attr = prefix + "repeat"
        rows.extend(elem for elem in _with_attr(scope, attr) if repeater in elem[attr])
    multi_rows = []
    for prefix in REPEAT_PREFIXES:
        attr = prefix + "repeat-start"
        multi_rows.extend(_segment(elem, repeater) for elem in _with_attr(scope, attr) if repeater in elem[attr])
    return rows, multi_rows


def _repeater_row(found: Tuple[List[Tag], List[List[PageElement]]], index: int) -> List[PageElement]:
    rows, multi_rows = found
    row: List[PageElement] = []
    if 0 <= index < len(rows):
        row.append(rows[index])
    if 0 <= index < len(multi_rows):
        row.extend(multi_rows[index])
    return row


def _bindings_in(window: LocalWindow, elem: PageElement, binding: str) -> List[PageElement]:
    return list(window.get_testability(elem).find_bindings(binding, False))


def _button_text(element: Tag) -> str:
    if element.name == "button":
        return element.get_text()
    return element.get("value", "")


def wait_for_angular(window: LocalWindow, selector: str, callback: Callable) -> None:
    el = window.query_selector(selector)
    try:
        window.get_testability(el).notify_when_no_outstanding_requests(callback)
    except Exception as e:
        window.console.append(f"waitForAngular: **** EXCEPTION: (continuing) ****\n{e}")
        callback(e)


def dedup_nodes(window: LocalWindow, nodes: List[PageElement]) -> List[PageElement]:
    return dedup_dom_nodes(list(nodes))


def ensure_nodes(window: LocalWindow, nodes: List[PageElement]) -> List[PageElement]:
    return ensure_elements(list(nodes))


def find_bindings(window: LocalWindow, binding: str, exact_match: bool, using: Optional[PageElement] = None) -> List[PageElement]:
    testability = window.get_testability(_scope(window, using))
    return ensure_elements(list(testability.find_bindings(binding, exact_match)))


def find_repeater_rows(window: LocalWindow, repeater: str, index: int, using: Optional[PageElement] = None) -> List[PageElement]:
    return _repeater_row(_repeater_rows(repeater, _scope(window, using)), index)


def find_all_repeater_rows(window: LocalWindow, repeater: str, using: Optional[PageElement] = None) -> List[PageElement]:
    scope = _scope(window, using)
    rows: List[PageElement] = []
    # segments first, then single-element repeats
    for suffix in ("repeat-start", "repeat"):
        for prefix in REPEAT_PREFIXES:
            attr = prefix + suffix
            for elem in _with_attr(scope, attr):
                if repeater not in elem[attr]:
                    continue
                if suffix == "repeat":
                    rows.append(elem)
                else:
                    rows.extend(_segment(elem, repeater))
    return rows


def find_repeater_element(
    window: LocalWindow, repeater: str, index: int, binding: str, using: Optional[PageElement] = None
) -> List[PageElement]:
    row = _repeater_row(_repeater_rows(repeater, _scope(window, using)), index)
    matches: List[PageElement] = []
    for elem in row:
        matches.extend(_bindings_in(window, elem, binding))
    return dedup_dom_nodes(ensure_elements(matches))


def find_repeater_column(window: LocalWindow, repeater: str, binding: str, using: Optional[PageElement] = None) -> List[PageElement]:
    rows, multi_rows = _repeater_rows(repeater, _scope(window, using))
    matches: List[PageElement] = []
    for elem in rows:
        matches.extend(_bindings_in(window, elem, binding))
    for segment in multi_rows:
        for elem in segment:
            matches.extend(_bindings_in(window, elem, binding))
    return dedup_dom_nodes(ensure_elements(matches))


def find_by_model(window: LocalWindow, model: str, using: Optional[PageElement] = None) -> List[PageElement]:
    return window.get_testability(_scope(window, using)).find_models(model)


def find_by_button_text(window: LocalWindow, search_text: str, using: Optional[PageElement] = None) -> List[Tag]:
    return [el for el in _scope(window, using).select(BUTTON_SELECTOR) if _button_text(el) == search_text]


def find_by_partial_button_text(window: LocalWindow, search_text: str, using: Optional[PageElement] = None) -> List[Tag]:
    return [el for el in _scope(window, using).select(BUTTON_SELECTOR) if search_text in _button_text(el)]


def find_by_css_containing_text(
    window: LocalWindow, css_selector: str, search_text: str, using: Optional[PageElement] = None
) -> List[Tag]:
    return [el for el in _scope(window, using).select(css_selector) if search_text in el.get_text()]


def test_for_angular(window: LocalWindow, attempts: int, async_callback: Callable) -> None:
    """Poll once per virtual second for an Angular app exposing resumeBootstrap."""

    def callback(args):
        window.set_timeout(lambda: async_callback(args), 0)

    def check(n):
        try:
            angular = window.angular
            if angular is not None and angular.resume_bootstrap:
                callback([True, None])
            elif n < 1:
                if angular is not None:
                    callback([False, "angular never provided resumeBootstrap"])
                else:
                    callback([False, "retries looking for angular exceeded"])
            else:
                window.set_timeout(lambda: check(n - 1), 1000)
        except Exception as e:
            callback([False, e])

    check(attempts)


def evaluate(window: LocalWindow, element: PageElement, expression: str) -> Any:
    return window.get_testability(element).eval(expression)


def allow_animations(window: LocalWindow, element: PageElement, allow: Optional[bool] = None) -> bool:
    return window.get_testability(element).allow_animations(allow)


def get_location_abs_url(window: LocalWindow, selector: str) -> str:
    return window.get_testability(window.query_selector(selector)).get_location()


def set_location(window: LocalWindow, selector: str, url: str) -> None:
    testability = window.get_testability(window.query_selector(selector))
    if url != testability.get_location():
        testability.set_location(url)


FUNCTIONS: Dict[str, Callable[..., Any]] = {
    "waitForAngular": wait_for_angular,
    "dedupDomNodes": dedup_nodes,
    "ensureElements": ensure_nodes,
    "findBindings": find_bindings,
    "findRepeaterRows": find_repeater_rows,
    "findAllRepeaterRows": find_all_repeater_rows,
    "findRepeaterElement": find_repeater_element,
    "findRepeaterColumn": find_repeater_column,
    "findByModel": find_by_model,
    "findByButtonText": find_by_button_text,
    "findByPartialButtonText": find_by_partial_button_text,
    "findByCssContainingText": find_by_css_containing_text,
    "testForAngular": test_for_angular,
    "evaluate": evaluate,
    "allowAnimations": allow_animations,
    "getLocationAbsUrl": get_location_abs_url,
    "setLocation": set_location,
}
