"""Node helpers over a BeautifulSoup tree, with browser DOM semantics."""

from typing import Dict, List

from bs4 import BeautifulSoup
from bs4.element import Comment, NavigableString, PageElement, PreformattedString, Tag


def is_element(node: PageElement) -> bool:
    return isinstance(node, Tag) and not isinstance(node, BeautifulSoup)


def is_text(node: PageElement) -> bool:
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def is_comment(node: PageElement) -> bool:
    return isinstance(node, Comment)


def root_of(node: PageElement) -> PageElement:
    while node.parent is not None:
        node = node.parent
    return node


def document_positions(root: PageElement) -> Dict[int, int]:
    """Map id(node) to its position in a depth-first walk of ``root``."""
    positions = {id(root): 0}
    if isinstance(root, Tag):
        for position, node in enumerate(root.descendants, start=1):
            positions[id(node)] = position
    return positions


def text_content(node: PageElement) -> str:
    if isinstance(node, Tag):
        return node.get_text()
    return str(node)


def dedup_dom_nodes(nodes: List[PageElement]) -> List[PageElement]:
    """
    Sort nodes into document order and drop repeated references.

    Sorts ``nodes`` in place. When no node appears twice the same list is
    returned; otherwise a new list. Nodes are compared by identity, never by
    BeautifulSoup's structural equality.
    """
    if not nodes:
        return nodes
    positions = document_positions(root_of(nodes[0]))
    nodes.sort(key=lambda node: positions.get(id(node), -1))

    results = []
    previous = None
    for node in nodes:
        if node is not previous:
            results.append(node)
        previous = node
    if len(results) == len(nodes):
        return nodes
    return results


def ensure_elements(nodes: List[PageElement]) -> List[PageElement]:
    """Replace text nodes by their parent element; dedup only if one was replaced."""
    had_text = False
    for i, node in enumerate(nodes):
        if is_text(node):
            had_text = True
            nodes[i] = node.parent
    return dedup_dom_nodes(nodes) if had_text else nodes
