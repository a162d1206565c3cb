"""
Small query layer over a BeautifulSoup tree.

The extractors never walk the tree directly; every structural heuristic they
rely on is one of the named operations below.
"""
from __future__ import annotations

from typing import Callable, Iterable, Iterator, List, Optional

from bs4 import BeautifulSoup, Tag

BLOCK_CONTAINERS = ("table", "div", "section")


def parse_html(markup: str, parser: str = "html.parser") -> BeautifulSoup:
    """Parse *markup* (HTML or plain text) into a tree."""
    return BeautifulSoup(markup or "", parser)


def find_nearest_ancestor(
    node,
    predicate: Callable[[Tag], bool],
    include_self: bool = True,
) -> Optional[Tag]:
    """
    Return the closest element, starting at *node* (or its parent when
    *node* is a text node or ``include_self`` is False), that satisfies
    *predicate*. The document root itself never matches.
    """
    current = node if include_self and isinstance(node, Tag) else node.parent
    while current is not None and not isinstance(current, BeautifulSoup):
        if isinstance(current, Tag) and predicate(current):
            return current
        current = current.parent
    return None


def flat_text(tag: Tag) -> str:
    """Return the tag's text with inline markup removed and whitespace collapsed."""
    return " ".join(tag.get_text().split())


def find_innermost_element_containing(soup: BeautifulSoup, needle: str) -> Optional[Tag]:
    """
    Return the innermost element whose flattened text contains *needle*,
    following the first mention in document order. The label may span
    several text nodes (``<b>Billing</b> Address``); comments never count.
    Returns the root itself when the mention sits directly under it.
    """
    if needle not in flat_text(soup):
        return None
    current: Tag = soup
    while True:
        child = next(
            (c for c in current.find_all(True, recursive=False) if needle in flat_text(c)),
            None,
        )
        if child is None:
            return current
        current = child


def find_text_container(
    soup: BeautifulSoup,
    needle: str,
    containers: Iterable[str] = BLOCK_CONTAINERS,
) -> Optional[Tag]:
    """
    Return the nearest container element enclosing (or being) the innermost
    element that mentions *needle*. Only the first mention is considered.
    """
    anchor = find_innermost_element_containing(soup, needle)
    if anchor is None:
        return None
    names = tuple(containers)
    return find_nearest_ancestor(anchor, lambda tag: tag.name in names)


def iter_elements_with_class_containing(soup: BeautifulSoup, fragment: str) -> Iterator[Tag]:
    """Yield elements whose raw ``class`` attribute contains *fragment* as a substring."""
    for tag in soup.find_all(class_=True):
        classes = tag.get("class")
        joined = " ".join(classes) if isinstance(classes, list) else str(classes)
        if fragment in joined:
            yield tag


def find_links_with_href_containing(soup: BeautifulSoup, fragment: str) -> List[Tag]:
    """Return ``<a>`` elements whose href contains *fragment* (case-sensitive)."""
    return [a for a in soup.find_all("a", href=True) if fragment in str(a["href"])]
