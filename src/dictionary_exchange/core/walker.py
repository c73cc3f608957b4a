"""Pre-order traversal of dictionary item trees.

Siblings are visited in ascending key order using plain codepoint comparison,
so the output never depends on locale collation. The walk uses an explicit
stack of pending nodes, so arbitrarily deep dictionaries do not hit the
interpreter recursion limit.
"""

from collections.abc import Iterable, Iterator

import structlog

from ..models.dictionary import DictionaryItem, DictionaryOverview, DictionaryTree, LanguageRegistry
from ..utils.exceptions import CyclicTreeError

logger = structlog.get_logger(__name__)


def _sorted_by_key(items: Iterable[DictionaryItem]) -> list[DictionaryItem]:
    return sorted(items, key=lambda item: item.key)


def walk_tree(roots: Iterable[DictionaryItem]) -> Iterator[tuple[DictionaryItem, int]]:
    """
    Yield ``(item, depth)`` pairs in pre-order.

    A node is emitted before its children, and all of its descendants are
    emitted before its next sibling. Roots have depth 0.

    Args:
        roots: Root-level dictionary items

    Yields:
        (item, depth) tuples

    Raises:
        CyclicTreeError: If an item is reached a second time
    """
    # Reversed so that popping from the end visits the smallest key first
    stack: list[tuple[DictionaryItem, int]] = [
        (item, 0) for item in reversed(_sorted_by_key(roots))
    ]
    visited: set[int] = set()

    while stack:
        item, depth = stack.pop()
        if id(item) in visited:
            raise CyclicTreeError(item.key)
        visited.add(id(item))

        yield item, depth

        if item.children:
            stack.extend((child, depth + 1) for child in reversed(_sorted_by_key(item.children)))


def build_overview(tree: DictionaryTree, registry: LanguageRegistry) -> list[DictionaryOverview]:
    """
    Build the depth-annotated listing of all dictionary items.

    Args:
        tree: Dictionary tree
        registry: Known languages, used to label translations by culture name

    Returns:
        One DictionaryOverview per item, in walk order
    """
    overview: list[DictionaryOverview] = []
    for item, depth in walk_tree(tree.roots):
        translations = {}
        for language in registry:
            value = item.get_translation(language.id)
            if value is not None:
                translations[language.culture_name] = value
        overview.append(
            DictionaryOverview(id=item.id, key=item.key, level=depth, translations=translations)
        )

    logger.debug("Built dictionary overview", items=len(overview))
    return overview
