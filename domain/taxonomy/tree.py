"""
Hierarchical index of classified resources.

The tree is a pure function of the history collection: every call to
`build_url_tree` constructs a fresh tree from scratch.

Levels:
    url_type  ->  content_format (skipped for "html")  ->  content_type_hierarchy...

The last hierarchy label holds a leaf set of {id, url}, deduplicated by id.
Branch lookup ignores case and surrounding whitespace; the first label seen for a
branch is the one stored and displayed.
"""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from domain.errors import TreeConflictError
from domain.schemas import Classification, HistoryEntry, ResourceRef
from domain.taxonomy.normalizer import branch_key, is_flattened_format

logger = logging.getLogger(__name__)


@dataclass
class LeafNode:
    """Terminal node: ordered resource references, unique by id."""

    entries: list[ResourceRef] = field(default_factory=list)
    _ids: set[str] = field(default_factory=set, repr=False)

    def add(self, ref: ResourceRef) -> bool:
        """Insert `ref` unless its id is already present (first url wins)."""
        if ref.id in self._ids:
            return False
        self._ids.add(ref.id)
        self.entries.append(ref)
        return True

    def to_dict(self) -> list[dict[str, str]]:
        return [ref.model_dump() for ref in self.entries]


@dataclass
class InternalNode:
    """Branch node: label -> child, with a normalized-key index for lookups."""

    children: dict[str, "Node"] = field(default_factory=dict)
    _keys: dict[str, str] = field(default_factory=dict, repr=False)  # branch_key(label) -> stored label

    def get(self, label: str) -> "Node | None":
        stored = self._keys.get(branch_key(label))
        return None if stored is None else self.children[stored]

    def label_for(self, label: str) -> str | None:
        """Stored (first-seen) label matching `label`, if any."""
        return self._keys.get(branch_key(label))

    def insert(self, label: str, node: "Node") -> "Node":
        stored = label.strip()
        self._keys[branch_key(stored)] = stored
        self.children[stored] = node
        return node

    def to_dict(self) -> dict[str, Any]:
        return {label: child.to_dict() for label, child in self.children.items()}


Node: TypeAlias = InternalNode | LeafNode


def _kind(node: Node) -> str:
    return "leaf" if isinstance(node, LeafNode) else "internal"


def _get_or_create(parent: InternalNode, label: str, kind: type[Node], path: list[str]) -> Node:
    """Find the child matching `label` (case/whitespace-insensitive) or create it."""
    existing = parent.get(label)
    if existing is None:
        return parent.insert(label, kind())
    if not isinstance(existing, kind):
        conflict_path = path + [parent.label_for(label) or label.strip()]
        raise TreeConflictError(
            conflict_path,
            existing=_kind(existing),
            requested="leaf" if kind is LeafNode else "internal",
        )
    return existing


def _walk_leaves(path: tuple[str, ...], node: InternalNode) -> Iterator[tuple[tuple[str, ...], LeafNode]]:
    for label, child in node.children.items():
        if isinstance(child, LeafNode):
            yield path + (label,), child
        else:
            yield from _walk_leaves(path + (label,), child)


@dataclass
class HierarchicalIndex:
    """Root of the classification tree (top-level labels are url types)."""

    root: InternalNode = field(default_factory=InternalNode)

    def __len__(self) -> int:
        return len(self.root.children)

    def is_empty(self) -> bool:
        return not self.root.children

    def to_dict(self) -> dict[str, Any]:
        """Nested plain-JSON view: objects for branches, lists of {id, url} for leaf sets."""
        return self.root.to_dict()

    def iter_leaves(self) -> Iterator[tuple[tuple[str, ...], LeafNode]]:
        """Yield (path, leaf) pairs depth-first, in insertion order."""
        yield from _walk_leaves((), self.root)

    def count_resources(self) -> int:
        """Number of leaf-set entries across the tree (a resource may sit in several leaves)."""
        return sum(len(leaf.entries) for _, leaf in self.iter_leaves())


def _insert_entry(tree: HierarchicalIndex, entry: HistoryEntry, classification: Classification) -> None:
    path: list[str] = []

    # Level 1: URL type
    node = _get_or_create(tree.root, classification.url_type, InternalNode, path)
    path.append(tree.root.label_for(classification.url_type) or classification.url_type)

    # Level 2: content format, except HTML which would be a redundant universal layer
    if not is_flattened_format(classification.content_format):
        parent = node
        node = _get_or_create(parent, classification.content_format, InternalNode, path)
        path.append(parent.label_for(classification.content_format) or classification.content_format)

    # Levels 3+: content type hierarchy; the last label holds the leaf set
    *branches, leaf_label = classification.content_type_hierarchy
    for label in branches:
        parent = node
        node = _get_or_create(parent, label, InternalNode, path)
        path.append(parent.label_for(label) or label)

    leaf = _get_or_create(node, leaf_label, LeafNode, path)
    if not leaf.add(ResourceRef(id=entry.id, url=entry.url)):
        logger.debug("Duplicate id=%s under %s; keeping first url", entry.id, " > ".join(path + [leaf_label]))


def build_url_tree(history: Iterable[HistoryEntry]) -> HierarchicalIndex:
    """
    Aggregate history entries into a fresh HierarchicalIndex.

    Entries without a classification are skipped. Malformed classification fields
    degrade to sentinel labels, so aggregation always completes for any payload.

    Args:
        history: Ordered history entries (earlier entries win label casing and urls)

    Returns:
        HierarchicalIndex (empty when no entry carries a classification)

    Raises:
        TreeConflictError: If one entry needs a path as a leaf set and another needs
            the same path as a branch
    """
    tree = HierarchicalIndex()
    skipped = 0
    for entry in history:
        classification = entry.to_classification()
        if classification is None:
            skipped += 1
            continue
        _insert_entry(tree, entry, classification)

    logger.debug(
        "Built tree: %d top-level branches, %d leaf entries (%d entries without classification skipped)",
        len(tree),
        tree.count_resources(),
        skipped,
    )
    return tree
