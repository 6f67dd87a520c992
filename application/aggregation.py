"""History aggregation into the hierarchical index, plus tree summaries."""

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

from application.classify import ClassificationOutcome
from domain.schemas import HistoryEntry
from domain.taxonomy.tree import HierarchicalIndex, build_url_tree
from infrastructure.io.fs import write_json

logger = logging.getLogger(__name__)


def outcomes_to_history(outcomes: Iterable[ClassificationOutcome]) -> list[HistoryEntry]:
    return [o.to_history_entry() for o in outcomes]


def aggregate_history(entries: Sequence[HistoryEntry]) -> HierarchicalIndex:
    """
    Build the hierarchical index over the full history.

    Raises:
        TreeConflictError: propagated when two entries need the same path as
            both a leaf set and a branch
    """
    classified = sum(1 for e in entries if e.classification is not None)
    logger.info("Aggregating %d history entries (%d with a classification)", len(entries), classified)
    tree = build_url_tree(entries)
    logger.info("Tree: %d top-level branches, %d leaf entries", len(tree), tree.count_resources())
    return tree


def summarize_tree(tree: HierarchicalIndex) -> list[str]:
    """
    One line per leaf set: "Blog > PDF > Text > Article (2)".
    """
    return [f"{' > '.join(path)} ({len(leaf.entries)})" for path, leaf in tree.iter_leaves()]


def save_tree(tree: HierarchicalIndex, path: Path) -> Path:
    write_json(path, tree.to_dict())
    logger.info("Saved tree JSON: %s", path)
    return path
