#!/usr/bin/env python3
"""Hierarchy builder for GCMD concept trees.

Turns the flat concept list produced by the extractor into a forest of
ConceptNode trees by resolving ``skos:broader`` links. The resulting forest is
what the keyword picker UI loads, so bad vocabulary data must never make the
build fail:

- a concept whose broader concept is not part of the export becomes a root
- concepts taking part in a broader cycle are left out of the forest

Nodes are materialized top-down from the roots only, so a cycle can never be
entered.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Iterator, Optional, Union

from .extractor import ConceptRecord


@dataclass
class ConceptNode:
    """Node in the concept hierarchy."""
    id: str                                 # Canonical concept URI
    text: str                               # Preferred label
    language: str                           # Label language tag
    scheme: str                             # Vocabulary title
    scheme_uri: str                         # Vocabulary URI
    description: str = ""
    children: list['ConceptNode'] = field(default_factory=list)


@dataclass
class ConceptForest:
    """Result of one hierarchy build."""
    last_updated: str
    roots: list[ConceptNode] = field(default_factory=list)
    orphaned_ids: list[str] = field(default_factory=list)   # Parent not in export, promoted to root
    omitted_ids: list[str] = field(default_factory=list)    # Unreachable from any root (cycles)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _index_records(
    records: Iterable[ConceptRecord],
    scheme: str,
    scheme_uri: str
) -> tuple[dict[str, ConceptNode], list[ConceptRecord]]:
    """Map concept ids to childless nodes.

    Records without an id are dropped. When an id occurs twice the first
    record wins and the duplicate is not returned.

    Returns:
        Tuple of (id -> node, records that were indexed)
    """
    nodes: dict[str, ConceptNode] = {}
    indexed: list[ConceptRecord] = []

    for record in records:
        if not record.id or record.id in nodes:
            continue
        nodes[record.id] = ConceptNode(
            id=record.id,
            text=record.text,
            language=record.language,
            scheme=scheme,
            scheme_uri=scheme_uri,
            description=record.description or "",
        )
        indexed.append(record)

    return nodes, indexed


def _group_children(
    records: list[ConceptRecord],
    nodes: dict[str, ConceptNode]
) -> tuple[dict[str, list[str]], list[str]]:
    """Group child ids under their broader concept, keeping document order.

    Returns:
        Tuple of (parent id -> child ids, ids whose parent is not indexed)
    """
    children_of: dict[str, list[str]] = {}
    orphaned: list[str] = []

    for record in records:
        if record.broader_id is None:
            continue
        if record.broader_id not in nodes:
            orphaned.append(record.id)
            continue
        children_of.setdefault(record.broader_id, []).append(record.id)

    return children_of, orphaned


def _find_roots(nodes: dict[str, ConceptNode], children_of: dict[str, list[str]]) -> list[str]:
    """Ids that no indexed concept claims as a child."""
    child_ids = {child_id for child_list in children_of.values() for child_id in child_list}
    return [concept_id for concept_id in nodes if concept_id not in child_ids]


def _materialize(
    root_id: str,
    nodes: dict[str, ConceptNode],
    children_of: dict[str, list[str]],
    visited: set[str]
) -> ConceptNode:
    """Attach children below ``root_id`` top-down.

    Uses an explicit stack rather than recursion; GCMD trees are shallow but
    nothing guarantees that for every export.
    """
    visited.add(root_id)
    stack = [root_id]

    while stack:
        parent_id = stack.pop()
        parent = nodes[parent_id]
        for child_id in children_of.get(parent_id, ()):
            if child_id in visited:
                continue
            visited.add(child_id)
            parent.children.append(nodes[child_id])
            stack.append(child_id)

    return nodes[root_id]


def build_hierarchy(
    records: Iterable[ConceptRecord],
    scheme: str,
    scheme_uri: str,
    clock: Optional[Callable[[], datetime]] = None
) -> ConceptForest:
    """Build the concept forest from extracted concept records.

    Args:
        records: Concepts in document order
        scheme: Vocabulary title stamped on every node
        scheme_uri: Vocabulary URI stamped on every node
        clock: Returns the build time; defaults to the current UTC time

    Returns:
        ConceptForest whose roots and children keep document order
    """
    nodes, indexed = _index_records(records, scheme, scheme_uri)
    children_of, orphaned = _group_children(indexed, nodes)

    visited: set[str] = set()
    roots = [
        _materialize(root_id, nodes, children_of, visited)
        for root_id in _find_roots(nodes, children_of)
    ]
    omitted = [concept_id for concept_id in nodes if concept_id not in visited]

    now = (clock or _utc_now)()
    return ConceptForest(
        last_updated=now.isoformat(),
        roots=roots,
        orphaned_ids=orphaned,
        omitted_ids=omitted,
    )


def iter_forest(forest: ConceptForest) -> Iterator[ConceptNode]:
    """Yield every node of the forest depth-first, in display order."""
    stack = list(reversed(forest.roots))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def _node_fields(node: ConceptNode) -> dict[str, Any]:
    return {
        "id": node.id,
        "text": node.text,
        "language": node.language,
        "scheme": node.scheme,
        "schemeURI": node.scheme_uri,
        "description": node.description,
        "children": [],
    }


def node_to_dict(node: ConceptNode) -> dict[str, Any]:
    """Serialize a node (and its subtree) to the keyword picker payload shape."""
    result = _node_fields(node)
    stack = [(node, result)]
    while stack:
        current, current_dict = stack.pop()
        for child in current.children:
            child_dict = _node_fields(child)
            current_dict["children"].append(child_dict)
            stack.append((child, child_dict))
    return result


def forest_to_dict(forest: ConceptForest) -> dict[str, Any]:
    """Serialize the forest to ``{"lastUpdated": ..., "data": [...]}``."""
    return {
        "lastUpdated": forest.last_updated,
        "data": [node_to_dict(root) for root in forest.roots],
    }


def count_concepts(nodes: list[Union[ConceptNode, dict[str, Any]]]) -> int:
    """Count all concepts in a list of trees.

    Accepts ConceptNode objects or serialized payload dicts; a dict without
    ``children`` counts as a leaf.
    """
    count = 0
    stack = list(nodes)
    while stack:
        node = stack.pop()
        count += 1
        if isinstance(node, ConceptNode):
            stack.extend(node.children)
        else:
            children = node.get("children")
            if isinstance(children, list):
                stack.extend(children)
    return count
