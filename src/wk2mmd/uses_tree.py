# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module builds the dependency tree of the ``uses`` references of a GitHub Actions workflow.

The tree is built by walking the jobs of a workflow. Jobs that call a reusable workflow and
steps that call an action are resolved through a :class:`WorkflowResolver` and expanded
recursively, one unit of the depth budget per resolution hop.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from wk2mmd.github_actions.fetcher import WorkflowResolver
from wk2mmd.parsers.workflow_model import WorkflowDocument

logger: logging.Logger = logging.getLogger(__name__)

PATH_SEPARATOR = "/"


@dataclass
class UsesNode:
    """A node of the uses dependency tree."""

    #: The display name: a job name or a ``uses`` string. It may repeat across the tree.
    name: str

    #: The identifier of the node, unique across the whole tree.
    unique_id: str

    #: The children of the node.
    children: list["UsesNode"] = field(default_factory=list)

    def add_child(self, node: "UsesNode") -> None:
        """Add a child to the current node."""
        self.children.append(node)

    def walk(self) -> Iterable["UsesNode"]:
        """Traverse the subtree under this node, this node included, in pre-order.

        Yields
        ------
        UsesNode
            The traversed nodes.
        """
        yield self
        for child in self.children:
            yield from child.walk()


def _qualify(parent_id: str, name: str) -> str:
    return f"{parent_id}{PATH_SEPARATOR}{name}" if parent_id else name


def _document_key(document: WorkflowDocument) -> str:
    """Return the identity of a document used to detect delegation cycles."""
    return document.source or f"<in-memory document {id(document)}>"


class _UsesTreeBuilder:
    """Hold the state shared by all recursive calls of a single traversal."""

    def __init__(self, fetcher: WorkflowResolver | None, visited: set[str]) -> None:
        self.fetcher = fetcher
        # Ancestor-qualified paths of the nodes expanded in this traversal.
        self.visited = visited
        # Unique identifiers handed out so far.
        self.assigned: set[str] = set()

    def build(self, name: str, document: WorkflowDocument | None, depth: int) -> UsesNode | None:
        if depth <= 0 or document is None:
            return None
        root = UsesNode(name=name, unique_id=name)
        self.assigned.add(root.unique_id)
        if not self._populate(root, document, depth, ()):
            return None
        return root

    def _new_node(self, parent: UsesNode, name: str) -> UsesNode:
        """Create a child of ``parent``, suffixing its local name with ``#<n>`` if its identifier is taken."""
        unique_id = _qualify(parent.unique_id, name)
        occurrence = 1
        while unique_id in self.assigned:
            occurrence += 1
            unique_id = _qualify(parent.unique_id, f"{name}#{occurrence}")
        self.assigned.add(unique_id)
        node = UsesNode(name=name, unique_id=unique_id)
        parent.add_child(node)
        return node

    def _populate(self, node: UsesNode, document: WorkflowDocument, depth: int, chain: tuple[str, ...]) -> bool:
        """Add the jobs of ``document`` as children of ``node``.

        Returns False, leaving ``node`` untouched, if the path of ``node`` was already visited.
        """
        if node.unique_id in self.visited:
            logger.debug("Already visited %s.", node.unique_id)
            return False
        self.visited.add(node.unique_id)

        chain = chain + (_document_key(document),)
        for job_name, job in document.jobs.items():
            job_node = self._new_node(node, job_name)
            if job.uses:
                self._expand(job_node, job.uses, depth, chain)
                continue

            for step in job.steps:
                if step.uses:
                    step_node = self._new_node(job_node, step.uses)
                    self._expand(step_node, step.uses, depth, chain)
        return True

    def _expand(self, node: UsesNode, uses: str, depth: int, chain: tuple[str, ...]) -> None:
        """Resolve ``uses`` and add the jobs of the resolved document as children of ``node``."""
        if self.fetcher is None or depth <= 1:
            return

        delegate = self.fetcher.resolve(uses)
        if delegate is None:
            return
        if _document_key(delegate) in chain:
            logger.debug("Cycle detected: %s is already expanded above %s.", uses, node.unique_id)
            return

        # The root of the resolved document is elided: its jobs hang directly under ``node``.
        self._populate(node, delegate, depth - 1, chain)


def build_uses_tree(
    root_name: str,
    document: WorkflowDocument | None,
    fetcher: WorkflowResolver | None,
    depth: int,
    visited: set[str] | None = None,
) -> UsesNode | None:
    """Build the tree of ``uses`` dependencies of a workflow.

    Every job of the document becomes a child of the root. A job calling a reusable workflow
    gets the jobs of that workflow as children; any other job gets one child per step that
    calls an action, which in turn gets the jobs of the action as children when the action
    can be resolved. Resolved documents are expanded recursively.

    Parameters
    ----------
    root_name : str
        The name and unique identifier of the root node.
    document : WorkflowDocument | None
        The root workflow.
    fetcher : WorkflowResolver | None
        The resolver for ``uses`` references. If None, no reference is resolved.
    depth : int
        The depth budget: the number of resolution hops allowed plus one. With a depth of
        1 only the first level of the root workflow is listed and nothing is fetched.
    visited : set[str] | None
        The set of ancestor-qualified node paths shared by the whole traversal. A new
        set is created if None.

    Returns
    -------
    UsesNode | None
        The root node, or None if the depth is 0 or the document is None.
    """
    builder = _UsesTreeBuilder(fetcher, set() if visited is None else visited)
    return builder.build(root_name, document, depth)


def collect_all_uses(document: WorkflowDocument | None, fetcher: WorkflowResolver | None, depth: int) -> list[str]:
    """Collect the ``uses`` strings of a workflow and of the documents it references.

    Job-level and step-level references are returned in visitation order. Referenced
    documents are fetched while more than one unit of the depth budget remains, and each
    distinct reference is expanded at most once.

    Parameters
    ----------
    document : WorkflowDocument | None
        The root workflow.
    fetcher : WorkflowResolver | None
        The resolver for ``uses`` references. If None, only the root workflow is visited.
    depth : int
        The depth budget.

    Returns
    -------
    list[str]
        The ``uses`` strings.
    """
    result: list[str] = []
    expanded: set[str] = set()

    def _collect(current: WorkflowDocument | None, remaining: int) -> None:
        if remaining <= 0 or current is None:
            return
        logger.debug("Getting all uses of %s.", current.source or current.name)
        for job in current.jobs.values():
            references = [job.uses] if job.uses else [step.uses for step in job.steps if step.uses]
            for uses in references:
                result.append(uses)
                if fetcher is None or remaining <= 1 or uses in expanded:
                    continue
                expanded.add(uses)
                _collect(fetcher.resolve(uses), remaining - 1)

    _collect(document, depth)
    return result
