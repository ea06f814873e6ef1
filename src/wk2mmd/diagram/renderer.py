# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains the renderers that turn a uses dependency tree into Mermaid diagram text."""

import abc
import logging
import os
from dataclasses import dataclass
from typing import Any

from jinja2 import (
    Environment,
    FileSystemLoader,
    Template,
    TemplateNotFound,
    TemplateRuntimeError,
    TemplateSyntaxError,
    select_autoescape,
)

from wk2mmd.config.defaults import defaults
from wk2mmd.diagram import jinja2_extensions
from wk2mmd.errors import RenderError
from wk2mmd.uses_tree import UsesNode

logger: logging.Logger = logging.getLogger(__name__)

TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "templates")


@dataclass(frozen=True)
class DiagramNode:
    """A node of a diagram."""

    #: The position of the node in the pre-order traversal of the tree, starting at 0.
    index: int

    #: The label of the node.
    name: str

    #: The unique identifier of the tree node.
    unique_id: str


@dataclass(frozen=True)
class DiagramEdge:
    """A parent to child edge of a diagram, given by node indices."""

    source: int
    target: int


def flatten_tree(root: UsesNode | None) -> tuple[list[DiagramNode], list[DiagramEdge]]:
    """Return the nodes of a tree in pre-order and the edges between them.

    Nodes are keyed by their unique identifier, so nodes sharing a display name
    are kept apart.

    Parameters
    ----------
    root : UsesNode | None
        The root of the tree.

    Returns
    -------
    tuple[list[DiagramNode], list[DiagramEdge]]
        The nodes and the edges. Both are empty if ``root`` is None.
    """
    if root is None:
        return [], []

    indices: dict[str, int] = {}
    nodes: list[DiagramNode] = []
    for node in root.walk():
        if node.unique_id in indices:
            continue
        indices[node.unique_id] = len(nodes)
        nodes.append(DiagramNode(index=len(nodes), name=node.name, unique_id=node.unique_id))

    edges: list[DiagramEdge] = []
    for node in root.walk():
        for child in node.children:
            edges.append(DiagramEdge(source=indices[node.unique_id], target=indices[child.unique_id]))

    return nodes, edges


class BaseDiagramRenderer(abc.ABC):
    """The base class of the Jinja2 diagram renderers."""

    def __init__(self, target_template: str, env: Environment | None = None) -> None:
        """Initialize instance.

        Parameters
        ----------
        target_template : str
            The template to render. It is looked up from the jinja2.Environment instance.
        env : Environment | None
            The pre-initiated ``jinja2.Environment`` instance. If this is not provided,
            an environment loading the packaged templates is created.
        """
        if env:
            self.env = env
        else:
            self.env = Environment(
                loader=FileSystemLoader(TEMPLATE_DIR),
                autoescape=select_autoescape(enabled_extensions=["html"]),
                trim_blocks=True,
                lstrip_blocks=True,
            )

        self._init_extensions()

        self.target_template = target_template
        self.template: Template | None = None
        try:
            self.template = self.env.get_template(target_template)
        except TemplateNotFound:
            logger.error("Cannot find the template %s to load.", target_template)

    def _init_extensions(self) -> None:
        """Dynamically add Jinja2 extension filters."""
        filters = {}
        for name, custom_filter in jinja2_extensions.filter_extensions.items():
            if hasattr(jinja2_extensions, custom_filter):
                filters[name] = getattr(jinja2_extensions, custom_filter)

        self.env.filters.update(filters)

    @abc.abstractmethod
    def get_context(self) -> dict[str, Any]:
        """Return the template variables specific to this kind of diagram."""

    def render(self, root: UsesNode | None) -> str:
        """Render the diagram of a uses dependency tree.

        Parameters
        ----------
        root : UsesNode | None
            The root of the tree. A None root renders a diagram without nodes.

        Returns
        -------
        str
            The diagram text.

        Raises
        ------
        RenderError
            If the template could not be loaded or fails to render.
        """
        if not self.template:
            raise RenderError(f"The template {self.target_template} is not available.")

        nodes, edges = flatten_tree(root)
        logger.debug("Rendering %s node(s) and %s edge(s) with %s.", len(nodes), len(edges), self.target_template)
        try:
            return self.template.render(nodes=nodes, edges=edges, **self.get_context())
        except TemplateSyntaxError as error:
            raise RenderError(f"Invalid template {error.filename or error.name}: {error.message}") from error
        except TemplateRuntimeError as error:
            raise RenderError(f"Failed to render {self.target_template}: {error}") from error


class MermaidFlowchartRenderer(BaseDiagramRenderer):
    """Render a tree as a top to bottom Mermaid flowchart."""

    def __init__(self, env: Environment | None = None) -> None:
        super().__init__("flowchart.mmd.j2", env)

    def get_context(self) -> dict[str, Any]:
        return {
            "title": defaults.get("diagram", "flowchart_title", fallback="Workflow Graph"),
            "theme": defaults.get("diagram", "theme", fallback="default"),
            "max_text_size": defaults.getint("diagram", "max_text_size", fallback=50000),
            "max_edges": defaults.getint("diagram", "max_edges", fallback=500),
            "font_size": defaults.getint("diagram", "font_size", fallback=16),
        }


class MermaidSequenceRenderer(BaseDiagramRenderer):
    """Render a tree as a Mermaid sequence diagram with one participant per node."""

    def __init__(self, env: Environment | None = None) -> None:
        super().__init__("sequence.mmd.j2", env)

    def get_context(self) -> dict[str, Any]:
        return {"message": defaults.get("diagram", "sequence_message", fallback="uses")}
