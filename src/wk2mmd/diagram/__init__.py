# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""The diagram package contains the renderers of uses dependency trees."""

from wk2mmd.diagram.renderer import BaseDiagramRenderer, MermaidFlowchartRenderer, MermaidSequenceRenderer
from wk2mmd.errors import UnsupportedDiagramTypeError

DIAGRAM_RENDERERS: dict[str, type[BaseDiagramRenderer]] = {
    "flowchart": MermaidFlowchartRenderer,
    "sequence": MermaidSequenceRenderer,
}


def get_renderer(diagram_type: str) -> BaseDiagramRenderer:
    """Return a renderer for a diagram type.

    Parameters
    ----------
    diagram_type : str
        One of the keys of ``DIAGRAM_RENDERERS``.

    Returns
    -------
    BaseDiagramRenderer
        The renderer.

    Raises
    ------
    UnsupportedDiagramTypeError
        If the diagram type is unknown.
    """
    renderer_class = DIAGRAM_RENDERERS.get(diagram_type)
    if renderer_class is None:
        raise UnsupportedDiagramTypeError(
            f"Unsupported diagram type {diagram_type}. Choose one of {', '.join(DIAGRAM_RENDERERS)}."
        )
    return renderer_class()
