# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module runs the analysis of a root workflow, from its download to the rendered diagram."""

import logging
import os
from dataclasses import dataclass, field

from wk2mmd.config.defaults import defaults
from wk2mmd.diagram import get_renderer
from wk2mmd.errors import MalformedDocumentError, SourceUnavailableError, WorkflowAnalysisError
from wk2mmd.github_actions.fetcher import ReusableReferenceFetcher
from wk2mmd.github_actions.repo_context import FILE_SCHEME, extract_repo_context
from wk2mmd.parsers.workflowparser import parse_workflow
from wk2mmd.source_provider import BaseSourceProvider
from wk2mmd.uses_tree import UsesNode, build_uses_tree, collect_all_uses

logger: logging.Logger = logging.getLogger(__name__)


@dataclass
class WorkflowAnalysis:
    """The outcome of the analysis of a root workflow."""

    #: The uses dependency tree, None if the depth budget is 0.
    tree: UsesNode | None

    #: The ``uses`` strings found in the workflow and the documents it references.
    uses: list[str] = field(default_factory=list)


def normalize_locator(locator: str) -> str:
    """Return the canonical form of a root workflow locator.

    The canonical form matches the locations the fetcher builds for local references,
    so that a workflow referencing itself is recognized. GitHub file URLs become raw
    content URLs without the ``refs/heads/`` or ``refs/tags/`` prefix of the ref.

    Examples
    --------
    >>> normalize_locator("https://github.com/owner/repo/blob/main/ci.yml")
    'https://raw.githubusercontent.com/owner/repo/main/ci.yml'
    >>> normalize_locator("https://raw.githubusercontent.com/owner/repo/refs/tags/v1/ci.yml")
    'https://raw.githubusercontent.com/owner/repo/v1/ci.yml'
    """
    if locator.startswith(("http://", "https://")):
        context = extract_repo_context(locator)
        if not context.is_github:
            return locator
        raw_content_url = defaults.get(
            "github", "raw_content_url", fallback="https://raw.githubusercontent.com"
        ).rstrip("/")
        return f"{raw_content_url}/{context.owner}/{context.repo}/{context.ref}/{context.path}"
    return os.path.abspath(locator.removeprefix(FILE_SCHEME))


class WorkflowRunner:
    """Download, parse and resolve a root workflow."""

    def __init__(self, source_provider: BaseSourceProvider) -> None:
        """Initialize instance.

        Parameters
        ----------
        source_provider : BaseSourceProvider
            The source the root workflow and the referenced documents are downloaded from.
        """
        self.source_provider = source_provider

    def analyze(self, locator: str, depth: int) -> WorkflowAnalysis:
        """Build the uses dependency tree of a root workflow.

        Parameters
        ----------
        locator : str
            The URL or path of the root workflow.
        depth : int
            The depth budget of the resolution.

        Returns
        -------
        WorkflowAnalysis
            The tree and the flattened ``uses`` strings.

        Raises
        ------
        WorkflowAnalysisError
            If the root workflow cannot be downloaded or parsed.
        """
        try:
            content = self.source_provider.download(locator)
        except SourceUnavailableError as error:
            raise WorkflowAnalysisError("download", f"failed to download workflow: {error}") from error
        logger.debug("Workflow content: %s", content[:300])

        source = normalize_locator(locator)
        try:
            document = parse_workflow(content, source=source)
        except MalformedDocumentError as error:
            raise WorkflowAnalysisError("parse", f"failed to parse workflow YAML: {error}") from error

        fetcher = ReusableReferenceFetcher(self.source_provider, extract_repo_context(locator))
        all_uses = collect_all_uses(document, fetcher, depth)
        logger.info("Found %s uses reference(s) recursively.", len(all_uses))

        root_name = defaults.get("uses_tree", "root_name", fallback="workflow")
        tree = build_uses_tree(root_name, document, fetcher, depth)
        return WorkflowAnalysis(tree=tree, uses=all_uses)

    def run_workflow_analysis(self, locator: str, depth: int, diagram_type: str) -> str:
        """Analyze a root workflow and render its uses dependency tree.

        Parameters
        ----------
        locator : str
            The URL or path of the root workflow.
        depth : int
            The depth budget of the resolution.
        diagram_type : str
            The kind of diagram: ``flowchart`` or ``sequence``.

        Returns
        -------
        str
            The Mermaid diagram.

        Raises
        ------
        UnsupportedDiagramTypeError
            If the diagram type is unknown. Nothing is downloaded in that case.
        WorkflowAnalysisError
            If the root workflow cannot be downloaded or parsed.
        RenderError
            If the diagram cannot be rendered.
        """
        renderer = get_renderer(diagram_type)
        analysis = self.analyze(locator, depth)
        return renderer.render(analysis.tree)
