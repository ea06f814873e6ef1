# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module resolves ``uses`` references to the workflow or action documents they point to."""

import logging
import os
from typing import Protocol

from wk2mmd.config.defaults import defaults
from wk2mmd.errors import MalformedDocumentError, SourceUnavailableError
from wk2mmd.github_actions.action_reference import ActionReference, ActionReferenceType, parse_action_reference
from wk2mmd.github_actions.repo_context import RepositoryContext
from wk2mmd.parsers.workflow_model import WorkflowDocument
from wk2mmd.parsers.workflowparser import parse_workflow
from wk2mmd.source_provider import BaseSourceProvider

logger: logging.Logger = logging.getLogger(__name__)

WORKFLOW_EXTENSIONS = (".yml", ".yaml")


class WorkflowResolver(Protocol):
    """The capability to turn a ``uses`` string into the document it references."""

    def resolve(self, uses: str) -> WorkflowDocument | None:
        """Return the referenced document or None if it cannot be resolved."""


class ReusableReferenceFetcher:
    """Fetch the reusable workflows and composite actions referenced from a repository.

    Each ``uses`` string is resolved at most once per fetcher; failures are remembered
    as well, so a reference that cannot be fetched is unresolved for the whole analysis.
    """

    def __init__(self, source_provider: BaseSourceProvider, context: RepositoryContext) -> None:
        """Initialize instance.

        Parameters
        ----------
        source_provider : BaseSourceProvider
            The source the referenced files are downloaded from.
        context : RepositoryContext
            The repository the root workflow belongs to.
        """
        self.source_provider = source_provider
        self.context = context
        self.raw_content_url = defaults.get(
            "github", "raw_content_url", fallback="https://raw.githubusercontent.com"
        ).rstrip("/")
        self.action_files = defaults.get_list(
            "fetcher", "action_files", fallback=["action.yml", "action.yaml"], duplicated_ok=True
        )
        self._resolved: dict[str, WorkflowDocument | None] = {}

    def parse(self, uses: str) -> ActionReference:
        """Parse a ``uses`` string in the repository context of this fetcher."""
        return parse_action_reference(uses, self.context.owner, self.context.repo, self.context.ref)

    def get_candidate_locations(self, reference: ActionReference) -> list[str]:
        """Return the locations a reference may be downloaded from, in the order to try them.

        A reference to a ``.yml`` or ``.yaml`` file resolves to that file. Any other reference
        is an action directory and resolves to its metadata files (``action.yml`` then
        ``action.yaml`` by default).

        Parameters
        ----------
        reference : ActionReference
            The parsed reference.

        Returns
        -------
        list[str]
            The candidate locations; empty for references that are never fetched.
        """
        match reference.kind:
            case ActionReferenceType.REMOTE:
                base = self._raw_url(reference)
            case ActionReferenceType.LOCAL:
                if self.context.is_github:
                    base = self._raw_url(reference)
                elif self.context.local_root:
                    base = os.path.join(self.context.local_root, reference.path)
                else:
                    base = reference.path
            case ActionReferenceType.MARKETPLACE | ActionReferenceType.UNRECOGNIZED:
                return []

        base = base.rstrip("/")
        if base.endswith(WORKFLOW_EXTENSIONS):
            return [base]
        return [f"{base}/{action_file}" for action_file in self.action_files]

    def _raw_url(self, reference: ActionReference) -> str:
        return f"{self.raw_content_url}/{reference.owner}/{reference.repo}/{reference.ref}/{reference.path}"

    def resolve(self, uses: str) -> WorkflowDocument | None:
        """Return the workflow or action document referenced by a ``uses`` string.

        The candidate locations are tried in order. The first one that downloads and parses
        into a document with at least one job is returned.

        Parameters
        ----------
        uses : str
            The ``uses`` string.

        Returns
        -------
        WorkflowDocument | None
            The referenced document or None if it cannot be resolved.
        """
        if uses in self._resolved:
            return self._resolved[uses]

        document = self._fetch(self.parse(uses))
        if document:
            logger.debug("Fetched %s with %s job(s).", uses, len(document.jobs))
        else:
            logger.debug("Unable to resolve %s.", uses)
        self._resolved[uses] = document
        return document

    def _fetch(self, reference: ActionReference) -> WorkflowDocument | None:
        if not reference.is_resolvable:
            logger.debug("Not fetching the %s reference %s.", reference.kind.value, reference.raw)
            return None

        for location in self.get_candidate_locations(reference):
            try:
                content = self.source_provider.download(location)
            except SourceUnavailableError as error:
                logger.debug("Failed to download %s: %s", location, error)
                continue

            try:
                document = parse_workflow(content, source=location)
            except MalformedDocumentError as error:
                logger.debug("Failed to parse %s: %s", location, error)
                continue

            if document.jobs:
                return document
            logger.debug("No jobs found in %s.", location)

        return None
