# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module extracts the repository a root workflow belongs to from its locator."""

import logging
import os
import re
from dataclasses import dataclass

logger: logging.Logger = logging.getLogger(__name__)

# Supports:
# https://raw.githubusercontent.com/owner/repo/branch/path/to/file.yml
# https://raw.githubusercontent.com/owner/repo/refs/heads/branch/path/to/file.yml
# https://github.com/owner/repo/blob/branch/path/to/file.yml
_GITHUB_FILE_URL_PATTERN = re.compile(
    r"^https?://(?:raw\.githubusercontent\.com|github\.com)/(?P<owner>[^/]+)/(?P<repo>[^/]+)/"
    r"(?:blob/)?(?:refs/(?:heads|tags)/)?(?P<ref>[^/]+)/(?P<path>.*)$"
)

FILE_SCHEME = "file://"


@dataclass(frozen=True)
class RepositoryContext:
    """The repository that local ``uses`` references are resolved against."""

    #: The owner of the GitHub repository, empty for local files.
    owner: str = ""

    #: The name of the GitHub repository, empty for local files.
    repo: str = ""

    #: The git ref of the GitHub repository, empty for local files.
    ref: str = ""

    #: The root directory of a local checkout, empty for remote repositories.
    local_root: str = ""

    #: The path of the root workflow inside the GitHub repository, empty for local files.
    path: str = ""

    @property
    def is_github(self) -> bool:
        """Return True if the context points to a GitHub repository."""
        return bool(self.owner and self.repo)


def extract_repo_context(locator: str) -> RepositoryContext:
    """Return the repository context of a root workflow locator.

    For GitHub file URLs the owner, repository and ref are extracted. For local files
    the repository root is the directory holding the ``.github`` directory of the
    workflow, or the directory of the file if the workflow is not under ``.github``.
    Any other locator yields an empty context.

    Parameters
    ----------
    locator : str
        The URL or path of the root workflow.

    Returns
    -------
    RepositoryContext
        The repository context.

    Examples
    --------
    >>> extract_repo_context("https://raw.githubusercontent.com/owner/repo/branch/path/to/file.yml")
    RepositoryContext(owner='owner', repo='repo', ref='branch', local_root='', path='path/to/file.yml')
    >>> extract_repo_context("https://github.com/owner/repo/blob/main/.github/workflows/ci.yml").ref
    'main'
    >>> extract_repo_context("/work/repo/.github/workflows/ci.yml").local_root
    '/work/repo'
    """
    if (match := _GITHUB_FILE_URL_PATTERN.match(locator)) is not None:
        context = RepositoryContext(
            owner=match.group("owner"), repo=match.group("repo"), ref=match.group("ref"), path=match.group("path")
        )
        logger.debug("Extracted repo info owner=%s repo=%s ref=%s.", context.owner, context.repo, context.ref)
        return context

    if locator.startswith(("http://", "https://")):
        logger.debug("Unable to extract the repository of %s.", locator)
        return RepositoryContext()

    path = os.path.abspath(locator.removeprefix(FILE_SCHEME))
    parts = path.split(os.sep)
    if ".github" in parts:
        github_index = len(parts) - 1 - parts[::-1].index(".github")
        local_root = os.sep.join(parts[:github_index]) or os.sep
    else:
        local_root = os.path.dirname(path)
    logger.debug("Local uses references of %s are resolved from %s.", locator, local_root)
    return RepositoryContext(local_root=local_root)
