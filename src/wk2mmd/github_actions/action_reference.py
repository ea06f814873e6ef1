# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module classifies the ``uses`` references of GitHub Actions jobs and steps.

See https://docs.github.com/en/actions/using-workflows/workflow-syntax-for-github-actions#jobsjob_idstepsuses
for the supported syntax.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum

from wk2mmd.config.defaults import defaults

logger: logging.Logger = logging.getLogger(__name__)

LOCAL_PREFIXES = ("./", ".github/")

# owner/repo[/path][@ref]. The ref is everything after the first ``@``.
_REMOTE_PATTERN = re.compile(
    r"^(?P<owner>[A-Za-z0-9_.-]+)/(?P<repo>[A-Za-z0-9_.-]+)(?:/(?P<path>[^@\s]*))?(?:@(?P<ref>\S+))?$"
)


class ActionReferenceType(str, Enum):
    """The kinds of ``uses`` references."""

    LOCAL = "local"  # Actions and workflows in the same repository.
    REMOTE = "remote"  # Actions and workflows at a path inside another repository.
    MARKETPLACE = "marketplace"  # Published actions at the root of a repository.
    UNRECOGNIZED = "unrecognized"  # Docker images and anything else.


@dataclass(frozen=True)
class ActionReference:
    """The parsed form of a ``uses`` string."""

    #: The kind of reference.
    kind: ActionReferenceType

    #: The original ``uses`` string.
    raw: str

    #: The owner of the repository holding the referenced file.
    owner: str = ""

    #: The name of the repository holding the referenced file.
    repo: str = ""

    #: The path of the referenced file or action directory inside the repository.
    path: str = ""

    #: The git ref (branch, tag or commit) to read the file at.
    ref: str = ""

    @property
    def is_resolvable(self) -> bool:
        """Return True if the source of the referenced document can be fetched."""
        match self.kind:
            case ActionReferenceType.LOCAL | ActionReferenceType.REMOTE:
                return True
            case ActionReferenceType.MARKETPLACE | ActionReferenceType.UNRECOGNIZED:
                return False


def parse_action_reference(
    raw: str,
    context_owner: str = "",
    context_repo: str = "",
    context_ref: str = "",
) -> ActionReference:
    """Classify a ``uses`` string relative to the repository it appears in.

    This function is pure and never raises: any string that matches none of the
    known forms is returned as an ``UNRECOGNIZED`` reference.

    Parameters
    ----------
    raw : str
        The ``uses`` string.
    context_owner : str
        The owner of the repository holding the calling workflow.
    context_repo : str
        The name of the repository holding the calling workflow.
    context_ref : str
        The git ref the calling workflow was read at.

    Returns
    -------
    ActionReference
        The parsed reference.

    Examples
    --------
    >>> parse_action_reference("octo/repo/.github/workflows/ci.yml@v1").kind
    <ActionReferenceType.REMOTE: 'remote'>
    >>> parse_action_reference("actions/checkout@v4").kind
    <ActionReferenceType.MARKETPLACE: 'marketplace'>
    >>> parse_action_reference("./.github/actions/setup", "octo", "repo", "dev").path
    '.github/actions/setup'
    >>> parse_action_reference("docker://alpine:3.8").kind
    <ActionReferenceType.UNRECOGNIZED: 'unrecognized'>
    """
    if raw.startswith(LOCAL_PREFIXES):
        path = raw.removeprefix("./")
        logger.debug("Identified a local action %s with path %s.", raw, path)
        return ActionReference(
            kind=ActionReferenceType.LOCAL,
            raw=raw,
            owner=context_owner,
            repo=context_repo,
            path=path,
            ref=context_ref,
        )

    match = _REMOTE_PATTERN.match(raw)
    if match is None:
        logger.debug("Unable to recognize the uses reference %s.", raw)
        return ActionReference(kind=ActionReferenceType.UNRECOGNIZED, raw=raw)

    ref = match.group("ref") or defaults.get("action_reference", "default_ref", fallback="main")
    path = match.group("path") or ""
    kind = ActionReferenceType.REMOTE if path else ActionReferenceType.MARKETPLACE
    reference = ActionReference(
        kind=kind,
        raw=raw,
        owner=match.group("owner"),
        repo=match.group("repo"),
        path=path,
        ref=ref,
    )
    logger.debug(
        "Identified a %s action %s: owner=%s repo=%s path=%s ref=%s.",
        kind.value,
        raw,
        reference.owner,
        reference.repo,
        reference.path,
        reference.ref,
    )
    return reference
