# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains error classes for wk2mmd."""


class Wk2mmdError(Exception):
    """The base class for wk2mmd errors."""


class SourceUnavailableError(Wk2mmdError):
    """Happens when the content behind a workflow locator cannot be retrieved."""


class SourceNotFoundError(SourceUnavailableError):
    """Happens when a workflow locator points to nothing (HTTP 404 or a missing file)."""


class TransportError(SourceUnavailableError):
    """Happens when retrieving a workflow fails for any other reason.

    Reasons can include:
        * network errors
        * unexpected HTTP status codes
        * local files that cannot be read
    """


class MalformedDocumentError(Wk2mmdError):
    """Happens when a workflow or action document cannot be decoded."""


class MalformedNeedsError(MalformedDocumentError):
    """Happens when the ``needs`` field of a job is neither a string nor a list of strings."""


class UnsupportedDiagramTypeError(Wk2mmdError):
    """Happens when an unknown diagram type is requested."""


class RenderError(Wk2mmdError):
    """Happens when a diagram cannot be rendered."""


class WorkflowAnalysisError(Wk2mmdError):
    """Happens when the root workflow of an analysis cannot be downloaded or parsed."""

    def __init__(self, stage: str, message: str) -> None:
        """Initialize instance.

        Parameters
        ----------
        stage : str
            The failing stage, ``download`` or ``parse``.
        message : str
            The error message.
        """
        super().__init__(message)
        self.stage = stage
