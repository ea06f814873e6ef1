# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""The module provides the sources that workflow and action files are downloaded from."""

import abc
import logging

import requests

from wk2mmd.config.defaults import defaults
from wk2mmd.errors import SourceNotFoundError, TransportError

logger: logging.Logger = logging.getLogger(__name__)

FILE_SCHEME = "file://"


class BaseSourceProvider(abc.ABC):
    """This is the base class for workflow sources."""

    @abc.abstractmethod
    def download(self, locator: str) -> bytes:
        """Return the raw content behind a locator.

        Parameters
        ----------
        locator : str
            An absolute URL or a local path.

        Returns
        -------
        bytes
            The content.

        Raises
        ------
        SourceNotFoundError
            If nothing exists at the locator.
        TransportError
            If the content cannot be retrieved for any other reason.
        """


def convert_to_raw_url(url: str) -> str:
    """Convert a ``github.com/{owner}/{repo}/blob/{ref}/{path}`` URL to its raw content URL.

    Any other URL is returned unchanged.

    Parameters
    ----------
    url : str
        The URL.

    Returns
    -------
    str
        The raw content URL.

    Examples
    --------
    >>> convert_to_raw_url("https://github.com/owner/repo/blob/main/.github/workflows/ci.yml")
    'https://raw.githubusercontent.com/owner/repo/main/.github/workflows/ci.yml'
    >>> convert_to_raw_url("https://example.com/ci.yml")
    'https://example.com/ci.yml'
    """
    if url.startswith("https://github.com/") and "/blob/" in url:
        raw_content_url = defaults.get("github", "raw_content_url", fallback="https://raw.githubusercontent.com")
        url = url.replace("https://github.com", raw_content_url.rstrip("/"), 1)
        url = url.replace("/blob/", "/", 1)
    return url


class WorkflowSourceProvider(BaseSourceProvider):
    """Download workflow files over HTTP(S) or read them from the local file system."""

    def __init__(self, token: str = "", timeout: int | None = None) -> None:
        """Initialize instance.

        Parameters
        ----------
        token : str
            The GitHub token added to every HTTP request, if not empty.
        timeout : int | None
            The timeout of each HTTP request in seconds. Defaults to ``[requests] timeout``.
        """
        self.token = token
        self.timeout = timeout if timeout is not None else defaults.getint("requests", "timeout", fallback=10)

    @property
    def headers(self) -> dict[str, str]:
        """Return the headers included in every HTTP request."""
        if self.token:
            return {"Authorization": f"Bearer {self.token}"}
        return {}

    def download(self, locator: str) -> bytes:
        """Return the content of a workflow file.

        ``http://`` and ``https://`` locators are downloaded; ``github.com`` blob URLs are
        converted to raw content URLs first. ``file://`` locators and plain paths are read
        from the local file system.

        Parameters
        ----------
        locator : str
            An absolute URL or a local path.

        Returns
        -------
        bytes
            The content.

        Raises
        ------
        SourceNotFoundError
            If the server answers 404 or the file does not exist.
        TransportError
            If the request fails, the server answers with another error or the file cannot be read.
        """
        if locator.startswith(("http://", "https://")):
            return self._download_url(convert_to_raw_url(locator))
        return self._read_file(locator.removeprefix(FILE_SCHEME))

    def _download_url(self, url: str) -> bytes:
        logger.debug("GET - %s", url)
        try:
            response = requests.get(url=url, headers=self.headers, timeout=self.timeout)
        except requests.exceptions.RequestException as error:
            raise TransportError(f"Failed to execute request to {url}: {error}") from error

        if response.status_code == 404:
            raise SourceNotFoundError(f"Nothing found at {url}.")
        if response.status_code != 200:
            raise TransportError(f"Unexpected status code {response.status_code} from {url}.")
        return response.content

    def _read_file(self, path: str) -> bytes:
        logger.debug("Reading workflow from local file %s", path)
        try:
            with open(path, "rb") as file:
                return file.read()
        except FileNotFoundError as error:
            raise SourceNotFoundError(f"Cannot find file {path}.") from error
        except OSError as error:
            raise TransportError(f"Failed to read local file {path}: {error}") from error
