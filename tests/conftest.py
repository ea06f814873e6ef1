# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""Fixtures for tests."""
from collections.abc import Iterator
from pathlib import Path

import pytest

from wk2mmd.config.defaults import defaults, load_defaults
from wk2mmd.errors import SourceNotFoundError
from wk2mmd.parsers.workflow_model import WorkflowDocument
from wk2mmd.source_provider import BaseSourceProvider

# We need to pass fixture names as arguments to maintain an order.
# pylint: disable=redefined-outer-name


class MockSourceProvider(BaseSourceProvider):
    """A source provider serving in-memory files and recording the requested locators."""

    def __init__(self, files: dict[str, str | bytes] | None = None) -> None:
        self.files = files or {}
        self.requested: list[str] = []

    def download(self, locator: str) -> bytes:
        self.requested.append(locator)
        if locator not in self.files:
            raise SourceNotFoundError(f"Nothing found at {locator}.")
        content = self.files[locator]
        return content.encode("utf-8") if isinstance(content, str) else content


class MockResolver:
    """A resolver serving parsed documents by ``uses`` string and counting the resolutions."""

    def __init__(self, documents: dict[str, WorkflowDocument] | None = None) -> None:
        self.documents = documents or {}
        self.calls: list[str] = []

    def resolve(self, uses: str) -> WorkflowDocument | None:
        self.calls.append(uses)
        return self.documents.get(uses)


@pytest.fixture()
def test_dir() -> Path:
    """Set the root test_dir path.

    Returns
    -------
    Path
        The root path to the test directory.
    """
    return Path(__file__).parent


@pytest.fixture()
def resources_dir(test_dir: Path) -> Path:
    """Return the directory of the shared test resources."""
    return test_dir.joinpath("resources")


@pytest.fixture(autouse=True)
def setup_test() -> Iterator[None]:
    """Load the values from ``defaults.ini`` for each test and clear them afterwards."""
    load_defaults("")
    yield
    defaults.clear()


@pytest.fixture()
def mock_source_provider() -> MockSourceProvider:
    """Return an empty in-memory source provider."""
    return MockSourceProvider()


@pytest.fixture()
def mock_resolver() -> MockResolver:
    """Return a resolver without documents."""
    return MockResolver()
