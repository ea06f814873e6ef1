# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module tests the workflow runner."""

import os
from pathlib import Path

import pytest

from wk2mmd.errors import UnsupportedDiagramTypeError, WorkflowAnalysisError
from wk2mmd.runner import WorkflowRunner, normalize_locator

RAW = "https://raw.githubusercontent.com"
ROOT_URL = f"{RAW}/octo/repo/main/.github/workflows/ci.yml"

ROOT_WORKFLOW = """
name: CI
on: push
jobs:
  checks:
    steps:
      - uses: actions/checkout@v4
      - uses: ./.github/actions/setup
  release:
    uses: octo-org/shared/.github/workflows/release.yml@v2
"""

SETUP_ACTION = """
runs:
  using: composite
  steps:
    - uses: actions/setup-python@v5
"""

RELEASE_WORKFLOW = """
on: workflow_call
jobs:
  publish:
    steps:
      - run: make publish
"""


@pytest.fixture()
def github_source_provider(mock_source_provider):  # type: ignore
    """Serve a root workflow hosted on GitHub with the documents it references."""
    mock_source_provider.files = {
        ROOT_URL: ROOT_WORKFLOW,
        f"{RAW}/octo/repo/main/.github/actions/setup/action.yml": SETUP_ACTION,
        f"{RAW}/octo-org/shared/v2/.github/workflows/release.yml": RELEASE_WORKFLOW,
    }
    return mock_source_provider


def test_analyze(github_source_provider) -> None:  # type: ignore
    """Test analyzing a workflow hosted on GitHub."""
    analysis = WorkflowRunner(github_source_provider).analyze(ROOT_URL, 2)

    assert analysis.uses == [
        "actions/checkout@v4",
        "./.github/actions/setup",
        "actions/setup-python@v5",
        "octo-org/shared/.github/workflows/release.yml@v2",
    ]
    assert analysis.tree is not None
    assert [node.name for node in analysis.tree.walk()] == [
        "workflow",
        "checks",
        "actions/checkout@v4",
        "./.github/actions/setup",
        "composite",
        "actions/setup-python@v5",
        "release",
        "publish",
    ]


def test_analyze_depth_one(github_source_provider) -> None:  # type: ignore
    """Test that only the root workflow is downloaded with a depth of 1."""
    analysis = WorkflowRunner(github_source_provider).analyze(ROOT_URL, 1)
    assert github_source_provider.requested == [ROOT_URL]
    assert analysis.tree is not None
    assert len(list(analysis.tree.walk())) == 5


def test_run_workflow_analysis_sequence(github_source_provider) -> None:  # type: ignore
    """Test rendering the sequence diagram of a workflow."""
    diagram = WorkflowRunner(github_source_provider).run_workflow_analysis(ROOT_URL, 2, "sequence")
    lines = diagram.splitlines()
    assert lines[0] == "sequenceDiagram"
    assert "    participant p7 as publish" in lines
    assert "    p6->>p7: uses" in lines


def test_run_workflow_analysis_unsupported_diagram(github_source_provider) -> None:  # type: ignore
    """Test that an unknown diagram type fails before anything is downloaded."""
    with pytest.raises(UnsupportedDiagramTypeError):
        WorkflowRunner(github_source_provider).run_workflow_analysis(ROOT_URL, 2, "gantt")
    assert not github_source_provider.requested


def test_analyze_download_failure(mock_source_provider) -> None:  # type: ignore
    """Test that a root workflow that cannot be downloaded aborts the analysis."""
    with pytest.raises(WorkflowAnalysisError, match="^failed to download workflow: ") as error:
        WorkflowRunner(mock_source_provider).analyze(ROOT_URL, 2)
    assert error.value.stage == "download"


@pytest.mark.parametrize(
    "content",
    [
        pytest.param("jobs: [\n", id="invalid yaml"),
        pytest.param("jobs:\n  build:\n    needs: {lint: true}\n", id="invalid needs"),
    ],
)
def test_analyze_parse_failure(mock_source_provider, content: str) -> None:  # type: ignore
    """Test that a root workflow that cannot be parsed aborts the analysis."""
    mock_source_provider.files = {ROOT_URL: content}
    with pytest.raises(WorkflowAnalysisError, match="^failed to parse workflow YAML: ") as error:
        WorkflowRunner(mock_source_provider).analyze(ROOT_URL, 2)
    assert error.value.stage == "parse"


def test_analyze_referenced_failures_are_not_fatal(mock_source_provider) -> None:  # type: ignore
    """Test that references that cannot be fetched or parsed become leaves."""
    mock_source_provider.files = {
        ROOT_URL: ROOT_WORKFLOW,
        f"{RAW}/octo/repo/main/.github/actions/setup/action.yml": "runs: [\n",
    }
    analysis = WorkflowRunner(mock_source_provider).analyze(ROOT_URL, 5)
    assert analysis.tree is not None
    assert len(list(analysis.tree.walk())) == 5


def test_analyze_local_workflow_calling_itself(tmp_path: Path, mock_source_provider) -> None:  # type: ignore
    """Test that a local workflow calling itself is expanded once."""
    path = os.path.join(tmp_path, ".github", "workflows", "loop.yml")
    mock_source_provider.files = {path: "jobs:\n  again:\n    uses: ./.github/workflows/loop.yml\n"}
    analysis = WorkflowRunner(mock_source_provider).analyze(path, 10)
    assert analysis.tree is not None
    assert [node.name for node in analysis.tree.walk()] == ["workflow", "again"]
    assert mock_source_provider.requested == [path, path]


@pytest.mark.parametrize(
    "root_url",
    [
        f"{RAW}/octo/repo/refs/heads/main/.github/workflows/loop.yml",
        "https://github.com/octo/repo/blob/main/.github/workflows/loop.yml",
    ],
)
def test_analyze_github_workflow_calling_itself(root_url: str, mock_source_provider) -> None:  # type: ignore
    """Test that a GitHub workflow calling itself is expanded once whatever the form of its URL."""
    loop = "jobs:\n  again:\n    uses: ./.github/workflows/loop.yml\n"
    mock_source_provider.files = {root_url: loop, f"{RAW}/octo/repo/main/.github/workflows/loop.yml": loop}
    analysis = WorkflowRunner(mock_source_provider).analyze(root_url, 10)
    assert analysis.tree is not None
    assert [node.unique_id for node in analysis.tree.walk()] == ["workflow", "workflow/again"]


@pytest.mark.parametrize(
    ("locator", "expected"),
    [
        ("https://github.com/octo/repo/blob/main/ci.yml", f"{RAW}/octo/repo/main/ci.yml"),
        (ROOT_URL, ROOT_URL),
        (f"{RAW}/octo/repo/refs/heads/main/ci.yml", f"{RAW}/octo/repo/main/ci.yml"),
        (f"{RAW}/octo/repo/refs/tags/v1/ci.yml", f"{RAW}/octo/repo/v1/ci.yml"),
        ("https://example.com/ci.yml", "https://example.com/ci.yml"),
        ("file:///work/repo/ci.yml", "/work/repo/ci.yml"),
        ("/work/repo/./ci.yml", "/work/repo/ci.yml"),
    ],
)
def test_normalize_locator(locator: str, expected: str) -> None:
    """Test the canonical form of root workflow locators."""
    assert normalize_locator(locator) == expected
