# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains the parser for GitHub Actions workflow and action files."""

import json
import logging
import os
from functools import cache
from typing import Any

import jsonschema
import yamale
from yaml import YAMLError

from wk2mmd import WK2MMD_PATH
from wk2mmd.config.defaults import defaults
from wk2mmd.errors import MalformedDocumentError
from wk2mmd.parsers.workflow_model import WorkflowDocument

logger: logging.Logger = logging.getLogger(__name__)

USES_SCHEMA_PATH = os.path.join(WK2MMD_PATH, "resources", "schemastore", "github-uses.json")


@cache
def _load_schema() -> dict[str, Any]:
    with open(USES_SCHEMA_PATH, encoding="utf-8") as schema_file:
        schema: dict[str, Any] = json.load(schema_file)
        return schema


def parse_workflow(content: bytes | str, source: str | None = None) -> WorkflowDocument:
    """Parse the content of a GitHub Actions workflow or action YAML file.

    Parameters
    ----------
    content : bytes | str
        The raw YAML content.
    source : str | None
        The URL or path the content was downloaded from, used for diagnostics.

    Returns
    -------
    WorkflowDocument
        The parsed document.

    Raises
    ------
    MalformedDocumentError
        When the content is not valid YAML, does not hold exactly one document
        or does not have the structure of a workflow.
    MalformedNeedsError
        When the ``needs`` field of a job is neither a string nor a list of strings.
    """
    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8")
        except UnicodeDecodeError as error:
            raise MalformedDocumentError(f"Cannot decode GitHub workflow {source}: {error}") from error

    try:
        parse_result = yamale.make_data(content=content)
    except YAMLError as error:
        raise MalformedDocumentError(f"Cannot parse GitHub workflow {source}: {error}") from error

    if len(parse_result) != 1:
        raise MalformedDocumentError(f"Cannot parse GitHub workflow {source}: expected a single YAML document.")

    data = parse_result[0][0]
    if data is None:
        data = {}

    try:
        jsonschema.validate(data, _load_schema())
    except jsonschema.ValidationError as error:
        raise MalformedDocumentError(
            f"Cannot parse GitHub workflow {source}, schema validation failed: {error.message}"
        ) from error

    composite_job_name = defaults.get("uses_tree", "composite_job_name", fallback="composite")
    document = WorkflowDocument.from_dict(data, source=source, composite_job_name=composite_job_name)
    logger.debug("Parsed %s with %s job(s).", source, len(document.jobs))
    return document
