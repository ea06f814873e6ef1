# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains the typed representation of GitHub Actions workflows and actions.

Only the parts of a workflow that matter for resolving ``uses`` references are modelled.
All other keys (``on``, ``runs-on``, ``with``, ...) are ignored while decoding.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from wk2mmd.errors import MalformedDocumentError, MalformedNeedsError


@dataclass(frozen=True)
class Step:
    """A step of a job."""

    #: The action invoked by this step, if any.
    uses: str | None = None

    #: The name of the step.
    name: str | None = None

    #: The inlined script of the step, if any.
    run: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Step":
        """Create a step from its decoded YAML mapping."""
        name = data.get("name")
        return cls(
            uses=data.get("uses") or None,
            name=None if name is None else str(name),
            run=data.get("run"),
        )


@dataclass(frozen=True)
class Job:
    """A job of a workflow.

    A job with a non-empty ``uses`` is a delegating job: it calls a reusable workflow
    and its steps are never resolved.
    """

    #: The reusable workflow called by this job, if any.
    uses: str | None = None

    #: The jobs that must complete before this one.
    needs: tuple[str, ...] = ()

    #: The steps of the job.
    steps: tuple[Step, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Job":
        """Create a job from its decoded YAML mapping.

        Raises
        ------
        MalformedNeedsError
            If the ``needs`` field has an unsupported shape.
        """
        return cls(
            uses=data.get("uses") or None,
            needs=decode_needs(data.get("needs")),
            steps=tuple(Step.from_dict(step) for step in data.get("steps") or []),
        )


@dataclass(frozen=True)
class WorkflowDocument:
    """A parsed workflow or action definition."""

    #: The jobs of the workflow in declaration order.
    jobs: Mapping[str, Job] = field(default_factory=dict)

    #: The name of the workflow.
    name: str | None = None

    #: The URL or path the document was loaded from.
    source: str | None = None

    def __post_init__(self) -> None:
        # Keep the job mapping read-only once the document is created.
        if not isinstance(self.jobs, MappingProxyType):
            object.__setattr__(self, "jobs", MappingProxyType(dict(self.jobs)))

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any], source: str | None = None, composite_job_name: str = "composite"
    ) -> "WorkflowDocument":
        """Create a document from the decoded YAML content of a workflow or an action.

        The steps of a composite action (``runs.steps``) are exposed as a single job
        named ``composite_job_name``.

        Parameters
        ----------
        data : Mapping[str, Any]
            The decoded YAML content.
        source : str | None
            The URL or path of the document.
        composite_job_name : str
            The name of the job holding the steps of a composite action.

        Returns
        -------
        WorkflowDocument
            The document.

        Raises
        ------
        MalformedNeedsError
            If the ``needs`` field of a job has an unsupported shape.
        MalformedDocumentError
            If a job is not a mapping.
        """
        jobs: dict[str, Job] = {}
        for job_name, job in (data.get("jobs") or {}).items():
            if not isinstance(job, Mapping):
                raise MalformedDocumentError(f"Job {job_name} in {source} is not a mapping.")
            jobs[str(job_name)] = Job.from_dict(job)

        runs = data.get("runs")
        if not jobs and isinstance(runs, Mapping) and runs.get("using") == "composite":
            steps = tuple(Step.from_dict(step) for step in runs.get("steps") or [])
            jobs[composite_job_name] = Job(steps=steps)

        name = data.get("name")
        return cls(jobs=jobs, name=None if name is None else str(name), source=source)


def decode_needs(value: Any) -> tuple[str, ...]:
    """Normalize the ``needs`` field of a job to a tuple of job names.

    Parameters
    ----------
    value : Any
        The decoded YAML value of the field.

    Returns
    -------
    tuple[str, ...]
        The job names, empty if the field is absent.

    Raises
    ------
    MalformedNeedsError
        If the value is neither a string nor a list of strings.

    Examples
    --------
    >>> decode_needs("build")
    ('build',)
    >>> decode_needs(["build", "test"])
    ('build', 'test')
    >>> decode_needs(None)
    ()
    """
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return tuple(value)
    raise MalformedNeedsError(f"Invalid needs field: {value!r}")
