# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This is the main entrypoint to run wk2mmd."""

import argparse
import logging
import os
import sys

import wk2mmd
from wk2mmd.config.defaults import defaults, load_defaults
from wk2mmd.config.global_config import global_config
from wk2mmd.console import err_console, make_uses_table, set_handler
from wk2mmd.diagram import DIAGRAM_RENDERERS, get_renderer
from wk2mmd.errors import RenderError, UnsupportedDiagramTypeError, WorkflowAnalysisError
from wk2mmd.runner import WorkflowRunner
from wk2mmd.source_provider import WorkflowSourceProvider

logger: logging.Logger = logging.getLogger(__name__)

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def generate_diagram(generate_args: argparse.Namespace) -> int:
    """Analyze the root workflow and write its diagram.

    Parameters
    ----------
    generate_args : argparse.Namespace
        The parsed command-line arguments.

    Returns
    -------
    int
        Returns os.EX_OK if successful or the corresponding error code on failure.
    """
    depth = generate_args.depth
    if depth is None:
        depth = defaults.getint("uses_tree", "default_depth", fallback=2)
    if depth < 1:
        logger.error("The depth must be a positive integer, got %s.", depth)
        return os.EX_USAGE

    diagram_type = generate_args.diagram_type or defaults.get("diagram", "default_type", fallback="flowchart")
    try:
        renderer = get_renderer(diagram_type)
    except UnsupportedDiagramTypeError as error:
        logger.error(error)
        return os.EX_USAGE

    runner = WorkflowRunner(WorkflowSourceProvider(token=global_config.gh_token))
    logger.debug(
        "Running workflow analysis of %s with depth=%s and diagram type %s.",
        generate_args.locator,
        depth,
        diagram_type,
    )
    try:
        analysis = runner.analyze(generate_args.locator, depth)
    except WorkflowAnalysisError as error:
        logger.error(error)
        return os.EX_NOINPUT if error.stage == "download" else os.EX_DATAERR

    if generate_args.show_uses:
        err_console.print(make_uses_table(analysis.uses))

    try:
        diagram = renderer.render(analysis.tree)
    except RenderError as error:
        logger.error(error)
        return os.EX_SOFTWARE

    if not generate_args.output_file:
        print(diagram)
        return os.EX_OK

    try:
        with open(generate_args.output_file, "w", encoding="utf-8") as file:
            file.write(diagram)
    except OSError as error:
        logger.error("Could not write the diagram to %s: %s", generate_args.output_file, error)
        return os.EX_CANTCREAT

    logger.info("The diagram is stored in %s.", generate_args.output_file)
    return os.EX_OK


def main(argv: list[str] | None = None) -> None:
    """Execute wk2mmd as a standalone command-line tool.

    Parameters
    ----------
    argv: list[str] | None
        Command-line arguments.
        If ``argv`` is ``None``, argparse automatically looks at ``sys.argv``.
        Hence, we set ``argv = None`` by default.
    """
    main_parser = argparse.ArgumentParser(
        prog="wk2mmd",
        description="Generate a Mermaid diagram from a GitHub Actions workflow file.",
    )

    main_parser.add_argument(
        "locator",
        help="The URL or path of the workflow file.",
    )

    main_parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {wk2mmd.__version__}",
        help="Show wk2mmd's version number and exit",
    )

    main_parser.add_argument(
        "-v",
        "--verbose",
        help="Run wk2mmd with more debug logs",
        action="store_true",
    )

    main_parser.add_argument(
        "--log-level",
        choices=list(LOG_LEVELS),
        default="info",
        help="The log level, ignored when --verbose is set.",
    )

    main_parser.add_argument(
        "-d",
        "--depth",
        type=int,
        default=None,
        help="The maximum depth of the recursive 'uses' analysis (default: 2).",
    )

    main_parser.add_argument(
        "-t",
        "--diagram-type",
        default="",
        help=f"The Mermaid diagram type: {' or '.join(DIAGRAM_RENDERERS)} (default: flowchart).",
    )

    main_parser.add_argument(
        "-k",
        "--token",
        default="",
        help="The GitHub token for accessing private repositories. Defaults to the GITHUB_TOKEN variable.",
    )

    main_parser.add_argument(
        "-o",
        "--output-file",
        default="",
        help="The file the diagram is written to instead of stdout.",
    )

    main_parser.add_argument(
        "--show-uses",
        action="store_true",
        help="Print the table of all 'uses' references found.",
    )

    main_parser.add_argument(
        "-dp",
        "--defaults-path",
        default="",
        help="The path to the defaults configuration file.",
    )

    args = main_parser.parse_args(argv)

    log_level = logging.DEBUG if args.verbose else LOG_LEVELS[args.log_level]
    set_handler(log_level, verbose=args.verbose)

    if args.defaults_path and not os.path.isfile(args.defaults_path):
        logger.error("The defaults configuration file %s does not exist.", args.defaults_path)
        sys.exit(os.EX_USAGE)

    # Load the default values from defaults.ini files.
    if not load_defaults(args.defaults_path):
        logger.error("Exiting because the defaults configuration could not be loaded.")
        sys.exit(os.EX_NOINPUT)

    token_env_var = defaults.get("github", "token_env_var", fallback="GITHUB_TOKEN")
    global_config.load(gh_token=args.token or _get_token_from_env(token_env_var))

    sys.exit(generate_diagram(args))


def _get_token_from_env(token: str) -> str:
    """Return the value of the passed token from the os environment."""
    return os.environ.get(token) or ""


if __name__ == "__main__":
    main()
