# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module implements the rich console used for logging and for printing tables."""

import logging
from collections import Counter

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

#: The console of the log messages and tables. Diagrams are printed to stdout separately.
err_console = Console(stderr=True)


def set_handler(level: int, verbose: bool = False) -> RichHandler:
    """Install a rich handler on the ``wk2mmd`` logger.

    Parameters
    ----------
    level : int
        The log level.
    verbose : bool
        If True, the logger name and source line of each record are shown as well.

    Returns
    -------
    RichHandler
        The installed handler.
    """
    handler = RichHandler(console=err_console, show_path=verbose, rich_tracebacks=verbose, markup=False)
    if verbose:
        handler.setFormatter(logging.Formatter("[%(name)s:%(funcName)s:%(lineno)d] %(message)s"))
    else:
        handler.setFormatter(logging.Formatter("%(message)s"))

    wk2mmd_logger = logging.getLogger("wk2mmd")
    for existing in list(wk2mmd_logger.handlers):
        if isinstance(existing, RichHandler):
            wk2mmd_logger.removeHandler(existing)
    wk2mmd_logger.addHandler(handler)
    wk2mmd_logger.setLevel(level)
    wk2mmd_logger.propagate = False
    return handler


def make_uses_table(uses: list[str]) -> Table:
    """Return a table of the distinct ``uses`` strings and how often each one occurs.

    Parameters
    ----------
    uses : list[str]
        The ``uses`` strings in visitation order.

    Returns
    -------
    Table
        The table, with one row per distinct string in order of first appearance.
    """
    table = Table(title="Uses References", title_justify="left")
    table.add_column("Uses", justify="left")
    table.add_column("Count", justify="right")
    for reference, count in Counter(uses).items():
        table.add_row(reference, str(count))
    return table
