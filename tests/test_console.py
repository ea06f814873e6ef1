# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module tests the rich console helpers."""

import logging

from rich.console import Console
from rich.logging import RichHandler

from wk2mmd.console import make_uses_table, set_handler


def test_make_uses_table() -> None:
    """Test that the table has one row per distinct reference."""
    table = make_uses_table(["actions/checkout@v4", "./.github/actions/setup", "actions/checkout@v4"])
    assert table.row_count == 2

    console = Console(width=120, record=True)
    console.print(table)
    text = console.export_text()
    assert "actions/checkout@v4" in text
    assert "./.github/actions/setup" in text


def test_set_handler() -> None:
    """Test that a single rich handler is installed on the wk2mmd logger."""
    set_handler(logging.INFO)
    handler = set_handler(logging.DEBUG, verbose=True)

    wk2mmd_logger = logging.getLogger("wk2mmd")
    assert [existing for existing in wk2mmd_logger.handlers if isinstance(existing, RichHandler)] == [handler]
    assert wk2mmd_logger.level == logging.DEBUG
