# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains the Jinja2 extension filters used by the diagram templates.

All filters have ``j2_filter_`` as a prefix. The rest of the name is the name of
that filter in the Jinja2 Environment.

References
----------
    - https://jinja.palletsprojects.com/en/3.1.x/api/#custom-filters
    - https://mermaid.js.org/syntax/flowchart.html#entity-codes-to-escape-characters
"""


def j2_filter_mermaid_text(text: str) -> str:
    """Escape the characters that break a Mermaid statement.

    Parameters
    ----------
    text : str
        The label.

    Returns
    -------
    str
        The label with ``"`` and line breaks replaced by Mermaid entity codes.

    Examples
    --------
    >>> j2_filter_mermaid_text('say "hi"')
    'say #quot;hi#quot;'
    """
    return str(text).replace('"', "#quot;").replace("\r", "").replace("\n", "#10;")


def j2_filter_mermaid_label(text: str) -> str:
    """Return a label as a quoted Mermaid string.

    Parameters
    ----------
    text : str
        The label.

    Returns
    -------
    str
        The escaped label surrounded by double quotes.

    Examples
    --------
    >>> j2_filter_mermaid_label("actions/checkout@v4")
    '"actions/checkout@v4"'
    """
    return f'"{j2_filter_mermaid_text(text)}"'


filter_extensions: dict[str, str] = {
    "mermaid_text": "j2_filter_mermaid_text",
    "mermaid_label": "j2_filter_mermaid_label",
}
