# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains the GlobalConfig class to be used globally."""
import logging
from dataclasses import dataclass

logger: logging.Logger = logging.getLogger(__name__)


@dataclass
class GlobalConfig:
    """Class for keeping track of global configurations."""

    #: The GitHub token forwarded to the workflow source provider.
    gh_token: str = ""

    def load(self, gh_token: str = "") -> None:
        """Initiate the GlobalConfig object.

        Parameters
        ----------
        gh_token : str
            The GitHub token, empty when none is available.
        """
        self.gh_token = gh_token
        if not gh_token:
            logger.debug("No GitHub token is set, requests to GitHub are unauthenticated.")


global_config = GlobalConfig()
"""The object that can be imported and used globally."""
