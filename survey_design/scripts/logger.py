"""Logging configuration for the survey design package.

Every module logs to a child of the ``survey`` logger:

- ``survey.sampling.service``: rule used and number of points or blocks chosen
- ``survey.sampling.cluster``: modes found and clusters kept per group
- ``survey.sampling.point``, ``survey.sampling.block``: per-strategy details
- ``survey.scripts.modes``: groups without a density mode
- ``survey.scripts.clustering``: cluster counts, k-means with empty clusters
- ``survey.scripts.thinning``: thinning distance search (INFO with verbose)
- ``survey.scripts.blocks``, ``survey.scripts.centroids``,
  ``survey.scripts.geodesic``: per-call details at DEBUG

The configuration is a ``logging.config.dictConfig`` mapping stored as TOML.
Its location is, in order, the ``cfg_path`` argument, the SURVEY_LOG_CFG
environment variable, or ``logging_config.toml`` at the repo root.
"""

import logging
import logging.config
import os
from pathlib import Path
from typing import Optional, Union

import tomli

root_logger_name = "survey"


def setup_logging(cfg_path: Optional[Union[str, Path]] = None) -> None:
    """Configure the ``survey`` loggers from a TOML file.

    When no configuration file exists, the ``survey`` logger only gets a
    NullHandler, so the package stays silent unless the application
    configures logging itself.

    Raises:
        FileNotFoundError: If the path exists but is not a file
    """
    cfg_path = Path(
        cfg_path
        or os.getenv("SURVEY_LOG_CFG")
        or Path(__file__).parent.parent.parent / "logging_config.toml"
    )

    if not cfg_path.exists():
        survey_logger = logging.getLogger(root_logger_name)
        for handler in survey_logger.handlers[:]:
            survey_logger.removeHandler(handler)
        survey_logger.addHandler(logging.NullHandler())
        return

    if not cfg_path.is_file():
        raise FileNotFoundError(f"Logging config not found at {cfg_path}")

    with cfg_path.open("rb") as f:
        cfg = tomli.load(f)

    logging.config.dictConfig(cfg)
    logging.getLogger(f"{root_logger_name}.config").debug(
        f"Logging configured from {cfg_path}"
    )
