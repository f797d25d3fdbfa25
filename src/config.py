"""Logging setup for the pad fingering solver's command line.

Library modules only obtain loggers via ``logging.getLogger(__name__)``;
handlers are installed here, once, by the entry point.
"""

import logging


LOG_FORMAT: str = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(verbose: bool = False) -> None:
    """Install a stderr handler on the root logger.

    Args:
        verbose: Log at DEBUG (one line per solved note) instead of INFO.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        force=True,
    )
