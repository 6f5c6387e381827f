"""structlog setup for the simulator service and scripts."""

import logging

import structlog


def configure_logging(verbose: bool = False) -> None:
    """Install the console logging chain.

    Args:
        verbose: Log at DEBUG instead of INFO (per-event contract logs are DEBUG)
    """
    log_level = logging.DEBUG if verbose else logging.INFO
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )
