"""Logging configuration for ntfyclip CLI."""
import logging


def configure_logging(verbose: bool) -> None:
    """Configure logging level based on verbosity setting.

    Args:
        verbose: If True, set DEBUG level; otherwise INFO level.

    Output goes to stderr with timestamps, since the client usually runs
    unattended under a service manager.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=[logging.StreamHandler()],
    )
    # websockets logs every frame at DEBUG; keep it quiet unless asked for
    logging.getLogger("websockets").setLevel(logging.DEBUG if verbose else logging.WARNING)
