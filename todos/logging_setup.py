import logging
import os

from rich.console import Console
from rich.logging import RichHandler


_FORMAT = "[%(name)s] %(message)s"


def setup_logging(verbose: bool = False) -> None:
    """Configures the root logger once; later calls only adjust the level.

    Logs go to stderr so they never mix with command output on stdout.
    `--verbose` gives INFO, TODOS_DEBUG=1 gives DEBUG, otherwise WARNING.
    """
    if os.getenv("TODOS_DEBUG") == "1":
        log_level = logging.DEBUG
    elif verbose:
        log_level = logging.INFO
    else:
        log_level = logging.WARNING

    root_logger = logging.getLogger()
    if getattr(root_logger, "_todos_logging_configured", False):
        root_logger.setLevel(log_level)
        for handler in root_logger.handlers:
            handler.setLevel(log_level)
        return

    handler = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter(_FORMAT))

    root_logger.handlers.clear()
    root_logger.setLevel(log_level)
    root_logger.addHandler(handler)
    root_logger._todos_logging_configured = True
