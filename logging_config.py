"""
Logging configuration for the card layout engine
Provides colored console output, an optional debug log file and helpers for
dumping layout results while tuning constraints
"""

import copy
import logging
import sys
from importlib import metadata
from pathlib import Path
from typing import Optional

from models import LayoutResult

TRACKED_LIBRARIES = ("numpy", "pandas", "polars", "plotly", "streamlit")


class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors for better readability"""

    # Color codes
    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
        "RESET": "\033[0m",  # Reset
    }

    def format(self, record):
        # Color a copy so other handlers see the plain level name
        record = copy.copy(record)
        level_color = self.COLORS.get(record.levelname, self.COLORS["RESET"])
        record.levelname = f"{level_color}{record.levelname}{self.COLORS['RESET']}"

        return super().format(record)


def setup_logging(
    level: str = "INFO",
    enable_file_logging: bool = True,
    enable_engine_debug: bool = False,
    log_file_path: str = "layout_engine.log",
):
    """
    Setup logging configuration

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        enable_file_logging: Whether to log to file
        enable_engine_debug: Force DEBUG on the ``core`` loggers regardless of level
        log_file_path: Path to log file
    """

    # Convert string level to logging constant
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG if enable_engine_debug else numeric_level)

    # Clear existing handlers
    logger.handlers.clear()

    # Console handler with colors
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)

    console_format = ColoredFormatter(
        "%(asctime)s | %(levelname)s | %(name)s:%(lineno)d | %(message)s",
        datefmt="%H:%M:%S",
    )
    console_handler.setFormatter(console_format)
    logger.addHandler(console_handler)

    # File handler (if enabled)
    if enable_file_logging:
        log_path = Path(log_file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)  # Always log everything to file

        file_format = logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)-20s:%(lineno)-4d | %(funcName)-20s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        file_handler.setFormatter(file_format)
        logger.addHandler(file_handler)

        logger.info(f"Logging session started - Level: {level}")
        logger.info(f"Log file: {log_path.absolute()}")

    if enable_engine_debug:
        logging.getLogger("core").setLevel(logging.DEBUG)
        logger.info("Layout engine debugging enabled")

    log_environment(logger)
    return logger


def log_environment(logger: Optional[logging.Logger] = None) -> dict[str, Optional[str]]:
    """Log interpreter and library versions; returns the versions found"""
    if logger is None:
        logger = logging.getLogger(__name__)

    versions: dict[str, Optional[str]] = {"python": sys.version.split()[0]}
    logger.info("System Information:")
    logger.info(f"   Python: {versions['python']}")

    for library in TRACKED_LIBRARIES:
        try:
            versions[library] = metadata.version(library)
            logger.info(f"   {library.capitalize()}: {versions[library]}")
        except metadata.PackageNotFoundError:
            versions[library] = None
            logger.warning(f"   {library.capitalize()}: Not installed")

    return versions


def log_layout_result(result: LayoutResult, name: str = "Layout", logger=None):
    """
    Log detailed information about a layout result for debugging

    Args:
        result: Layout to describe
        name: Name to identify the layout
        logger: Logger instance (if None, uses this module's logger)
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    logger.debug(f"{name} Information:")
    logger.debug(f"   {result.describe()}")
    logger.debug(
        f"   Spacing: card {result.card_spacing:.1f}, row {result.row_spacing:.1f}"
    )
    if result.min_card_size is not None:
        logger.debug(
            f"   Minimum: {result.min_card_size.width:.1f}x{result.min_card_size.height:.1f}"
        )
    if result.positions:
        first = result.positions[0]
        last = result.positions[-1]
        logger.debug(f"   First card: ({first.x:.1f}, {first.y:.1f})")
        logger.debug(f"   Last card: ({last.x:.1f}, {last.y:.1f})")
    for warning in result.warnings:
        logger.debug(f"   Warning: {warning}")


# Quick setup function for common debugging scenarios
def quick_debug_setup():
    """Quick setup for debugging layout decisions"""
    return setup_logging(
        level="DEBUG",
        enable_file_logging=True,
        enable_engine_debug=True,
        log_file_path="debug_layout.log",
    )


if __name__ == "__main__":
    logger = quick_debug_setup()
    logger.info("Testing logging configuration")
    logger.debug("Debug message test")
    logger.warning("Warning message test")
    logger.error("Error message test")
