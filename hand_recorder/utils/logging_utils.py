"""Logging utilities for the hand recorder."""

import logging
from pathlib import Path
from datetime import datetime
import sys

from hand_recorder.core.street import Street


def setup_logging(
    name: str = "hand_recorder",
    log_dir: Path = Path("logs"),
    level: int = logging.INFO,
    console: bool = True,
    file: bool = True
) -> logging.Logger:
    """Setup logging configuration.

    Args:
        name: Logger name
        log_dir: Directory for log files
        level: Logging level
        console: Whether to log to console
        file: Whether to log to file

    Returns:
        Configured logger
    """
    # Create logger
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers = []

    # Create formatter
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Console handler
    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    # File handler
    if file:
        log_dir.mkdir(exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_dir / f"{name}_{timestamp}.log"

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


class SessionLogger:
    """Logs the progress of an interactive recording session."""

    def __init__(self, logger: logging.Logger):
        """Initialize session logger.

        Args:
            logger: Base logger to use
        """
        self.logger = logger
        self.start_time = None

    def start_hand(self, hand_id: str):
        self.start_time = datetime.now()
        self.logger.info("=" * 60)
        self.logger.info(f"Recording hand {hand_id}")
        self.logger.info("=" * 60)

    def end_hand(self, saved: bool = True):
        """Log the end of a session.

        Args:
            saved: Whether the hand was written to disk
        """
        if self.start_time:
            duration = datetime.now() - self.start_time
            self.logger.info("=" * 60)
            if saved:
                self.logger.info("Hand saved")
            else:
                self.logger.info("Hand discarded")
            self.logger.info(f"Session duration: {duration}")
            self.logger.info("=" * 60)

    def log_street(self, street: Street, pot):
        self.logger.info("")
        self.logger.info(f"{'=' * 10} {street.value.upper()} {'=' * 10}")
        self.logger.info(f"Pot: {pot}")
