"""
Logging Configuration
Sets up the 'qedkit' logger used by the driver and the framework layers.
"""
import logging
import sys
from typing import Optional

# Libraries that log heavily at DEBUG (numba compilation passes, font lookup)
NOISY_LOGGERS: tuple[str, ...] = ("numba", "matplotlib", "h5py")


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configures the 'qedkit' namespace logger.

    Third-party loggers from NOISY_LOGGERS are held at WARNING so that a
    DEBUG session shows the computation steps only.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file.

    Returns:
        The configured 'qedkit' logger.
    """
    logger = logging.getLogger("qedkit")
    logger.setLevel(level)
    logger.propagate = False

    # The driver may run several times in one process (tests)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    logger.debug(f"Logging initialized at level {logging.getLevelName(level)}.")
    return logger
