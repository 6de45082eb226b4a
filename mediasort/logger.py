import logging
import os
from datetime import datetime

LOGGER_NAME = "mediasort"


def setup_logging(log_folder="logs", level="INFO"):
    """Configure file + console logging for a run and return the application logger.

    The returned logger is handed to the resolver and organiser instead of
    being imported as a module global.
    """
    #create log folder if doesn't exist
    os.makedirs(log_folder, exist_ok=True)

    log_filename = os.path.join(log_folder, f"mediasort_{datetime.now().strftime('%Y%m%d')}.log")

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # a repeat call replaces the previous run's file and console handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # %levelname inserts the Severity Level of the log.
    # %asctime inserts the Timestamp.
    # %message inserts the actual message.
    formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    file_handler = logging.FileHandler(log_filename, encoding="utf-8")
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    #print log streams to console
    console = logging.StreamHandler()
    console.setFormatter(formatter)
    logger.addHandler(console)

    logger.propagate = False

    return logger
