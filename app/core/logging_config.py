import logging
import sys

def setup_logging():
    """
    Configure logging for the application.

    Sets up logging to stdout with timestamps, log levels, and module names.
    Token values and passwords must never be passed to this logger.
    """
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)]
    )

    # Reduce SQLAlchemy noise in logs
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    return logging.getLogger("backpack")


# Create global logger instance
logger = setup_logging()
