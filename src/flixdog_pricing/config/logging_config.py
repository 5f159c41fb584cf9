"""
Logging setup shared by the API and the command-line scripts.
"""
import logging

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"

_configured = False


def configure_logging(level: str = "INFO"):
    """Attach a single console handler to the package logger."""
    global _configured
    package_logger = logging.getLogger("flixdog_pricing")
    package_logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    if _configured:
        return package_logger

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(handler)
    _configured = True
    return package_logger
