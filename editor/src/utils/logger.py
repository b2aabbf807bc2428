"""Global logging and error handling utilities"""
import sys
import logging
import traceback

# Detect debug mode - True if running from source, False if packaged
DEBUG_MODE = not getattr(sys, 'frozen', False)

_logger = logging.getLogger('OverlayComposer')


def loggerRaise(e: Exception, user_message: str = None, title: str = "Error"):
    """Log an exception with context, then re-raise it

    Args:
        e: The exception to handle
        user_message: Human-readable context for the log line (optional)
        title: Short category for the log line

    In DEBUG_MODE:
        - Logs the one-line message and re-raises (the traceback surfaces anyway)

    In RELEASE_MODE:
        - Logs the full traceback as well, then re-raises
    """
    message = user_message if user_message else str(e)
    if DEBUG_MODE:
        _logger.error(f"{title}: {message}")
    else:
        tb = ''.join(traceback.format_exception(type(e), e, e.__traceback__))
        _logger.error(f"{title}: {message}\n{tb}")

    # Re-raise so the caller can handle it appropriately
    raise e
