from contextlib import contextmanager
import sys
import traceback
import services.logger as log

l = log.get_logger()


class DriverError(Exception):
    """Base class for errors raised by the driver manager."""


class DriverClassError(DriverError):
    """A driver implementation class cannot be resolved or imported."""


class InvalidDriverError(DriverError, TypeError):
    """An object passed as a driver can neither be described nor named."""


class ConfigValueError(DriverError, ValueError):
    """A config value does not match its declared property type."""


def _handle_uncaught_exceptions(exc_type, exc_value, exc_traceback):
    """Global exception handler for uncaught exceptions."""
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return

    l.critical(
        "Unhandled exception caught:\n"
        + ''.join(traceback.format_exception(exc_type, exc_value, exc_traceback))
    )


def install_excepthook():
    """Route uncaught exceptions through the application logger."""
    sys.excepthook = _handle_uncaught_exceptions


def raise_and_log(message: str, exception_type: type = DriverError):
    """
    Log an error and then raise the specified exception.

    :param message: Error message to log and include in the exception.
    :param exception_type: Type of exception to raise (default: DriverError).
    """
    l.error(f"Raising exception: {message}")
    raise exception_type(message)


@contextmanager
def catch_and_log(context_info: str = ""):
    """
    Context manager that logs an exception with some context and re-raises it.

    :param context_info: Optional context info to include in the log.
    """
    try:
        yield
    except Exception as e:
        l.error(f"Exception caught in context '{context_info}': {e}")
        raise
