import functools
import logging

from sqlalchemy.exc import InterfaceError, OperationalError

logger = logging.getLogger(__name__)


class GalaxeryError(Exception):
    """Base class for domain failures"""


class ValidationFailure(GalaxeryError):
    """Malformed tag input"""


class NotFoundFailure(GalaxeryError):
    """A referenced entity does not exist"""


class ConflictFailure(GalaxeryError):
    """Concurrent writers raced on a unique value and the re-read did not settle it"""


class PersistenceFailure(GalaxeryError):
    """The storage layer is unavailable"""


def translate_storage_errors(func):
    """Raise PersistenceFailure when the database cannot be reached.

    Only connection-level errors are translated; integrity and programming
    errors keep propagating unchanged.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (OperationalError, InterfaceError) as exc:
            logger.error("Storage failure in %s: %s", func.__qualname__, exc)
            raise PersistenceFailure("Storage is unavailable") from exc
    return wrapper
