"""
Shared plumbing for managers that talk to repositories.
"""

from typing import Any, Callable, TypeVar
from loguru import logger

from ..errors import (
    AdoptionRequestError,
    ConflictError,
    DuplicateEmailError,
    InternalError,
    StaleWriteError,
)

T = TypeVar("T")


class BaseManager:
    """Base class translating store failures into categorized errors."""

    def _store(self, operation: str, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """
        Run a repository call.

        Args:
            operation: Short description used in error messages
            func: Repository method
            *args: Positional arguments for ``func``
            **kwargs: Keyword arguments for ``func``

        Returns:
            Whatever ``func`` returns

        Raises:
            ConflictError: If a version-checked write lost a race, or a new
                user's email was taken meanwhile
            InternalError: If the store failed for any other reason
        """
        try:
            return func(*args, **kwargs)
        except AdoptionRequestError:
            raise
        except StaleWriteError as e:
            logger.warning(f"Concurrent modification while {operation}: {e}")
            raise ConflictError(
                f"The {e.entity} was modified by another request, please retry.",
                **{f"{e.entity}_id": e.entity_id},
            ) from e
        except DuplicateEmailError as e:
            logger.warning(f"Email taken while {operation}: {e}")
            raise ConflictError(
                f"The email {e.email} is already registered, please retry.",
                email=e.email,
            ) from e
        except Exception as e:
            logger.error(f"Store failure while {operation}: {e}")
            raise InternalError(f"Error {operation}.", cause=str(e)) from e
