from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from sessionauth.core import errors as api_errors
from sessionauth.services._shared.errors import (
    AuthorizationError,
    BadRequestError,
    ConflictError,
    InternalError,
    NotFoundError,
    ServiceError,
)
from sessionauth.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)


@dataclass(slots=True)
class ServiceContext:
    """
    Carry cross-cutting request-scoped data.

    :param actor_id: Authenticated user identifier.
    :param request_id: Correlation id for logging/tracing.
    """

    actor_id: int | None = None
    request_id: str | None = None


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Centralize error translation.
    * Hold the logger handle passed in by the caller.
    """

    def __init__(
        self,
        *,
        ctx: ServiceContext | None = None,
        logger: logging.Logger | logging.LoggerAdapter | None = None,
    ) -> None:
        """
        :param ctx: Optional request-scoped context.
        :param logger: Logger handle; defaults to the module logger of the subclass.
        """
        self.ctx = ctx or ServiceContext()
        self.log = logger or logging.getLogger(type(self).__module__)

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork()

    def ro_uow(self) -> SQLAlchemyReadOnlyUnitOfWork:
        return SQLAlchemyReadOnlyUnitOfWork()

    @staticmethod
    def now_utc() -> datetime:
        return datetime.now(UTC)

    # -------------------------- Error handling ------------------------------

    @staticmethod
    def translate_exceptions(exc: Exception) -> Exception:
        """
        Map domain/service-level errors to API-level (HTTP) errors.

        :param exc: Exception raised within the service.
        :returns: Translated exception ready to be re-raised.
        """
        if isinstance(exc, AuthorizationError):
            return api_errors.Unauthorized(str(exc))

        if isinstance(exc, InternalError):
            return api_errors.InternalServerError()

        if isinstance(exc, NotFoundError):
            return api_errors.NotFound(str(exc))

        if isinstance(exc, ConflictError):
            return api_errors.Conflict(str(exc))

        if isinstance(exc, BadRequestError | ServiceError):
            return api_errors.BadRequest(str(exc))

        # Fallback: return untouched (will bubble up to Flask handler)
        return exc
