"""
Error taxonomy shared by every service.

Services raise the most specific subclass of `ServiceError`; the API layer
maps each one to a status code. Storage-layer errors that do not match a
known case are not wrapped and propagate as-is.
"""

from typing import Any, Optional

from ..schemas.service_results import ServiceErrorCodes
from .constants import ConsistencyState


class ServiceError(Exception):
    """Base class for errors raised deliberately by the service layer."""

    error_code: str = ServiceErrorCodes.INTERNAL_ERROR
    status_code: int = 500

    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if error_code is not None:
            self.error_code = error_code

    def to_dict(self) -> dict:
        return {"error_code": self.error_code, "message": self.message}


class ValidationError(ServiceError):
    """Caller-supplied input is malformed."""

    error_code = ServiceErrorCodes.VALIDATION_ERROR
    status_code = 400


class NotFoundError(ServiceError):
    """A referenced entity does not exist in the off-chain store."""

    error_code = ServiceErrorCodes.NOT_FOUND
    status_code = 404


class ConflictError(ServiceError):
    """The operation would violate a state invariant."""

    error_code = ServiceErrorCodes.CONFLICT
    status_code = 409


class OnChainError(ServiceError):
    """
    An on-chain call failed or timed out.

    The ledger and the off-chain store are not written transactionally, so
    the error states how far the dual write got: `consistency` says whether
    off-chain rows were left behind, `stage` names the failing step and
    `partial` holds whatever the orchestration produced before failing.
    """

    error_code = ServiceErrorCodes.ON_CHAIN_ERROR
    status_code = 502

    def __init__(
        self,
        message: str,
        stage: str = "",
        consistency: ConsistencyState = ConsistencyState.FAILED,
        partial: Any = None,
    ):
        super().__init__(message)
        self.stage = stage
        self.consistency = consistency
        self.partial = partial

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["stage"] = self.stage
        data["consistency"] = self.consistency.value
        return data


class LineageDepthError(ServiceError):
    """A lineage walk went deeper than the configured generation cap."""

    error_code = ServiceErrorCodes.LINEAGE_TOO_DEEP
    status_code = 500
