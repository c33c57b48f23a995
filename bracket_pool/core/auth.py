"""
Authorization guards for the admin sync endpoints.

One guard interface, two strategies:
- SharedSecretGuard: X-Cron-Secret header compared against CRON_SECRET.
  Used by every job an external scheduler triggers.
- PoolCreatorGuard: caller must be the creator of the given pool.
  Used by logo enrichment and the manual winner override.

A rejected caller never reaches the job.
"""
import hmac
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request, Security
from fastapi.security import APIKeyHeader
from sqlalchemy.orm import Session

from bracket_pool.core.config import CronConfig, Settings, get_settings
from bracket_pool.core.exceptions import AuthenticationError, BadRequestError, PermissionDeniedError
from bracket_pool.core.logging import get_logger
from bracket_pool.repositories.pool_repository import PoolRepository

logger = get_logger(__name__)

CRON_SECRET_HEADER = "X-Cron-Secret"

cron_secret_header = APIKeyHeader(name=CRON_SECRET_HEADER, auto_error=False)


@dataclass(frozen=True)
class CallerCredential:
    """What the caller presented with the request."""
    cron_secret: Optional[str] = None
    pool_id: Optional[str] = None
    user_id: Optional[str] = None


class AuthorizationGuard(ABC):
    """Accepts or rejects a caller before a job starts."""

    @abstractmethod
    def authorize(self, credential: CallerCredential) -> None:
        """Return normally when allowed, raise a SyncError subclass otherwise."""


class SharedSecretGuard(AuthorizationGuard):

    def __init__(self, config: CronConfig):
        self.config = config

    def authorize(self, credential: CallerCredential) -> None:
        provided = credential.cron_secret or ""
        if not hmac.compare_digest(provided.encode(), self.config.secret.encode()):
            raise AuthenticationError()


class PoolCreatorGuard(AuthorizationGuard):

    def __init__(self, pools: PoolRepository):
        self.pools = pools

    def authorize(self, credential: CallerCredential) -> None:
        if not credential.pool_id or not credential.user_id:
            raise BadRequestError("missing poolId/userId")

        pool = self.pools.find_by_id(credential.pool_id)
        if pool is None:
            raise BadRequestError(f"pool {credential.pool_id} not found")
        if pool.created_by != credential.user_id:
            logger.warning(
                f"User {credential.user_id} is not the creator of pool {credential.pool_id}"
            )
            raise PermissionDeniedError()


def get_client_ip(request: Request) -> str:
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def require_cron_secret(
    request: Request,
    cron_secret: Optional[str] = Security(cron_secret_header),
    settings: Settings = Depends(get_settings),
) -> None:
    """
    Dependency guarding scheduler-triggered endpoints.

    Raises:
        ConfigurationError: CRON_SECRET is not configured (500)
        AuthenticationError: header missing or wrong (401)
    """
    guard = SharedSecretGuard(CronConfig.from_settings(settings))
    try:
        guard.authorize(CallerCredential(cron_secret=cron_secret))
    except AuthenticationError:
        logger.warning(f"Rejected sync call to {request.url.path} from {get_client_ip(request)}")
        raise


def authorize_pool_creator(db: Session, pool_id: Optional[str], user_id: Optional[str]) -> None:
    """Check that ``user_id`` created ``pool_id``; 400 when either is missing, 403 otherwise."""
    PoolCreatorGuard(PoolRepository(db)).authorize(
        CallerCredential(pool_id=pool_id, user_id=user_id)
    )
