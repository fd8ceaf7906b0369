"""Bearer-token gate for the cron endpoints.

The scheduler presents ``Authorization: Bearer <secret>``; the secret is
compared in constant time against the configured cron secret.
"""

import hmac

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from blob_retention.config import Settings, get_settings
from blob_retention.observability.logging import get_logger

logger = get_logger(__name__)

# Security scheme for FastAPI
security = HTTPBearer(auto_error=False)


def verify_token(provided: str, expected: str) -> bool:
    """Constant-time token comparison."""
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


async def require_cron_secret(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    settings: Settings = Depends(get_settings),
) -> None:
    """FastAPI dependency that rejects requests without the cron secret.

    Raises:
        HTTPException: 500 when no secret is configured, 401 when the
            bearer token is missing, malformed or wrong
    """
    secret = settings.security.cron_secret
    if secret is None or not secret.get_secret_value():
        logger.error("cron_secret_not_configured")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server configuration error",
        )

    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

    if not verify_token(credentials.credentials, secret.get_secret_value()):
        logger.warning("cron_token_rejected")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
