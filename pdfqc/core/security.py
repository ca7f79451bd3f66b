from typing import Optional

from fastapi import Security, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials, APIKeyHeader
import logging
import secrets

from pdfqc.core.config import settings

logger = logging.getLogger(__name__)

# Bearer Token Authentication (Authorization: Bearer <token>)
bearer_scheme = HTTPBearer(auto_error=False)
# Header Authentication for clients that cannot set Authorization (X-API-Key: <token>)
api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


async def verify_api_key(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
    header_key: Optional[str] = Security(api_key_header),
):
    """
    Verify the API key from the Authorization bearer token or X-API-Key header.

    Can be disabled by setting REQUIRE_API_KEY=false in environment.

    Returns:
        True if authentication is successful

    Raises:
        HTTPException: 401 if no key is supplied, 403 if invalid, 500 if misconfigured
    """
    if not settings.REQUIRE_API_KEY:
        return True

    if not settings.API_KEY:
        logger.warning("API key not configured but REQUIRE_API_KEY is True. Denying access.")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="API authentication is not properly configured"
        )

    supplied = credentials.credentials if credentials is not None else header_key
    if not supplied:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Bearer token is required. Provide Authorization: Bearer <token> header.",
            headers={"WWW-Authenticate": "Bearer"}
        )

    if not secrets.compare_digest(supplied, settings.API_KEY):
        logger.warning("Invalid API key attempt")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid bearer token",
            headers={"WWW-Authenticate": "Bearer"}
        )

    return True
