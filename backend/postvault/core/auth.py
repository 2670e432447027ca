"""Authentication dependencies and utilities."""
import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from postvault.core.config import settings

logger = logging.getLogger(__name__)
security = HTTPBearer()


def get_current_user_id(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> str:
    """
    Extract user ID from JWT token.

    This validates the JWT signature (HS256, shared NEXTAUTH_SECRET) and
    returns the `sub` claim, which is the owning user ID for posts and
    entities.
    """
    try:
        payload = jwt.decode(
            credentials.credentials,
            settings.NEXTAUTH_SECRET,
            algorithms=["HS256"],
        )
    except JWTError as e:
        logger.error(f"[AUTH] JWT validation failed: {type(e).__name__}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Could not validate credentials: {str(e)}",
        )

    user_id = payload.get("sub")
    if user_id is None:
        logger.error("[AUTH] JWT payload missing 'sub' claim")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
        )

    return str(user_id)
