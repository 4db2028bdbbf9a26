import logging
from typing import Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt

from studybuddy import config
from studybuddy.utils.errors import AuthError

# Logger setup
logger = logging.getLogger("jwt_handler")
logging.basicConfig(level=logging.INFO)

#---- security scheme, errors are raised by us so the body stays {"error": ...} --#
security = HTTPBearer(auto_error=False)


# --- verification of tokens issued by the identity provider ----#
def verify_token(token: str) -> Dict[str, str]:
    try:
        payload = jwt.decode(
            token,
            config.JWT_SECRET,
            algorithms=[config.JWT_ALG],
            audience=config.JWT_AUDIENCE,
        )
    except JWTError as e:
        logger.warning(f"Authentication failed: {e}")
        raise AuthError("Invalid or expired authentication")

    user_id = payload.get("sub")
    if not user_id:
        logger.warning("Authentication failed: token has no subject")
        raise AuthError("Invalid or expired authentication")

    return {
        "user_id": str(user_id),
        "email": payload.get("email") or "",
        "role": payload.get("role", "authenticated"),
    }


# Dependency for protected routes---#
def require_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Dict[str, str]:
    if credentials is None or not credentials.credentials:
        logger.warning("Missing Authorization header")
        raise AuthError("Authentication required")
    return verify_token(credentials.credentials)
