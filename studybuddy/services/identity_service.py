import logging
from typing import Optional

import httpx

from studybuddy import config
from studybuddy.utils.errors import UpstreamError

logger = logging.getLogger("identity_service")
logging.basicConfig(level=logging.INFO)


def get_identity_transport() -> Optional[httpx.BaseTransport]:
    """Transport for identity-provider admin calls; ``None`` means the network."""
    return None


def delete_auth_user(user_id: str, transport: Optional[httpx.BaseTransport] = None) -> None:
    """Remove the user from the hosted identity provider (admin API)."""
    key = config.AUTH_SERVICE_ROLE_KEY
    if not config.AUTH_URL or not key:
        logger.error("AUTH_URL / AUTH_SERVICE_ROLE_KEY are not configured")
        raise UpstreamError("Failed to delete user account")

    url = f"{config.AUTH_URL}/auth/v1/admin/users/{user_id}"
    try:
        with httpx.Client(transport=transport, timeout=10.0) as client:
            resp = client.delete(url, headers={"Authorization": f"Bearer {key}", "apikey": key})
    except httpx.HTTPError as e:
        logger.error(f"Error deleting auth user {user_id}: {e!r}")
        raise UpstreamError("Failed to delete user account")

    if not resp.is_success:
        logger.error(f"Error deleting auth user {user_id}: {resp.status_code} {resp.text[:300]}")
        raise UpstreamError("Failed to delete user account")

    logger.info(f"Deleted auth user {user_id}")
