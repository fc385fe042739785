"""
Admin authentication for the back-office API.

Admin routes accept a shared admin key, with a dev mode bypass when no
keys are configured.
"""

from typing import Optional

from fastapi import HTTPException, Header, Depends

from backend.config import config


def get_admin_key(
    x_admin_key: Optional[str] = Header(None, alias="X-Admin-Key"),
    authorization: Optional[str] = Header(None)
) -> Optional[str]:
    """
    Extract the admin key from headers.
    Supports both X-Admin-Key header and Bearer token.
    """
    if x_admin_key:
        return x_admin_key

    if authorization and authorization.startswith("Bearer "):
        return authorization[7:]

    return None


async def verify_admin_key(api_key: Optional[str] = Depends(get_admin_key)) -> str:
    """
    Verify admin authentication.

    Returns the key, or "dev" when authentication is bypassed.
    """
    if not config.auth_required:
        return "dev"

    if not api_key:
        raise HTTPException(
            status_code=401,
            detail="Admin key required. Provide X-Admin-Key header or Bearer token.",
            headers={"WWW-Authenticate": "Bearer"}
        )

    if api_key not in config.admin_keys_list:
        raise HTTPException(status_code=403, detail="Invalid admin key")

    return api_key


# Convenience dependency for routes that require auth
require_admin = Depends(verify_admin_key)
