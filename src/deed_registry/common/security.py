"""API key and acting-user dependencies."""

from fastapi import Header, HTTPException


async def require_api_key(
    x_registry_api_key: str = Header(..., alias="X-Registry-Api-Key"),
) -> str:
    """FastAPI dependency that validates the registrar API key from header."""
    from deed_registry.common.config import get_settings

    settings = get_settings()
    if x_registry_api_key != settings.api_key:
        raise HTTPException(status_code=403, detail="Invalid API key")
    return x_registry_api_key


async def resolve_actor(
    x_registry_user: str | None = Header(None, alias="X-Registry-User"),
) -> str:
    """Acting-user label for audit entries.

    Falls back to the configured default label when the caller does not
    identify itself.
    """
    from deed_registry.common.config import get_settings

    if x_registry_user and x_registry_user.strip():
        return x_registry_user.strip()
    return get_settings().default_actor
