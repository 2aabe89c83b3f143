from fastapi import Header, HTTPException, Request
from crossbridge.settings import settings


def require_api_key(x_api_key: str = Header(default="", alias="x-api-key")):
    """
    API key is optional.
    - If API_KEY env is empty: allow all requests.
    - If API_KEY env is set: require matching x-api-key header.
    """
    if not getattr(settings, "API_KEY", ""):
        return
    if x_api_key != settings.API_KEY:
        raise HTTPException(status_code=401, detail="Invalid API key")


def require_admin(x_admin_key: str = Header(default="", alias="x-admin-key")):
    if not settings.ADMIN_RBAC_ENABLED:
        return
    # Secure default: if enabled but no key configured, reject all.
    if not settings.ADMIN_API_KEY:
        raise HTTPException(status_code=403, detail="Admin access disabled (no key configured)")
    if x_admin_key != settings.ADMIN_API_KEY:
        raise HTTPException(status_code=403, detail="Invalid admin key")


def caller_identity(request: Request) -> str:
    """
    Authenticated caller, as asserted by the fronting gateway. The lifecycle
    never looks up identity on its own.
    """
    caller = (request.headers.get(settings.CALLER_HEADER) or "").strip()
    if not caller:
        raise HTTPException(status_code=401, detail=f"Missing {settings.CALLER_HEADER} header")
    return caller


def attached_value(request: Request) -> int:
    """Value attached to the call, in smallest units. Absent means 0."""
    raw = (request.headers.get(settings.ATTACHED_VALUE_HEADER) or "").strip()
    if not raw:
        return 0
    if not (raw.isascii() and raw.isdigit()):
        raise HTTPException(
            status_code=400,
            detail=f"{settings.ATTACHED_VALUE_HEADER} must be a non-negative integer",
        )
    return int(raw)
