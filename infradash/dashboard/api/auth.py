from fastapi import Header, HTTPException, Request, status

from models import Viewer

_USER_HEADER = "X-User-Id"
_TIMEZONE_HEADER = "X-User-Timezone"


def current_viewer(
    request: Request,
    x_user_id: str | None = Header(default=None, alias=_USER_HEADER, max_length=128),
    x_user_timezone: str | None = Header(
        default=None, alias=_TIMEZONE_HEADER, max_length=64
    ),
) -> Viewer:
    """Viewer identity forwarded by the authenticating proxy in front of us."""

    user_id = (x_user_id or "").strip()
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Missing {_USER_HEADER} header",
        )

    timezone = (x_user_timezone or "").strip()
    if not timezone:
        timezone = request.app.state.settings.default_timezone
    return Viewer(user_id=user_id, timezone=timezone)
