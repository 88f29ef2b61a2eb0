from dataclasses import dataclass
from uuid import UUID

from fastapi import Depends, Header, HTTPException


STAFF_ROLES = frozenset({"admin", "collector"})


@dataclass(frozen=True)
class AuthContext:
    user_id: UUID
    role: str

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES


def get_auth_context(
    x_user_id: str | None = Header(default=None, alias="X-User-Id"),
    x_user_role: str | None = Header(default=None, alias="X-User-Role"),
) -> AuthContext:
    # identity is resolved by the upstream auth layer; trusted as given
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing user context. Provide X-User-Id header.")
    try:
        user_id = UUID(x_user_id)
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid X-User-Id header")

    return AuthContext(user_id=user_id, role=(x_user_role or "user").strip().lower())


def require_staff(ctx: AuthContext = Depends(get_auth_context)) -> AuthContext:
    if not ctx.is_staff:
        raise HTTPException(status_code=403, detail="Forbidden")
    return ctx


def require_admin(ctx: AuthContext = Depends(get_auth_context)) -> AuthContext:
    if ctx.role != "admin":
        raise HTTPException(status_code=403, detail="Forbidden")
    return ctx
