from fastapi import APIRouter, Depends, Header

from formsmith.exceptions import AuthenticationError
from formsmith.storage import FormStore, get_store


def _bearer_token(authorization: str | None) -> str:
    if not authorization:
        raise AuthenticationError("Missing Authorization header. Sign in and send 'Bearer <access token>'.")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Authorization header must be 'Bearer <access token>'.")
    return token.strip()


def get_current_user(
    authorization: str | None = Header(default=None),
    store: FormStore = Depends(get_store),
) -> str:
    """FastAPI dependency: resolve the bearer token to the signed-in user's id."""
    return store.resolve_user(_bearer_token(authorization))


# --- Auth router ---

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me")
def whoami(user_id: str = Depends(get_current_user)) -> dict:
    return {"user_id": user_id}
