"""Authentication routes."""
from fastapi import APIRouter, Depends

from auth.models import RequesterIdentity
from auth.services import get_current_identity

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.get("/me", response_model=RequesterIdentity)
def me(identity: RequesterIdentity = Depends(get_current_identity)):
    """Return the identity carried by the bearer token."""
    return identity
