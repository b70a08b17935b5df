"""Authentication module."""
from auth.models import RequesterIdentity
from auth.services import (
    create_access_token,
    decode_token,
    identity_from_claims,
    get_current_identity
)

__all__ = [
    "RequesterIdentity",
    "create_access_token",
    "decode_token",
    "identity_from_claims",
    "get_current_identity"
]
