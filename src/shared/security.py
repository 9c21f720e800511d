# src/shared/security.py

from dataclasses import dataclass
from typing import Any, Dict, Optional

import jwt

from src.config import Settings, get_settings
from src.shared.exceptions import InvalidTokenError


@dataclass(frozen=True)
class TokenClaims:
    """Claims this API relies on: the acting user id and the role used for admin gating."""
    sub: str
    role: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "TokenClaims":
        sub = payload.get("sub", payload.get("id"))
        if sub is None:
            raise InvalidTokenError(details={"reason": "missing subject"})
        role = payload.get("role")
        return cls(sub=str(sub), role=str(role) if role is not None else None)


def decode_token(token: str, settings: Optional[Settings] = None) -> Dict[str, Any]:
    """
    Decode and verify a JWT token.

    Args:
        token: The JWT token string to decode
        settings: secret and algorithm source; the process settings when omitted

    Returns:
        Dictionary containing the token payload

    Raises:
        InvalidTokenError: If token is invalid, expired, or malformed
    """
    settings = settings or get_settings()
    try:
        # numeric subjects are normalised by TokenClaims.from_payload
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"verify_sub": False},
        )
    except jwt.ExpiredSignatureError:
        raise InvalidTokenError(details={"reason": "Token has expired"})
    except jwt.InvalidTokenError as e:
        raise InvalidTokenError(details={"reason": str(e)})


def decode_claims(token: str, settings: Optional[Settings] = None) -> TokenClaims:
    return TokenClaims.from_payload(decode_token(token, settings))
