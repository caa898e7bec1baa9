"""
Identity Service

Resolves the current username from a bearer token issued by the hosting
platform. There are no accounts or passwords here; the token's
`username` claim is trusted once its signature checks out.
"""

import datetime
from typing import Optional

import jwt

from ..errors import IdentityError

ANONYMOUS_USERNAME = 'anonymous'


class IdentityService:
    """
    Verifies HS256 tokens and extracts the username claim.
    """

    def __init__(self, jwt_secret: Optional[str], allow_anonymous: bool = True):
        """
        Args:
            jwt_secret: Shared secret used to sign tokens
            allow_anonymous: Whether requests without a token play as "anonymous"
        """
        self.jwt_secret = jwt_secret
        self.allow_anonymous = allow_anonymous

    def issue_token(self, username: str, expires_in_days: int = 7) -> str:
        """
        Mint a token for a username.

        Args:
            username: Display name as known to the host platform
            expires_in_days: Token lifetime

        Returns:
            Encoded JWT
        """
        if not self.jwt_secret:
            raise IdentityError("Token signing is not configured")
        if not username or not username.strip():
            raise IdentityError("Username is required")

        now = datetime.datetime.now(datetime.timezone.utc)
        payload = {
            "username": username.strip(),
            "iat": now,
            "exp": now + datetime.timedelta(days=expires_in_days),
        }
        return jwt.encode(payload, self.jwt_secret, algorithm="HS256")

    def verify_token(self, token: str) -> str:
        """
        Verify a token and return its username.

        Raises:
            IdentityError: If the token is expired, tampered with or has no username
        """
        if not self.jwt_secret:
            raise IdentityError("Token verification is not configured")

        try:
            payload = jwt.decode(token, self.jwt_secret, algorithms=["HS256"])
        except jwt.ExpiredSignatureError:
            raise IdentityError("Token has expired")
        except jwt.InvalidTokenError:
            raise IdentityError("Invalid token")

        username = payload.get("username")
        if not isinstance(username, str) or not username.strip():
            raise IdentityError("Invalid token payload")
        return username.strip()

    def resolve_username(self, auth_header: Optional[str]) -> str:
        """Username for an Authorization header value (may be None)."""
        if not auth_header:
            if self.allow_anonymous:
                return ANONYMOUS_USERNAME
            raise IdentityError("Authorization token required")

        if not auth_header.startswith('Bearer '):
            raise IdentityError("Authorization header must use the Bearer scheme")

        return self.verify_token(auth_header.split(' ', 1)[1].strip())


# Global service instance
_identity_service = None


def get_identity_service() -> Optional[IdentityService]:
    """Get the global identity service instance."""
    return _identity_service


def initialize_identity_service(jwt_secret: Optional[str], allow_anonymous: bool = True) -> IdentityService:
    """Initialize the global identity service instance."""
    global _identity_service
    _identity_service = IdentityService(jwt_secret, allow_anonymous)
    return _identity_service
