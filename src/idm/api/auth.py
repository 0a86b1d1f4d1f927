"""
Bearer JWT verification and role checks.

Tokens are issued by the identity provider (Keycloak); this service only
verifies the signature and expiry with the configured key and reads the realm
roles from the `realm_access.roles` claim.

Usage:
    @router.delete("/{id}", dependencies=[Depends(require_role(IDM_ADMIN))])
"""
import logging
from typing import Any

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt

from idm.config.settings import Settings
from idm.exceptions import AuthenticationError, PermissionDeniedError

logger = logging.getLogger(__name__)

IDM_ADMIN = "IDM_ADMIN"
IDM_USER = "IDM_USER"

bearer_scheme = HTTPBearer(auto_error=False)


class TokenVerifier:
    """Decode and verify access tokens with a fixed key."""

    def __init__(self, key: str | None, algorithms: list[str], audience: str | None = None):
        self.key = key
        self.algorithms = algorithms
        self.audience = audience

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenVerifier":
        return cls(settings.JWT_KEY, settings.jwt_algorithms, settings.JWT_AUDIENCE)

    def decode(self, token: str) -> dict[str, Any]:
        """
        Return the verified claims of `token`.

        Raises:
            AuthenticationError: no key configured, bad signature, malformed
                token, wrong audience or expired.
        """
        if not self.key:
            logger.error("auth.key_missing")
            raise AuthenticationError("token verification is not configured")

        try:
            return jwt.decode(
                token,
                self.key,
                algorithms=self.algorithms,
                audience=self.audience,
                options={"verify_aud": self.audience is not None},
            )
        except ExpiredSignatureError as exc:
            raise AuthenticationError("token expired") from exc
        except JWTError as exc:
            logger.info("auth.invalid_token", extra={"reason": str(exc)})
            raise AuthenticationError("invalid token") from exc


def extract_roles(claims: dict[str, Any]) -> set[str]:
    realm_access = claims.get("realm_access") or {}
    roles = realm_access.get("roles") or []
    return {role for role in roles if isinstance(role, str)}


async def get_current_claims(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> dict[str, Any]:
    if credentials is None:
        raise AuthenticationError("missing bearer token")
    verifier: TokenVerifier = request.app.state.token_verifier
    return verifier.decode(credentials.credentials)


def require_role(role: str):
    """Dependency factory: the caller's token must carry `role`."""

    async def _check(claims: dict[str, Any] = Depends(get_current_claims)) -> dict[str, Any]:
        if role not in extract_roles(claims):
            logger.info("auth.forbidden", extra={"required_role": role, "subject": claims.get("sub")})
            raise PermissionDeniedError(f"role {role} is required")
        return claims

    return _check


require_admin = require_role(IDM_ADMIN)
require_user = require_role(IDM_USER)
