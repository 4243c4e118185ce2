"""Webhook signature tokens."""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import structlog
from jose import JWTError, jwt

from hookgate.config import Settings, settings as default_settings
from hookgate.exceptions import AuthenticationError

logger = structlog.get_logger()


class SignatureVerifier:
    """Verifies and issues the JWT tokens sent in the signature header."""

    def __init__(
        self,
        secret_key: Optional[str] = None,
        algorithm: Optional[str] = None,
        test_token_expire_hours: Optional[int] = None,
    ):
        self.secret_key = secret_key or default_settings.secret_key
        self.algorithm = algorithm or default_settings.algorithm
        self.test_token_expire_hours = (
            test_token_expire_hours or default_settings.test_token_expire_hours
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "SignatureVerifier":
        return cls(
            secret_key=settings.secret_key,
            algorithm=settings.algorithm,
            test_token_expire_hours=settings.test_token_expire_hours,
        )

    def authenticate(self, token: Optional[str]) -> Dict[str, Any]:
        """Decode a signature token or raise AuthenticationError."""
        if not token:
            raise AuthenticationError("missing signature")

        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            raise AuthenticationError(str(e)) from e

    def decode(self, token: str) -> Optional[Dict[str, Any]]:
        """Decode a token, returning None if it is malformed, forged or expired."""
        try:
            return self.authenticate(token)
        except AuthenticationError as e:
            logger.debug("Signature rejected", reason=e.reason)
            return None

    def verify(self, token: Optional[str]) -> bool:
        """Check whether a signature token is valid."""
        return self.decode(token or "") is not None

    def create_test_token(
        self,
        data: Optional[Dict[str, Any]] = None,
        expires_delta: Optional[timedelta] = None,
    ) -> str:
        """Create a signed token for exercising the webhook endpoint."""
        to_encode = {"test": True}
        if data:
            to_encode.update(data)

        now = datetime.now(timezone.utc)
        expire = now + (expires_delta or timedelta(hours=self.test_token_expire_hours))
        to_encode.update({"iat": now, "exp": expire})

        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def get_token_expiry(self, token: str) -> Optional[datetime]:
        """Get token expiration datetime."""
        payload = self.decode(token)
        if payload is None or "exp" not in payload:
            return None
        return datetime.fromtimestamp(payload["exp"], timezone.utc)
