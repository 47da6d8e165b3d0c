"""
JWT session token service.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from uuid import uuid4

from jose import JWTError, jwt

SESSION_TOKEN_TYPE = "session"


@dataclass
class SessionIdentity:
    """Verified contents of a session token."""

    user_id: str  # Subject
    role: str
    jti: str  # Unique per issuance
    issued_at: datetime
    expires_at: datetime
    phone: str | None = None
    email: str | None = None


class TokenService:
    """Service for issuing and resolving signed session tokens."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        session_expire_minutes: int = 120,
    ):
        """
        Initialize the token service.

        Args:
            secret_key: Secret key for signing tokens
            algorithm: JWT algorithm (default: HS256)
            session_expire_minutes: Session lifetime in minutes
        """
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._session_expire_minutes = session_expire_minutes

    @property
    def session_lifetime_seconds(self) -> int:
        return self._session_expire_minutes * 60

    def issue_session(
        self,
        user_id: str,
        role: str,
        phone: str | None = None,
        email: str | None = None,
    ) -> str:
        """
        Create a signed session token.

        Args:
            user_id: User ID to encode in the token
            role: User role claim
            phone: Phone contact claim (readers)
            email: Email contact claim (staff)

        Returns:
            Encoded JWT session token
        """
        now = datetime.now(UTC)
        expire = now + timedelta(minutes=self._session_expire_minutes)

        payload = {
            "sub": user_id,
            "role": role,
            "jti": uuid4().hex,
            "iat": now,
            "exp": expire,
            "type": SESSION_TOKEN_TYPE,
        }
        if phone:
            payload["phone"] = phone
        if email:
            payload["email"] = email

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def resolve_session(self, token: str | None) -> SessionIdentity | None:
        """
        Verify a session token.

        Any failure (bad signature, expiry, wrong type, missing claims or
        garbage input) yields None; callers treat that as "no session".

        Args:
            token: Encoded token, possibly None

        Returns:
            SessionIdentity if valid, None otherwise
        """
        if not token:
            return None
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
            )

            required_fields = ["sub", "exp", "role", "jti", "type"]
            for field in required_fields:
                if field not in payload:
                    raise JWTError(f"Missing required field: {field}")
            if payload["type"] != SESSION_TOKEN_TYPE:
                raise JWTError("Not a session token")

            return SessionIdentity(
                user_id=payload["sub"],
                role=payload["role"],
                jti=payload["jti"],
                issued_at=datetime.fromtimestamp(payload.get("iat", 0), tz=UTC),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=UTC),
                phone=payload.get("phone"),
                email=payload.get("email"),
            )
        except (JWTError, TypeError, ValueError):
            return None
