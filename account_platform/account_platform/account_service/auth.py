from collections.abc import Sized
from passlib.context import CryptContext
from typing import Optional
import jwt

ALGORITHM = "HS256"
TOKEN_SCHEME = "JWT"

# Use pbkdf2_sha256 to avoid external bcrypt backend issues in some environments
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class TokenSigningError(Exception):
    """Raised when a token cannot be signed or read back."""


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def check_password(password, min_length: int = 6) -> list[dict]:
    """
    Check a submitted password against the account rules.

    Problems are accumulated rather than short-circuited so the caller
    can report all of them at once.

    Args:
        password: Raw value from the request body (may be missing)
        min_length: Minimum number of characters

    Returns:
        List of {title, detail} error dictionaries, empty when valid
    """
    errors = []
    if not password:
        errors.append({"title": "Attribute is missing", "detail": "No password specified"})
    elif isinstance(password, Sized) and len(password) < min_length:
        errors.append({
            "title": "Invalid attribute",
            "detail": f"Password must contain at least {min_length} characters"
        })
    return errors


class TokenIssuer:
    """
    Signs stateless bearer tokens carrying a user's id and email.

    The secret is handed in once and never read from the environment
    here, so tests can build issuers with their own secrets.
    """

    def __init__(self, secret: Optional[str], algorithm: str = ALGORITHM, scheme: str = TOKEN_SCHEME):
        self.secret = secret
        self.algorithm = algorithm
        self.scheme = scheme

    @staticmethod
    def claims_for(user) -> dict:
        return {"id": user.id, "email": user.email}

    def issue(self, user) -> str:
        """
        Build the claims for a user and return the prefixed, signed token.

        Raises:
            TokenSigningError: If no secret is configured or signing fails
        """
        if not self.secret:
            raise TokenSigningError("No signing secret configured")
        try:
            token = jwt.encode(self.claims_for(user), self.secret, algorithm=self.algorithm)
        except jwt.PyJWTError as e:
            raise TokenSigningError(str(e)) from e
        return f"{self.scheme} {token}"

    def decode(self, token: str) -> dict:
        """Return the claims of a token issued by `issue`, with or without the scheme prefix."""
        if not self.secret:
            raise TokenSigningError("No signing secret configured")
        prefix = f"{self.scheme} "
        if token.startswith(prefix):
            token = token[len(prefix):]
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.PyJWTError as e:
            raise TokenSigningError(str(e)) from e
