"""
Account operations: list, fetch, create, update, upsert and authenticate.

Every operation returns a tagged result (`Success` or `Failure`) holding
the HTTP status and the JSON body, so routes only have to render it.
Failures always carry a non-2xx status matched to their kind.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union
import logging
import secrets

from pydantic import ValidationError
from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError

from .auth import TokenIssuer, TokenSigningError, check_password, hash_password, verify_password
from .schemas import UserCreate, UserUpdate
from .store import UserStore

logger = logging.getLogger(__name__)

USER_NOT_FOUND = "The user doesn't exist in our records"
STORE_ERROR = "Database error"


@dataclass(frozen=True)
class Success:
    status_code: int
    body: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    status_code: int
    body: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return False


Result = Union[Success, Failure]


def store_error_detail(exc: SQLAlchemyError) -> str:
    """
    Client-facing text for a store error.

    Only the driver message is exposed; the SQL statement and its bound
    parameters (which can hold password hashes) stay in the server log.
    """
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        return str(exc.orig)
    return STORE_ERROR


def describe_validation_error(exc: ValidationError) -> str:
    """Flatten a pydantic ValidationError into a single readable line."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        parts.append(f"{location}: {error['msg']}" if location else error["msg"])
    return "; ".join(parts)


class AccountService:
    """
    Orchestrates validation, store access and token issuance.

    Args:
        store: UserStore bound to the request's session
        token_issuer: TokenIssuer holding the signing secret
        password_min_length: Minimum accepted password length
    """

    def __init__(self, store: UserStore, token_issuer: TokenIssuer, password_min_length: int = 6):
        self.store = store
        self.token_issuer = token_issuer
        self.password_min_length = password_min_length

    def _rollback(self) -> None:
        try:
            self.store.db.rollback()
        except SQLAlchemyError as e:
            logger.error("Session rollback failed: %s", e)

    @staticmethod
    def _token_failure(exc: TokenSigningError) -> Failure:
        logger.error("Token issuance failed: %s", exc)
        return Failure(500, {"errors": [{"title": "Can't issue the token", "detail": str(exc)}]})

    @staticmethod
    def _create_failure(detail: str) -> Failure:
        return Failure(400, {"errors": [{"title": "Can't create the user", "detail": detail}]})

    @staticmethod
    def _update_failure(status_code: int, err: str) -> Failure:
        return Failure(status_code, {"message": "Could not update the user", "err": err})

    def list_users(self) -> Result:
        try:
            users = self.store.find_all()
        except SQLAlchemyError as e:
            self._rollback()
            logger.error("Could not list users: %s", e)
            return Failure(500, {"message": "Could not get users", "err": store_error_detail(e)})

        return Success(200, {
            "message": "It works! We got all users",
            "result": [user.to_dict() for user in users],
            "status": 200
        })

    def get_user(self, username: str) -> Result:
        """Look up one user; a missing user is a null result, not an error."""
        try:
            user = self.store.find_one(username)
        except SQLAlchemyError as e:
            self._rollback()
            logger.error("Could not fetch user %s: %s", username, e)
            return Failure(500, {"message": "Could not fetch user", "err": store_error_detail(e)})

        return Success(200, {
            "message": "Successfully fetched the user",
            "result": user.to_dict() if user else None,
            "status": 200
        })

    def create_user(self, payload: Dict[str, Any]) -> Result:
        """
        Validate, hash the password, persist the user and issue its token.

        Returns:
            201 with {data: {type, user, id, token, status}},
            403 with accumulated validation errors,
            400 when the username is taken or the store rejects the record,
            500 when the token cannot be signed
        """
        errors = check_password(payload.get("password"), self.password_min_length)
        if errors:
            return Failure(403, {"errors": errors})

        try:
            data = UserCreate.model_validate(payload)
        except ValidationError as e:
            return self._create_failure(describe_validation_error(e))

        fields = data.model_dump(exclude_none=True)
        fields["password"] = hash_password(data.password)

        try:
            if self.store.find_one(data.username) is not None:
                logger.info("Rejected duplicate username %s", data.username)
                return self._create_failure("Username already exists")
            user = self.store.create(fields)
        except IntegrityError as e:
            # Lost a race against a concurrent create of the same username
            logger.info("Integrity error creating %s: %s", data.username, e.orig)
            return self._create_failure("Username already exists")
        except SQLAlchemyError as e:
            logger.error("Could not create user %s: %s", data.username, e)
            return self._create_failure(store_error_detail(e))

        try:
            token = self.token_issuer.issue(user)
        except TokenSigningError as e:
            return self._token_failure(e)

        return Success(201, {
            "data": {
                "type": "user",
                "user": user.to_dict(),
                "id": user.id,
                "token": token,
                "status": 201
            }
        })

    def _update(self, username: str, payload: Dict[str, Any], upsert: bool) -> Result:
        try:
            data = UserUpdate.model_validate(payload)
        except ValidationError as e:
            return self._update_failure(400, describe_validation_error(e))

        changes = {key: value for key, value in data.model_dump().items() if key in payload}
        defaults = {}
        if "password" in changes:
            errors = check_password(changes["password"], self.password_min_length)
            if errors:
                return self._update_failure(400, errors[0]["detail"])
            changes["password"] = hash_password(changes["password"])
        elif upsert:
            # Records created by upsert get an unusable random password
            defaults["password"] = hash_password(secrets.token_urlsafe(32))

        try:
            user = self.store.find_one_and_update(username, changes, upsert=upsert, defaults=defaults)
        except SQLAlchemyError as e:
            logger.error("Could not update user %s: %s", username, e)
            return self._update_failure(500, store_error_detail(e))

        if user is None:
            return self._update_failure(404, USER_NOT_FOUND)

        return Success(200, {
            "message": "Successfully updated the user",
            "result": user.to_dict(),
            "status": 200
        })

    def update_user(self, username: str, payload: Dict[str, Any]) -> Result:
        """Merge fields into an existing user; 404 when it does not exist."""
        return self._update(username, payload, upsert=False)

    def upsert_user(self, username: str, payload: Dict[str, Any]) -> Result:
        """Merge fields into a user, creating the record when it does not exist."""
        return self._update(username, payload, upsert=True)

    def authenticate(self, payload: Dict[str, Any]) -> Result:
        """
        Check a username/password pair and issue a token on success.

        Returns:
            201 with {data: {type, id, attributes: {email}, token, status}},
            403 with accumulated validation errors,
            400 when the user is unknown or the password does not match,
            500 on store or signing failure
        """
        username: Optional[str] = payload.get("username")
        password = payload.get("password")

        errors = check_password(password, self.password_min_length)
        if errors:
            return Failure(403, {"errors": errors})

        try:
            user = self.store.find_one(username) if isinstance(username, str) else None
        except SQLAlchemyError as e:
            self._rollback()
            logger.error("Could not look up user %s: %s", username, e)
            return Failure(500, {"errors": [{"title": "Can't login user", "detail": store_error_detail(e)}]})

        if user is None:
            return Failure(400, {"errors": [{"title": "Invalid attribute", "detail": USER_NOT_FOUND}]})

        try:
            is_match = verify_password(password, user.password)
        except (ValueError, TypeError) as e:
            logger.warning("Password comparison failed for user_id=%s: %s", user.id, e)
            errors.append({"title": "Can't login user", "detail": "Error comparing the password"})
            is_match = False

        if not is_match:
            errors.append({"title": "Can't login user", "detail": "The password doesn't match"})
        if errors:
            return Failure(400, {"errors": errors})

        try:
            token = self.token_issuer.issue(user)
        except TokenSigningError as e:
            return self._token_failure(e)

        return Success(201, {
            "data": {
                "type": "users",
                "id": user.id,
                "attributes": {"email": user.email},
                "token": token,
                "status": 201
            }
        })
