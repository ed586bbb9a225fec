"""
User record store backed by SQLAlchemy.

Thin wrapper over a session exposing the document-style operations the
account service needs: create, find one, find all, find-one-and-update.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

from sqlalchemy.orm import Session

from .models import User

logger = logging.getLogger(__name__)

# Request keys that map onto real columns
COLUMN_FIELDS = {"username": "username", "password": "password", "email": "email", "oauthId": "oauth_id"}

# Keys the store owns; silently dropped from incoming documents
RESERVED_FIELDS = {"id", "_id", "createdAt", "modifiedAt"}


def _split_fields(fields: Dict[str, Any]) -> tuple[dict, dict]:
    columns, extra = {}, {}
    for key, value in fields.items():
        if key in RESERVED_FIELDS:
            continue
        if key in COLUMN_FIELDS:
            columns[COLUMN_FIELDS[key]] = value
        else:
            extra[key] = value
    return columns, extra


class UserStore:
    def __init__(self, db: Session):
        self.db = db

    def create(self, fields: Dict[str, Any]) -> User:
        """
        Insert a new user record.

        `fields` must already carry a hashed password. Unknown keys are
        kept in the record's free-form `extra` document.
        """
        columns, extra = _split_fields(fields)
        now = datetime.utcnow()
        user = User(**columns, extra=extra, created_at=now, modified_at=now)
        try:
            self.db.add(user)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(user)
        logger.debug("Created user id=%s username=%s", user.id, user.username)
        return user

    def find_one(self, username: str) -> Optional[User]:
        return self.db.query(User).filter(User.username == username).first()

    def find_all(self) -> List[User]:
        return self.db.query(User).order_by(User.id.asc()).all()

    def find_one_and_update(
        self,
        username: str,
        fields: Dict[str, Any],
        upsert: bool = False,
        defaults: Optional[Dict[str, Any]] = None
    ) -> Optional[User]:
        """
        Merge `fields` into the record named `username` and return the updated record.

        `modified_at` is always set to the current time. When no record
        matches, returns None, or inserts a new record built from `fields`
        if `upsert` is set. A `username` key in `fields` never renames the
        record.

        Args:
            username: Exact username to match
            fields: Document fields to merge (password already hashed)
            upsert: Create the record when it does not exist
            defaults: Fields applied only when upsert inserts a new record

        Returns:
            The post-update User, or None when absent and not upserting
        """
        fields = {k: v for k, v in fields.items() if k != "username"}
        user = self.find_one(username)
        if user is None:
            if not upsert:
                return None
            return self.create({**(defaults or {}), **fields, "username": username})

        columns, extra = _split_fields(fields)
        for column, value in columns.items():
            setattr(user, column, value)
        if extra:
            # Reassign so the JSON column is flagged dirty
            user.extra = {**(user.extra or {}), **extra}
        user.modified_at = datetime.utcnow()
        try:
            self.db.add(user)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(user)
        return user

    def delete_all(self) -> int:
        """Remove every user record. Used by test teardown only."""
        count = self.db.query(User).delete()
        self.db.commit()
        return count
