from sqlalchemy import Column, Integer, String, DateTime, JSON
from datetime import datetime
from .db import Base


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    password = Column(String, nullable=False)
    email = Column(String, nullable=True)
    oauth_id = Column(Integer, nullable=True)
    # Free-form fields passed through create/update without a column of their own
    extra = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    modified_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username})>"

    def to_dict(self) -> dict:
        """
        Serialize User to a dictionary for API responses.

        The password hash is never included. Free-form fields are merged
        at top level and cannot shadow the named fields.

        Returns:
            Dictionary with the record fields, datetimes in ISO 8601 format
        """
        data = dict(self.extra or {})
        data.update({
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "oauthId": self.oauth_id,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "modifiedAt": self.modified_at.isoformat() if self.modified_at else None,
        })
        return data
