from pydantic import BaseModel, ConfigDict, Field, StrictStr

from typing import Annotated, Any, Dict, List, Optional

# Bounded to what the oauth_id INTEGER column can store
OAuthId = Annotated[int, Field(ge=-2**63, le=2**63 - 1)]


class UserCreate(BaseModel):
    username: StrictStr = Field(min_length=1)
    password: StrictStr
    email: Optional[StrictStr] = None
    oauthId: Optional[OAuthId] = None

    # Anything else is stored as a free-form field
    model_config = ConfigDict(extra="allow")


class UserUpdate(BaseModel):
    email: Optional[StrictStr] = None
    oauthId: Optional[OAuthId] = None
    password: Optional[StrictStr] = None

    model_config = ConfigDict(extra="allow")


class ErrorItem(BaseModel):
    title: str
    detail: str


class ErrorList(BaseModel):
    errors: List[ErrorItem]


class UserResult(BaseModel):
    message: str
    result: Optional[Dict[str, Any]] = None
    status: int


class UserListResult(BaseModel):
    message: str
    result: List[Dict[str, Any]]
    status: int


class MessageError(BaseModel):
    message: str
    err: str
