"""
FastAPI dependencies wiring the account service together.
"""
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from .auth import TokenIssuer
from .config import settings
from .db import get_db
from .service import AccountService
from .store import UserStore


@lru_cache
def get_token_issuer() -> TokenIssuer:
    """Token issuer built once per process from the startup settings."""
    return TokenIssuer(
        secret=settings.SECRET,
        algorithm=settings.TOKEN_ALGORITHM,
        scheme=settings.TOKEN_SCHEME
    )


def get_account_service(
    db: Session = Depends(get_db),
    token_issuer: TokenIssuer = Depends(get_token_issuer)
) -> AccountService:
    return AccountService(
        store=UserStore(db),
        token_issuer=token_issuer,
        password_min_length=settings.PASSWORD_MIN_LENGTH
    )
