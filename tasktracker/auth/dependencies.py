from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from tasktracker.auth.auth_utils import decode_access_token
from tasktracker.database.session import get_db
from tasktracker.database.store import SqlEntityStore
from tasktracker.errors import NotAuthenticated

security = HTTPBearer(auto_error=False)


def get_store(db: Session = Depends(get_db)) -> SqlEntityStore:
    """
    Dependency providing the entity store bound to the request's session.
    """
    return SqlEntityStore(db)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    store: SqlEntityStore = Depends(get_store),
) -> str:
    """
    Dependency resolving the acting member's id from the bearer token.

    Returns:
        str: The authenticated member's user id

    Raises:
        NotAuthenticated: If the token is missing, invalid or names no profile
    """
    if credentials is None:
        raise NotAuthenticated()

    user_id = decode_access_token(credentials.credentials)
    if not user_id:
        raise NotAuthenticated()

    if not store.find_one("profile", {"user_id": user_id}):
        raise NotAuthenticated()

    return user_id
