import logging
from typing import Annotated, Optional

from fastapi import Request, Depends, HTTPException
from firebase_admin.auth import verify_id_token

from models.user import User
from services.posts import PostsService

logger = logging.getLogger(__name__)


def _verify_bearer_token(authorization: str) -> User:
    token = authorization.split("Bearer ")[1]
    try:
        # Verify the Firebase ID token
        decoded_token = verify_id_token(token, check_revoked=True, clock_skew_seconds=10)
        return User(
            user_id=decoded_token["uid"],
            email=decoded_token.get("email"),
        )
    except Exception as e:
        logger.warning("Invalid authentication token: %s", e)
        raise HTTPException(
            status_code=401,
            detail=f"Invalid authentication token: {str(e)}"
        )


async def get_current_user(request: Request) -> User:
    """
    Verify Firebase ID token from Authorization header and return user info
    """
    authorization = request.headers.get("Authorization")
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=401,
            detail="Invalid authorization header"
        )
    return _verify_bearer_token(authorization)


async def get_optional_user(request: Request) -> Optional[User]:
    """Same as get_current_user, but anonymous callers resolve to None"""
    authorization = request.headers.get("Authorization")
    if not authorization or not authorization.startswith("Bearer "):
        return None
    return _verify_bearer_token(authorization)


async def get_posts_service(request: Request) -> PostsService:
    """Get posts service from app state"""
    return request.app.state.posts_service


CurrentUser = Annotated[User, Depends(get_current_user)]
OptionalUser = Annotated[Optional[User], Depends(get_optional_user)]
Posts = Annotated[PostsService, Depends(get_posts_service)]
