import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Query
from fastapi.responses import JSONResponse, PlainTextResponse
from google.api_core.exceptions import GoogleAPICallError
from pydantic import ValidationError

from dependencies import CurrentUser, OptionalUser, Posts
from models.post import CommentRequest, PostUpdate
from services.posts import InvalidPostIdError, PostNotFoundError

logger = logging.getLogger(__name__)

router = APIRouter()


def _no_post(post_id: str) -> PlainTextResponse:
    return PlainTextResponse(f"No post with id: {post_id}", status_code=404)


def _store_failure(action: str, post_id: str, e: GoogleAPICallError) -> JSONResponse:
    logger.error("Failed to %s post %s: %s", action, post_id, e)
    return JSONResponse(status_code=404, content={"message": e.message})


@router.get("")
async def get_posts(posts: Posts, page: int = Query(1, ge=1)):
    """Get one page of posts, most recent first"""
    try:
        return posts.get_posts(page)
    except GoogleAPICallError as e:
        logger.error("Failed to list posts: %s", e)
        return JSONResponse(status_code=404, content={"message": e.message})


@router.get("/search")
async def get_posts_by_search(
        posts: Posts,
        searchQuery: Optional[str] = None,
        tags: Optional[str] = None,
):
    """Search posts by title substring or by any of the comma-separated tags"""
    try:
        return {"data": posts.get_posts_by_search(searchQuery, tags)}
    except GoogleAPICallError as e:
        logger.error("Failed to search posts: %s", e)
        return JSONResponse(status_code=404, content={"message": e.message})


@router.get("/{post_id}")
async def get_post(posts: Posts, post_id: str):
    """Get a single post"""
    try:
        return posts.get_post(post_id)
    except (InvalidPostIdError, PostNotFoundError) as e:
        return JSONResponse(status_code=404, content={"message": str(e)})
    except GoogleAPICallError as e:
        logger.error("Failed to get post %s: %s", post_id, e)
        return JSONResponse(status_code=404, content={"message": e.message})


@router.post("", status_code=201)
async def create_post(
        posts: Posts,
        current_user: CurrentUser,
        post_data: Dict[str, Any] = Body(...),
):
    """Create a post owned by the caller"""
    try:
        return posts.create_post(post_data, creator=current_user.user_id)
    except ValidationError as e:
        return JSONResponse(status_code=409, content={"message": str(e)})
    except GoogleAPICallError as e:
        logger.error("Failed to create post: %s", e)
        return JSONResponse(status_code=409, content={"message": e.message})


@router.patch("/{post_id}")
async def update_post(
        posts: Posts,
        post_id: str,
        update: PostUpdate,
        current_user: CurrentUser,
):
    """Overwrite the supplied fields of a post"""
    try:
        return posts.update_post(post_id, update)
    except InvalidPostIdError:
        return _no_post(post_id)
    except GoogleAPICallError as e:
        return _store_failure("update", post_id, e)


@router.delete("/{post_id}")
async def delete_post(posts: Posts, post_id: str, current_user: CurrentUser):
    """Delete a post, whether or not it exists"""
    try:
        posts.delete_post(post_id)
    except InvalidPostIdError:
        return _no_post(post_id)
    except GoogleAPICallError as e:
        return _store_failure("delete", post_id, e)
    return {"message": "Post deleted successfully."}


@router.patch("/{post_id}/likePost")
async def like_post(posts: Posts, post_id: str, current_user: OptionalUser):
    """Toggle the caller's like on a post"""
    if current_user is None:
        return {"message": "Unauthenticated"}

    try:
        return posts.like_post(post_id, current_user.user_id)
    except (InvalidPostIdError, PostNotFoundError):
        return _no_post(post_id)
    except GoogleAPICallError as e:
        return _store_failure("like", post_id, e)


@router.post("/{post_id}/commentPost")
async def comment_post(
        posts: Posts,
        post_id: str,
        comment: CommentRequest,
        current_user: CurrentUser,
):
    """Append a comment to a post"""
    try:
        return posts.comment_post(post_id, comment.value)
    except (InvalidPostIdError, PostNotFoundError):
        return _no_post(post_id)
    except GoogleAPICallError as e:
        return _store_failure("comment on", post_id, e)
