import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from models.post import PostRecord, PostUpdate
from services.firestore import FirestoreDB
from utils.ids import is_valid_post_id
from utils.pagination import number_of_pages, page_offset

logger = logging.getLogger(__name__)

PAGE_SIZE = 8
DEFAULT_SEARCH_QUERY = "none"


class InvalidPostIdError(Exception):
    def __init__(self, post_id: str):
        self.post_id = post_id
        super().__init__(f"No post with id: {post_id}")


class PostNotFoundError(Exception):
    def __init__(self, post_id: str):
        self.post_id = post_id
        super().__init__(f"No post with id: {post_id}")


def utc_timestamp() -> str:
    """Current time as an ISO-8601 UTC string with millisecond precision"""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_tags(tags: Optional[str]) -> List[str]:
    """Split a comma-separated tag list, dropping empty entries"""
    if not tags:
        return []
    return [tag for tag in tags.split(",") if tag]


def post_matches(post: Dict[str, Any], search_query: str, tags: Iterable[str]) -> bool:
    """A post matches when its title contains the query or it shares a tag"""
    title = post.get("title") or ""
    if search_query.lower() in title.lower():
        return True
    return not set(tags).isdisjoint(post.get("tags") or [])


def toggle_like(likes: List[str], user_id: str) -> List[str]:
    """Add the user to the likes if absent, otherwise remove every occurrence"""
    if user_id not in likes:
        return likes + [user_id]
    return [like for like in likes if like != user_id]


class PostsService:

    def __init__(self, db: FirestoreDB):
        self.db = db

    def _check_id(self, post_id: str) -> None:
        if not is_valid_post_id(post_id):
            raise InvalidPostIdError(post_id)

    def get_posts(self, page: int) -> Dict[str, Any]:
        """
        Get one page of posts, most recent first

        Args:
            page: 1-based page number

        Returns:
            The page of posts, the echoed page number and the total page count
        """
        total = self.db.count_posts()
        posts = self.db.list_posts(offset=page_offset(page, PAGE_SIZE), limit=PAGE_SIZE)
        return {
            "data": posts,
            "currentPage": page,
            "numberOfPages": number_of_pages(total, PAGE_SIZE),
        }

    def get_posts_by_search(self, search_query: Optional[str], tags: Optional[str]) -> List[Dict[str, Any]]:
        """
        Find posts whose title contains the query (case-insensitive) or whose
        tags intersect the comma-separated tag list
        """
        search_query = search_query or DEFAULT_SEARCH_QUERY
        tags_list = parse_tags(tags)
        logger.info("Searching posts for %r with tags %s", search_query, tags_list)
        return [post for post in self.db.stream_posts() if post_matches(post, search_query, tags_list)]

    def get_post(self, post_id: str) -> Dict[str, Any]:
        self._check_id(post_id)
        post = self.db.get_post(post_id)
        if post is None:
            raise PostNotFoundError(post_id)
        return post

    def create_post(self, payload: Dict[str, Any], creator: str) -> Dict[str, Any]:
        """
        Create a post owned by the caller

        Raises:
            pydantic.ValidationError: If the payload is missing required fields
        """
        # likes and comments only change through their own operations
        record = PostRecord(**{
            **payload,
            "creator": creator,
            "createdAt": utc_timestamp(),
            "likes": [],
            "comments": [],
        })
        post = self.db.create_post(record.model_dump())
        logger.info("Created post %s for %s", post["id"], creator)
        return post

    def update_post(self, post_id: str, update: PostUpdate) -> Dict[str, Any]:
        """
        Overwrite the supplied fields of a post

        Returns:
            The supplied payload with the post ID, not a re-fetched post
        """
        self._check_id(post_id)
        changes = update.model_dump(exclude_none=True)
        if changes and not self.db.update_post(post_id, changes):
            logger.warning("Ignored update for missing post %s", post_id)
        return {**changes, "id": post_id}

    def delete_post(self, post_id: str) -> None:
        self._check_id(post_id)
        self.db.delete_post(post_id)
        logger.info("Deleted post %s", post_id)

    def like_post(self, post_id: str, user_id: str) -> Dict[str, Any]:
        """Toggle the caller's like on a post"""
        self._check_id(post_id)
        post = self.db.modify_post(
            post_id,
            lambda current: {"likes": toggle_like(list(current.get("likes") or []), user_id)}
        )
        if post is None:
            raise PostNotFoundError(post_id)
        return post

    def comment_post(self, post_id: str, value: str) -> Dict[str, Any]:
        """Append a comment to a post, stored exactly as sent"""
        self._check_id(post_id)
        post = self.db.modify_post(
            post_id,
            lambda current: {"comments": list(current.get("comments") or []) + [value]}
        )
        if post is None:
            raise PostNotFoundError(post_id)
        return post
