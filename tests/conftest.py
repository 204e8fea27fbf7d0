import copy
import itertools
from typing import Any, Callable, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from dependencies import get_current_user, get_optional_user, get_posts_service
from main import app
from models.user import User
from services.posts import PostsService


class InMemoryPostStore:
    """Dict-backed stand-in for FirestoreDB with the same post operations"""

    def __init__(self):
        self.posts: Dict[str, Dict[str, Any]] = {}
        self._ids = itertools.count(1)

    def add(self, **fields) -> Dict[str, Any]:
        """Insert a post directly, bypassing the service"""
        post = {
            "title": "title",
            "message": "message",
            "name": None,
            "creator": "someone",
            "tags": [],
            "selectedFile": None,
            "likes": [],
            "comments": [],
            "createdAt": "2024-01-01T00:00:00.000Z",
            **fields,
        }
        return self.create_post(post)

    def _ordered(self) -> List[Dict[str, Any]]:
        posts = sorted(self.posts.values(), key=lambda p: p["createdAt"], reverse=True)
        return copy.deepcopy(posts)

    def count_posts(self) -> int:
        return len(self.posts)

    def list_posts(self, offset: int, limit: int) -> List[Dict[str, Any]]:
        return self._ordered()[offset:offset + limit]

    def stream_posts(self) -> List[Dict[str, Any]]:
        return self._ordered()

    def get_post(self, post_id: str) -> Optional[Dict[str, Any]]:
        post = self.posts.get(post_id)
        return copy.deepcopy(post) if post is not None else None

    def create_post(self, post_data: Dict[str, Any]) -> Dict[str, Any]:
        post_id = f"post{next(self._ids):04d}"
        self.posts[post_id] = {"id": post_id, **copy.deepcopy(post_data)}
        return copy.deepcopy(self.posts[post_id])

    def update_post(self, post_id: str, changes: Dict[str, Any]) -> bool:
        if post_id not in self.posts:
            return False
        self.posts[post_id].update(copy.deepcopy(changes))
        return True

    def delete_post(self, post_id: str) -> None:
        self.posts.pop(post_id, None)

    def modify_post(self, post_id: str, mutate: Callable[[Dict[str, Any]], Dict[str, Any]]):
        if post_id not in self.posts:
            return None
        post = copy.deepcopy(self.posts[post_id])
        changes = mutate(post)
        self.posts[post_id].update(copy.deepcopy(changes))
        post.update(changes)
        return post


@pytest.fixture
def store() -> InMemoryPostStore:
    return InMemoryPostStore()


@pytest.fixture
def service(store) -> PostsService:
    return PostsService(store)


@pytest.fixture
def user() -> User:
    return User(user_id="user-1", email="user-1@example.com")


@pytest.fixture
def api(service, user):
    """Test client with the in-memory store and an authenticated caller"""
    app.dependency_overrides[get_posts_service] = lambda: service
    app.dependency_overrides[get_current_user] = lambda: user
    app.dependency_overrides[get_optional_user] = lambda: user
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_api(service):
    """Test client with the in-memory store and no caller identity"""
    app.dependency_overrides[get_posts_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()
