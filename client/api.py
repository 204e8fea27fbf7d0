"""
HTTP client for the posts API.

Builds the request for each posts operation and attaches the bearer token
from the locally persisted profile, if one has been saved.
"""

import logging
import os
from typing import Any, Dict, List, Optional, Union
from urllib.parse import urljoin

import requests

from client.session import ProfileStore

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:5000"


class PostsAPI:

    def __init__(
            self,
            base_url: Optional[str] = None,
            profile_store: Optional[ProfileStore] = None,
            session: Optional[requests.Session] = None,
            timeout: int = 30,
    ):
        """
        Args:
            base_url: Root URL of the posts backend
            profile_store: Where the signed-in profile and its token are kept
            session: HTTP session to send requests through
            timeout: Request timeout in seconds
        """
        self.base_url = base_url or os.getenv("MEMORIES_API_URL", DEFAULT_BASE_URL)
        if not self.base_url.endswith("/"):
            self.base_url += "/"
        self.profile_store = profile_store or ProfileStore()
        self.session = session or requests.Session()
        self.timeout = timeout

    def build_request(
            self,
            method: str,
            path: str,
            params: Optional[Dict[str, Any]] = None,
            json_data: Optional[Any] = None,
    ) -> requests.PreparedRequest:
        """
        Build a request against the backend

        Args:
            method: HTTP method
            path: Path relative to the base URL, e.g. "posts/abc"
            params: Query parameters
            json_data: JSON request body

        Returns:
            The prepared request, with an Authorization header when a token is stored
        """
        headers = {}
        token = self.profile_store.token
        if token:
            headers["Authorization"] = f"Bearer {token}"

        request = requests.Request(
            method=method,
            url=urljoin(self.base_url, path.lstrip("/")),
            params=params,
            json=json_data,
            headers=headers,
        )
        return self.session.prepare_request(request)

    def _send(self, method: str, path: str, **kwargs) -> requests.Response:
        prepared = self.build_request(method, path, **kwargs)
        logger.debug("%s %s", prepared.method, prepared.url)
        response = self.session.send(prepared, timeout=self.timeout)
        response.raise_for_status()
        return response

    def fetch_post(self, post_id: str) -> requests.Response:
        return self._send("GET", f"posts/{post_id}")

    def fetch_posts(self, page: int) -> requests.Response:
        return self._send("GET", "posts", params={"page": page})

    def fetch_posts_by_search(self, search_query: Dict[str, Any]) -> requests.Response:
        """
        Search posts

        Args:
            search_query: {"search": text, "tags": list of tags or comma-separated string}
        """
        tags: Union[str, List[str], None] = search_query.get("tags")
        if isinstance(tags, list):
            tags = ",".join(tags)
        return self._send(
            "GET",
            "posts/search",
            params={
                "searchQuery": search_query.get("search") or "none",
                "tags": tags or "",
            },
        )

    def create_post(self, new_post: Dict[str, Any]) -> requests.Response:
        return self._send("POST", "posts", json_data=new_post)

    def like_post(self, post_id: str) -> requests.Response:
        return self._send("PATCH", f"posts/{post_id}/likePost")

    def comment(self, value: str, post_id: str) -> requests.Response:
        return self._send("POST", f"posts/{post_id}/commentPost", json_data={"value": value})

    def update_post(self, post_id: str, updated_post: Dict[str, Any]) -> requests.Response:
        return self._send("PATCH", f"posts/{post_id}", json_data=updated_post)

    def delete_post(self, post_id: str) -> requests.Response:
        return self._send("DELETE", f"posts/{post_id}")
