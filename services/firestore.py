import logging
from typing import Any, Callable, Dict, List, Optional

import firebase_admin
from firebase_admin import firestore as fs
from google.api_core.exceptions import NotFound
from google.cloud import firestore

logger = logging.getLogger(__name__)


def _to_post(snapshot) -> Dict[str, Any]:
    post_data = snapshot.to_dict()
    post_data["id"] = snapshot.id
    return post_data


class FirestoreDB:
    def __init__(self, app: firebase_admin.App, posts_collection: str = "posts"):
        self.db = fs.client(app)
        self.posts_collection = posts_collection

    def collection(self, name: str):
        return self.db.collection(name)

    def posts(self):
        return self.collection(self.posts_collection)

    def count_posts(self) -> int:
        """Count every post in the collection"""
        result = self.posts().count(alias="total").get()
        return int(result[0][0].value)

    def list_posts(self, offset: int, limit: int) -> List[Dict[str, Any]]:
        """Get one window of posts sorted by creation date descending"""
        posts_ref = self.posts() \
            .order_by("createdAt", direction=firestore.Query.DESCENDING) \
            .offset(offset) \
            .limit(limit) \
            .stream()
        return [_to_post(doc) for doc in posts_ref]

    def stream_posts(self) -> List[Dict[str, Any]]:
        """Get all posts sorted by creation date descending"""
        posts_ref = self.posts().order_by("createdAt", direction=firestore.Query.DESCENDING).stream()
        return [_to_post(doc) for doc in posts_ref]

    def get_post(self, post_id: str) -> Optional[Dict[str, Any]]:
        """Get a post by ID"""
        snapshot = self.posts().document(post_id).get()
        if not snapshot.exists:
            return None
        return _to_post(snapshot)

    def create_post(self, post_data: Dict[str, Any]) -> Dict[str, Any]:
        """Create a new post and return it with its generated ID"""
        new_post_ref = self.posts().document()
        new_post_ref.set(post_data)
        return {"id": new_post_ref.id, **post_data}

    def update_post(self, post_id: str, changes: Dict[str, Any]) -> bool:
        """
        Overwrite the given fields of a post

        Returns:
            False when the post does not exist, in which case nothing is written
        """
        try:
            self.posts().document(post_id).update(changes)
        except NotFound:
            return False
        return True

    def delete_post(self, post_id: str) -> None:
        """Delete a post, missing posts are ignored by Firestore"""
        self.posts().document(post_id).delete()

    def modify_post(
            self,
            post_id: str,
            mutate: Callable[[Dict[str, Any]], Dict[str, Any]]
    ) -> Optional[Dict[str, Any]]:
        """
        Read a post, compute changes from it and write them back atomically

        Args:
            post_id: The ID of the post to modify
            mutate: Receives the current post and returns the fields to update

        Returns:
            The updated post, or None if it does not exist
        """
        post_ref = self.posts().document(post_id)
        transaction = self.db.transaction()

        @firestore.transactional
        def modify_in_transaction(transaction, post_ref):
            snapshot = post_ref.get(transaction=transaction)
            if not snapshot.exists:
                return None

            post = _to_post(snapshot)
            changes = mutate(post)

            # Firestore retries the whole function if the document changed underneath
            transaction.update(post_ref, changes)
            post.update(changes)
            return post

        post = modify_in_transaction(transaction, post_ref)
        if post is None:
            logger.info("Post %s not found for modification", post_id)
        return post
