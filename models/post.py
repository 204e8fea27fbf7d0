from typing import List, Optional

from pydantic import BaseModel, field_validator


def _unique(tags: Optional[List[str]]) -> Optional[List[str]]:
    # keep the first occurrence of each tag
    if tags is None:
        return None
    return list(dict.fromkeys(tags))


class PostRecord(BaseModel):
    """A post as it is stored in the posts collection"""
    title: str
    message: str
    name: Optional[str] = None
    creator: str
    tags: List[str] = []
    selectedFile: Optional[str] = None
    likes: List[str] = []
    comments: List[str] = []
    createdAt: str

    @field_validator("tags")
    @classmethod
    def unique_tags(cls, tags: List[str]) -> List[str]:
        return _unique(tags)


class PostUpdate(BaseModel):
    title: Optional[str] = None
    message: Optional[str] = None
    creator: Optional[str] = None
    selectedFile: Optional[str] = None
    tags: Optional[List[str]] = None

    @field_validator("tags")
    @classmethod
    def unique_tags(cls, tags: Optional[List[str]]) -> Optional[List[str]]:
        return _unique(tags)


class CommentRequest(BaseModel):
    value: str
