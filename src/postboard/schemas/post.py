"""
Request and response models for posts.
"""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, StringConstraints, field_validator

from .common import EntityRead, reject_null

PostTitle = Annotated[str, StringConstraints(min_length=1, max_length=200)]
PostContent = Annotated[str, StringConstraints(min_length=1, max_length=5000)]


class PostCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    title: PostTitle
    content: PostContent


class PostUpdate(BaseModel):
    """Body of PATCH /posts/{id}. Every field is optional but none may be null."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    title: PostTitle | None = None
    content: PostContent | None = None

    @field_validator("title", "content", mode="before")
    @classmethod
    def check_not_null(cls, value):
        return reject_null(value)


class PostRead(EntityRead):
    title: str
    content: str
