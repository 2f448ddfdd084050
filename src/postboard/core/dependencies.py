"""
FastAPI dependency chain:

    request -> Database (app.state) -> AsyncSession (one per request)
            -> repository -> service

Tests override `get_database` (or a service provider) with
`app.dependency_overrides`.
"""

from typing import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from postboard.database.session import Database
from postboard.repositories import PostRepository, UserRepository
from postboard.services import PostService, UserService


def get_database(request: Request) -> Database:
    # Set by the lifespan in postboard.main
    return request.app.state.database


async def get_db_session(database: Database = Depends(get_database)) -> AsyncIterator[AsyncSession]:
    # Returns DB session dependency, closed when the response is done
    async with database.session() as session:
        yield session


def get_user_service(db: AsyncSession = Depends(get_db_session)) -> UserService:
    return UserService(UserRepository(db))


def get_post_service(db: AsyncSession = Depends(get_db_session)) -> PostService:
    return PostService(PostRepository(db))
