import pytest

from postboard.exceptions import DatabaseError, NotFoundError
from postboard.services import PostService

from postboard.tests.test_fixtures.service_fixtures import InMemoryPostRepository, failing


@pytest.mark.asyncio
class TestPostService:
    """
    PostService is a thin pass-through; these tests pin normalization and the
    NotFoundError translation of absent values.
    """

    async def test_create_trims_fields(self, post_service: PostService):
        post = await post_service.create_post(title="  Hello  ", content="\n body \n")

        assert post.title == "Hello"
        assert post.content == "body"
        assert post.created_at == post.updated_at

    async def test_get_all_and_by_id(self, post_service: PostService):
        first = await post_service.create_post(title="One", content="1")
        await post_service.create_post(title="Two", content="2")

        assert len(await post_service.get_all_posts()) == 2
        assert (await post_service.get_post_by_id(first.id)).title == "One"

    async def test_get_missing_post(self, post_service: PostService):
        with pytest.raises(NotFoundError) as exc_info:
            await post_service.get_post_by_id(5)

        assert exc_info.value.message == "Post not found"

    async def test_update_only_given_fields(self, post_service: PostService):
        post = await post_service.create_post(title="Title", content="Body")

        updated = await post_service.update_post(post.id, content="New body")

        assert updated.title == "Title"
        assert updated.content == "New body"

    async def test_update_missing_post(self, post_service: PostService,
                                       fake_post_repository: InMemoryPostRepository):
        with pytest.raises(NotFoundError):
            await post_service.update_post(9, title="x")

        assert fake_post_repository.calls == ["find_by_id"]

    async def test_update_with_nothing_to_change(self, post_service: PostService,
                                                 fake_post_repository: InMemoryPostRepository):
        post = await post_service.create_post(title="Title", content="Body")

        same = await post_service.update_post(post.id, title=None)

        assert same is post
        assert "update" not in fake_post_repository.calls

    async def test_post_deleted_mid_update(self, post_service: PostService,
                                           fake_post_repository: InMemoryPostRepository):
        post = await post_service.create_post(title="Title", content="Body")
        fake_post_repository.vanish_on_update = True

        with pytest.raises(NotFoundError):
            await post_service.update_post(post.id, title="Other")

    async def test_delete(self, post_service: PostService):
        post = await post_service.create_post(title="Title", content="Body")

        await post_service.delete_post(post.id)

        with pytest.raises(NotFoundError):
            await post_service.delete_post(post.id)

    async def test_store_failure_propagates(self, post_service: PostService,
                                            fake_post_repository: InMemoryPostRepository):
        failing(fake_post_repository, "Failed to create post")

        with pytest.raises(DatabaseError) as exc_info:
            await post_service.create_post(title="t", content="c")

        assert exc_info.value.message == "Failed to create post"
