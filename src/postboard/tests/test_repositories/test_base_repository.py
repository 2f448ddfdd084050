import pytest
from types import SimpleNamespace

from sqlalchemy.exc import IntegrityError, OperationalError

from postboard.database.session import Database
from postboard.exceptions import ConflictError, DatabaseError
from postboard.models import Post, User
from postboard.repositories import BaseRepository, UserRepository


@pytest.mark.asyncio
class TestBaseRepositoryCreate:

    async def test_create_assigns_id_and_equal_timestamps(self, post_repository, post_data):
        """
        Behavior:
          - Create a post through the generic create().
          - Assert a store-assigned integer id and created_at == updated_at.

        Importance:
          - A freshly created entity must never look as if it had been updated.

        Fixtures:
          - post_repository, post_data
        """
        post = await post_repository.create(**post_data)

        assert isinstance(post, Post)
        assert isinstance(post.id, int)
        assert post.title == post_data["title"]
        assert post.content == post_data["content"]
        assert post.created_at is not None
        assert post.created_at == post.updated_at

    async def test_ids_are_distinct(self, create_post):
        first = await create_post()
        second = await create_post()

        assert first.id != second.id

    async def test_create_with_unknown_field_raises_database_error(self, post_repository, post_data):
        """
        Behavior:
          - Pass a keyword the model does not have.
          - The model constructor fails inside db_error_handler and the caller
            only sees DatabaseError with the safe message.
        """
        with pytest.raises(DatabaseError) as exc_info:
            await post_repository.create(**post_data, author="nobody")

        assert exc_info.value.message == "Failed to create post"
        assert isinstance(exc_info.value.__cause__, TypeError)


@pytest.mark.asyncio
class TestBaseRepositoryCreateDuplicates:

    async def test_concurrent_create_raises_conflict(self, database: Database):
        """
        Behavior:
          - Two independent sessions insert the same email; the second insert hits
            the unique index.
          - Expect ConflictError("Email already exists") rather than a 500-class error.

        Importance:
          - This is the race the service-level email check cannot close on its own;
            the store constraint has to surface as a client error.

        Fixtures:
          - database: used directly to open two separate sessions.
        """
        async with database.session() as session1, database.session() as session2:
            repo1 = UserRepository(session1)
            repo2 = UserRepository(session2)

            await repo1.create(name="Race One", email="race@example.com")

            with pytest.raises(ConflictError) as exc_info:
                await repo2.create(name="Race Two", email="race@example.com")

        assert exc_info.value.message == "Email already exists"
        assert exc_info.value.status_code == 400

        async with database.session() as session:
            users = await UserRepository(session).find_all()
        assert [u.name for u in users] == ["Race One"]

    async def test_create_handles_integrity_error_and_session_stays_usable(self, monkeypatch, user_repository):
        """
        Behavior:
          - Simulate a Postgres unique violation (pgcode 23505) on the first flush.
          - Verify create() raises ConflictError, then that the rolled back session
            accepts a normal insert.

        Fixtures:
          - monkeypatch: overrides user_repository.db.flush once
          - user_repository
        """
        orig_flush = user_repository.db.flush
        state = {"called": 0}

        async def fake_flush(*args, **kwargs):
            if state["called"] == 0:
                state["called"] += 1
                fake_orig = SimpleNamespace(
                    pgcode="23505",
                    diag=SimpleNamespace(constraint_name="ix_users_email"),
                )
                raise IntegrityError("INSERT INTO users ...", params={}, orig=fake_orig)
            return await orig_flush(*args, **kwargs)

        monkeypatch.setattr(user_repository.db, "flush", fake_flush)

        with pytest.raises(ConflictError) as exc_info:
            await user_repository.create(name="X", email="x@example.com")

        assert exc_info.value.constraint == "ix_users_email"

        user = await user_repository.create(name="Ok", email="ok@example.com")
        assert user.id is not None


@pytest.mark.asyncio
class TestBaseRepositoryRead:

    async def test_find_by_id_returns_entity(self, post_repository, created_post):
        found = await post_repository.find_by_id(created_post.id)

        assert found is not None
        assert found.id == created_post.id
        assert found.title == created_post.title

    async def test_find_by_id_returns_none_for_missing(self, post_repository):
        """
        Behavior:
          - Looking up an id that was never assigned returns None; "not found"
            is the service's decision, never a repository error.
        """
        assert await post_repository.find_by_id(999_999) is None

    async def test_find_all_returns_every_row(self, create_post, post_repository):
        created = [await create_post() for _ in range(3)]

        found = await post_repository.find_all()

        assert [p.id for p in found] == [p.id for p in created]

    async def test_find_all_on_empty_table(self, post_repository):
        assert await post_repository.find_all() == []

    async def test_store_failure_becomes_database_error(self, monkeypatch, post_repository):
        """
        Behavior:
          - Make session.execute raise a driver-level OperationalError.
          - The repository wraps it: DatabaseError with the operation's safe message,
            original exception chained as __cause__.

        Importance:
          - Raw driver errors (with SQL and parameters) must never reach clients.
        """
        async def broken_execute(*args, **kwargs):
            raise OperationalError("SELECT ...", {}, Exception("connection refused"))

        monkeypatch.setattr(post_repository.db, "execute", broken_execute)

        with pytest.raises(DatabaseError) as exc_info:
            await post_repository.find_all()

        assert exc_info.value.message == "Failed to fetch posts"
        assert exc_info.value.status_code == 500
        assert isinstance(exc_info.value.__cause__, OperationalError)


@pytest.mark.asyncio
class TestBaseRepositoryUpdate:

    async def test_update_changes_only_given_fields(self, post_repository, created_post):
        original_content = created_post.content

        updated = await post_repository.update(created_post.id, title="New title")

        assert updated is not None
        assert updated.title == "New title"
        assert updated.content == original_content

    async def test_update_refreshes_updated_at_but_not_created_at(self, post_repository, created_post):
        """
        Behavior:
          - Update one field and compare timestamps to the values before the update.

        Importance:
          - created_at is immutable; updated_at has to move forward on every change.
        """
        created_at = created_post.created_at
        updated_at = created_post.updated_at

        updated = await post_repository.update(created_post.id, content="Changed")

        assert updated.created_at == created_at
        assert updated.updated_at >= updated_at

    async def test_update_ignores_protected_fields(self, post_repository, created_post):
        created_at = created_post.created_at
        post_id = created_post.id

        updated = await post_repository.update(post_id, id=12345, created_at=None, title="Kept id")

        assert updated.id == post_id
        assert updated.created_at == created_at
        assert updated.title == "Kept id"

    async def test_update_no_valid_data_returns_current(self, post_repository, created_post):
        same = await post_repository.update(created_post.id, title=None)

        assert same is not None
        assert same.id == created_post.id
        assert same.title == created_post.title

    async def test_update_not_found_returns_none(self, post_repository):
        assert await post_repository.update(424242, title="ghost") is None

    async def test_update_to_taken_email_raises_conflict(self, create_user, user_repository):
        first = await create_user(email="first@example.com")
        second = await create_user(email="second@example.com")
        # the rollback expires loaded instances; keep plain values
        taken_email, second_id = first.email, second.id

        with pytest.raises(ConflictError):
            await user_repository.update(second_id, email=taken_email)

        # The failed update was rolled back and the session still works
        reloaded = await user_repository.find_by_id(second_id)
        assert reloaded.email == "second@example.com"


@pytest.mark.asyncio
class TestBaseRepositoryDelete:

    async def test_delete_success_and_no_longer_exists(self, post_repository, created_post):
        assert await post_repository.delete(created_post.id) is True
        assert await post_repository.find_by_id(created_post.id) is None

    async def test_delete_not_found_returns_false(self, post_repository):
        assert await post_repository.delete(31337) is False

    async def test_delete_twice(self, post_repository, created_post):
        """
        Behavior:
          - The second delete of the same id reports False instead of raising.
        """
        assert await post_repository.delete(created_post.id) is True
        assert await post_repository.delete(created_post.id) is False


@pytest.mark.asyncio
async def test_generic_repository_uses_record_label(db_session):
    """
    A BaseRepository used directly (no subclass) still produces readable messages.
    """
    repo = BaseRepository(User, db_session)

    with pytest.raises(DatabaseError) as exc_info:
        await repo.create(name="No Email")

    assert exc_info.value.message == "Failed to create record"


@pytest.mark.asyncio
class TestBaseRepositoryKeyRange:
    """
    Ids that do not fit the INTEGER primary key cannot exist, so they are
    reported as absent instead of reaching the driver (which overflows).
    """

    @pytest.mark.parametrize("entity_id", [2**31, 99999999999999999999, -(2**31) - 1])
    async def test_out_of_range_ids_are_absent(self, post_repository, created_post, entity_id):
        assert await post_repository.find_by_id(entity_id) is None
        assert await post_repository.update(entity_id, title="x") is None
        assert await post_repository.delete(entity_id) is False

        # the session is still usable and nothing was touched
        assert (await post_repository.find_by_id(created_post.id)).title == created_post.title
