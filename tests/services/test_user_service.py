"""User Service — verifies user CRUD, uniqueness, follow graph symmetry, and cascade delete.

Invariants:
    - Failed validation persists nothing
    - follow/unfollow keep A.following and B.followers in agreement
    - follow is idempotent; self-follow is rejected
    - Deleting a user removes its edges, likes and posts; its comments elsewhere
      stay with a null author
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from sqlalchemy import func, select, update

from inkwell.core.errors import (
    BadRequestError, ConflictError, ResourceNotFoundError, SelfReferenceError,
    ValidationError,
)
from inkwell.infrastructure.security import verify_password
from inkwell.models.comment import Comment
from inkwell.models.follow import Follow
from inkwell.models.post import Post
from inkwell.models.post_like import PostLike
from inkwell.models.user import User
from inkwell.repositories.post_repository import SqlPostRepository
from inkwell.schemas.user import UserCreate, UserProfile, UserUpdate


async def _count(db, model) -> int:
    result = await db.execute(select(func.count()).select_from(model))
    return result.scalar_one()


# ─── Create / update ────────────────────────────────────────────

async def test_create_user_hashes_password_and_lowercases_email(user_service):
    detail = await user_service.create_user(UserCreate(
        username="  alice ", email="Alice@Example.com", password="secret123",
        profile=UserProfile(first_name="Alice", bio="  "),
    ))
    user = detail.user
    assert user.username == "alice"
    assert user.email == "alice@example.com"
    assert user.password_hash != "secret123"
    assert verify_password("secret123", user.password_hash)
    assert user.first_name == "Alice"
    assert user.bio is None
    assert detail.followers == [] and detail.following == []


async def test_two_char_username_fails_and_persists_nothing(user_service, test_db):
    with pytest.raises(ValidationError):
        await user_service.create_user(UserCreate(
            username="ab", email="ab@example.com", password="secret123",
        ))
    assert await _count(test_db, User) == 0


async def test_three_char_username_succeeds(user_service):
    detail = await user_service.create_user(UserCreate(
        username="abc", email="abc@example.com", password="secret123",
    ))
    assert detail.user.id is not None


async def test_short_password_rejected(user_service):
    with pytest.raises(ValidationError):
        await user_service.create_user(UserCreate(
            username="alice", email="alice@example.com", password="123",
        ))


async def test_duplicate_username_is_conflict(user_service, make_user):
    await make_user("alice")
    with pytest.raises(ConflictError) as exc_info:
        await user_service.create_user(UserCreate(
            username="alice", email="other@example.com", password="secret123",
        ))
    assert exc_info.value.field == "username"


async def test_duplicate_email_is_conflict_case_insensitive(user_service, make_user):
    await make_user("alice", email="alice@example.com")
    with pytest.raises(ConflictError) as exc_info:
        await user_service.create_user(UserCreate(
            username="alicia", email="ALICE@example.com", password="secret123",
        ))
    assert exc_info.value.field == "email"


async def test_update_applies_only_present_fields(user_service, make_user):
    user = await make_user("alice", profile=UserProfile(first_name="Alice"))
    detail = await user_service.update_user(
        user.id, UserUpdate(profile=UserProfile(bio="Writes things")),
    )
    assert detail.user.username == "alice"
    assert detail.user.first_name == "Alice"
    assert detail.user.bio == "Writes things"


async def test_update_to_taken_username_is_conflict(user_service, make_user):
    await make_user("alice")
    bob = await make_user("bob")
    with pytest.raises(ConflictError):
        await user_service.update_user(bob.id, UserUpdate(username="alice"))


async def test_update_keeping_own_username_is_allowed(user_service, make_user):
    alice = await make_user("alice")
    detail = await user_service.update_user(alice.id, UserUpdate(username="alice"))
    assert detail.user.username == "alice"


async def test_update_missing_user_returns_none(user_service):
    assert await user_service.update_user(uuid4(), UserUpdate(username="nobody")) is None


async def test_empty_patch_is_bad_request(user_service, make_user):
    user = await make_user()
    with pytest.raises(BadRequestError):
        await user_service.patch_user(user.id, UserUpdate())


# ─── Listing ─────────────────────────────────────────────────────

async def test_list_users_most_recent_first_with_counts(
    user_service, make_user, test_db,
):
    alice = await make_user("alice")
    bob = await make_user("bob")
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    for n, user_id in enumerate([alice.id, bob.id]):
        await test_db.execute(
            update(User).where(User.id == user_id)
            .values(created_at=base + timedelta(seconds=n))
        )
    await test_db.commit()
    await user_service.follow(alice.id, bob.id)

    page = await user_service.list_users()
    assert [s.user.username for s in page.items] == ["bob", "alice"]
    by_name = {s.user.username: s for s in page.items}
    assert by_name["bob"].followers_count == 1
    assert by_name["alice"].following_count == 1
    assert page.meta.total == 2


async def test_list_users_search_is_case_insensitive_substring(user_service, make_user):
    await make_user("alice")
    await make_user("malice")
    await make_user("bob")
    page = await user_service.list_users(search="ALI")
    assert {s.user.username for s in page.items} == {"alice", "malice"}
    assert page.meta.total == 2


async def test_get_missing_user_returns_none(user_service):
    assert await user_service.get_user(uuid4()) is None


# ─── Follow graph ────────────────────────────────────────────────

async def test_follow_updates_both_sides(user_service, make_user):
    alice = await make_user("alice")
    bob = await make_user("bob")

    outcome = await user_service.follow(alice.id, bob.id)

    assert outcome.followed is True
    assert [u.id for u in outcome.follower.following] == [bob.id]
    assert [u.id for u in outcome.target.followers] == [alice.id]
    assert outcome.follower.followers == []
    assert outcome.target.following == []


async def test_follow_twice_is_idempotent(user_service, make_user, test_db):
    alice = await make_user("alice")
    bob = await make_user("bob")
    await user_service.follow(alice.id, bob.id)

    outcome = await user_service.follow(alice.id, bob.id)

    assert outcome.followed is False
    assert len(outcome.target.followers) == 1
    assert await _count(test_db, Follow) == 1


async def test_unfollow_removes_both_sides(user_service, make_user):
    alice = await make_user("alice")
    bob = await make_user("bob")
    await user_service.follow(alice.id, bob.id)

    outcome = await user_service.unfollow(alice.id, bob.id)

    assert outcome.follower.following == []
    assert outcome.target.followers == []
    bob_detail = await user_service.get_user(bob.id)
    assert bob_detail.followers == []


async def test_unfollow_without_edge_is_noop(user_service, make_user):
    alice = await make_user("alice")
    bob = await make_user("bob")
    outcome = await user_service.unfollow(alice.id, bob.id)
    assert outcome.followed is False
    assert outcome.target.followers == []


async def test_self_follow_is_rejected(user_service, make_user, test_db):
    alice = await make_user("alice")
    with pytest.raises(SelfReferenceError):
        await user_service.follow(alice.id, alice.id)
    with pytest.raises(SelfReferenceError):
        await user_service.unfollow(alice.id, alice.id)
    assert await _count(test_db, Follow) == 0


async def test_follow_missing_target_is_not_found(user_service, make_user):
    alice = await make_user("alice")
    with pytest.raises(ResourceNotFoundError):
        await user_service.follow(alice.id, uuid4())


async def test_follow_missing_follower_is_not_found(user_service, make_user):
    bob = await make_user("bob")
    with pytest.raises(ResourceNotFoundError):
        await user_service.follow(uuid4(), bob.id)


# ─── Delete cascade ──────────────────────────────────────────────

async def test_delete_user_cascades_and_tombstones_comments(
    user_service, post_service, make_user, make_post, test_session_factory,
):
    alice = await make_user("alice")
    bob = await make_user("bob")
    alice_post = await make_post(alice, title="Alice writes")
    bob_post = await make_post(bob, title="Bob writes")
    alice_post_id, bob_post_id = alice_post.id, bob_post.id
    alice_id, bob_id = alice.id, bob.id

    await user_service.follow(alice_id, bob_id)
    await user_service.follow(bob_id, alice_id)
    await post_service.toggle_like(bob_post_id, alice_id)
    await post_service.toggle_like(alice_post_id, bob_id)
    await post_service.add_comment(bob_post_id, "Nice one", alice_id)
    await post_service.add_comment(alice_post_id, "Thanks", bob_id)

    assert await user_service.delete_user(alice_id) is True

    async with test_session_factory() as fresh:
        assert await fresh.get(User, alice_id) is None
        assert await _count(fresh, Follow) == 0
        assert await _count(fresh, PostLike) == 0
        assert await _count(fresh, Post) == 1

        remaining = await SqlPostRepository(fresh).get(bob_post_id)
        assert remaining is not None
        assert remaining.liked_by == []
        assert len(remaining.comments) == 1
        assert remaining.comments[0].author_id is None
        assert remaining.comments[0].text == "Nice one"

        comments = await fresh.execute(select(Comment.post_id))
        assert list(comments.scalars().all()) == [bob_post_id]


async def test_delete_missing_user_returns_false(user_service):
    assert await user_service.delete_user(uuid4()) is False
