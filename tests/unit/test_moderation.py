from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import Mock

import pytest

from src.application.use_cases.moderation import ModerationService
from src.application.use_cases.posts import CreatePostUseCase
from src.application.use_cases.private_messages import SendPrivateMessageUseCase
from src.domain.entities.post import PostEntity
from src.domain.entities.private_message import PrivateMessageEntity
from src.domain.entities.profile import ProfileEntity
from src.domain.entities.session import Session, UserInfo
from src.domain.errors import BoardError, ErrorKind

SESSION = Session(access_token="t", user=UserInfo(id="u-1", email="a@x.com"))


@pytest.fixture()
def service(profiles, posts, messages):
    return ModerationService(profiles, posts, messages)


def _mock_service(is_admin: bool):
    profiles, posts, messages = Mock(), Mock(), Mock()
    profiles.get.return_value = ProfileEntity(id="u-1", email="a@x.com", is_admin=is_admin)
    return ModerationService(profiles, posts, messages), profiles, posts, messages


class TestIsAdmin:
    def test_no_session(self, service):
        assert service.is_admin(None) is False

    def test_no_profile(self, service, make_user):
        assert service.is_admin(make_user("a@x.com", with_profile=False)) is False

    def test_flag_decides(self, service, make_user):
        assert service.is_admin(make_user("a@x.com", "alice")) is False
        assert service.is_admin(make_user("root@x.com", "root", admin=True)) is True

    def test_flag_is_read_on_every_call(self, service, profiles, make_user):
        admin = make_user("root@x.com", "root", admin=True)
        assert service.is_admin(admin) is True

        profiles.update_flags(admin.user.id, is_admin=False)

        assert service.is_admin(admin) is False

    def test_lookup_failure_is_not_admin(self):
        svc, profiles, _, _ = _mock_service(True)
        profiles.get.side_effect = RuntimeError("DB get profile failed")
        assert svc.is_admin(SESSION) is False


@pytest.mark.parametrize(
    "call",
    [
        lambda s, sess: s.list_users(sess),
        lambda s, sess: s.list_posts(sess),
        lambda s, sess: s.list_messages(sess),
        lambda s, sess: s.toggle_ban(sess, "u-2"),
        lambda s, sess: s.delete_user(sess, "u-2"),
        lambda s, sess: s.delete_post(sess, "p-1"),
        lambda s, sess: s.delete_message(sess, "m-1"),
    ],
)
@pytest.mark.parametrize("session", [SESSION, None])
def test_non_admin_is_forbidden_without_side_effects(call, session):
    svc, profiles, posts, messages = _mock_service(is_admin=False)

    with pytest.raises(BoardError) as err:
        call(svc, session)

    assert err.value.kind == ErrorKind.FORBIDDEN
    profiles.update_flags.assert_not_called()
    profiles.delete.assert_not_called()
    posts.delete.assert_not_called()
    messages.delete.assert_not_called()
    posts.list_recent.assert_not_called()
    messages.list_recent.assert_not_called()
    profiles.list_recent.assert_not_called()


class TestToggleBan:
    def test_flips_back_and_forth(self, service, profiles, make_user):
        admin = make_user("root@x.com", "root", admin=True)
        target = make_user("b@x.com", "bob")
        uid = target.user.id

        assert service.toggle_ban(admin, uid) is True
        assert profiles.get(uid).banned is True
        assert service.toggle_ban(admin, uid) is False
        assert profiles.get(uid).banned is False

    def test_unknown_user(self, service, make_user):
        admin = make_user("root@x.com", "root", admin=True)

        with pytest.raises(BoardError) as err:
            service.toggle_ban(admin, "ghost")

        assert err.value.kind == ErrorKind.NOT_FOUND

    def test_write_failure_is_store_error(self):
        svc, profiles, _, _ = _mock_service(True)
        profiles.update_flags.side_effect = RuntimeError("DB update profile flags failed")

        with pytest.raises(BoardError) as err:
            svc.toggle_ban(SESSION, "u-1")

        assert err.value.kind == ErrorKind.STORE_ERROR


class TestAdminListings:
    def test_messages_use_two_queries(self):
        svc, profiles, _, messages = _mock_service(True)
        now = datetime.now(UTC)
        messages.list_recent.return_value = [
            PrivateMessageEntity(id=f"m{i}", sender=f"u-{i}", recipient="u-1", content="x", created_at=now)
            for i in range(50)
        ]
        profiles.nicknames_by_ids.return_value = {"u-1": "alice"}

        listings = svc.list_messages(SESSION)

        messages.list_recent.assert_called_once_with(1000)
        profiles.nicknames_by_ids.assert_called_once()
        assert len(listings) == 50
        assert listings[3].sender_name == "u-3"
        assert listings[3].recipient_name == "alice"

    def test_posts_use_two_queries(self):
        svc, profiles, posts, _ = _mock_service(True)
        now = datetime.now(UTC)
        posts.list_recent.return_value = [
            PostEntity(id=f"p{i}", user_id=f"u-{i % 3}", title="t", content="c", created_at=now)
            for i in range(30)
        ]
        profiles.nicknames_by_ids.return_value = {"u-1": "alice"}

        listings = svc.list_posts(SESSION)

        posts.list_recent.assert_called_once_with(1000)
        profiles.nicknames_by_ids.assert_called_once()
        assert sorted(profiles.nicknames_by_ids.call_args.args[0]) == ["u-0", "u-1", "u-2"]
        assert len(listings) == 30
        assert listings[1].author == "alice"
        assert listings[0].author == "Anonymous"

    def test_posts_and_users(self, service, profiles, posts, make_user):
        admin = make_user("root@x.com", "root", admin=True)
        alice = make_user("a@x.com", "alice")
        CreatePostUseCase(profiles, posts).execute(alice, "t", "c")

        assert [p.author for p in service.list_posts(admin)] == ["alice"]
        assert {u.nickname for u in service.list_users(admin)} == {"root", "alice"}


class TestAdminDeletes:
    def test_delete_user_post_message(self, service, profiles, posts, messages, make_user):
        admin = make_user("root@x.com", "root", admin=True)
        alice = make_user("a@x.com", "alice")
        bob = make_user("b@x.com", "bob")
        post = CreatePostUseCase(profiles, posts).execute(alice, "t", "c").post
        msg = SendPrivateMessageUseCase(profiles, messages).execute(alice, "bob", "hi")

        assert service.delete_post(admin, post.id) is True
        assert service.delete_message(admin, msg.id) is True
        assert service.delete_user(admin, bob.user.id) is True

        assert posts.get(post.id) is None
        assert messages.list_recent(10) == []
        assert profiles.get(bob.user.id) is None
