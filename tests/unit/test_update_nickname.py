from __future__ import annotations

import pytest

from src.application.use_cases.update_nickname import UpdateNicknameUseCase
from src.domain.errors import BoardError, ErrorKind


class TestUpdateNickname:
    def test_renames_own_profile(self, profiles, make_user):
        alice = make_user("a@x.com", "alice")

        updated = UpdateNicknameUseCase(profiles).execute(alice, "  alice2 ")

        assert updated.nickname == "alice2"
        assert profiles.get(alice.user.id).nickname == "alice2"

    def test_keeping_own_nickname_is_allowed(self, profiles, make_user):
        alice = make_user("a@x.com", "alice")
        assert UpdateNicknameUseCase(profiles).execute(alice, "alice").nickname == "alice"

    def test_missing_profile_is_provisioned(self, profiles, make_user):
        ghost = make_user("g@x.com", with_profile=False)

        updated = UpdateNicknameUseCase(profiles).execute(ghost, "ghost")

        assert updated.nickname == "ghost"
        assert profiles.get(ghost.user.id).email == "g@x.com"

    def test_taken_nickname_conflicts(self, profiles, make_user):
        make_user("b@x.com", "bob")
        alice = make_user("a@x.com", "alice")

        with pytest.raises(BoardError) as err:
            UpdateNicknameUseCase(profiles).execute(alice, "bob")

        assert err.value.kind == ErrorKind.CONFLICT
        assert profiles.get(alice.user.id).nickname == "alice"

    def test_banned_user_cannot_rename(self, profiles, make_user):
        mallory = make_user("m@x.com", "mallory", banned=True)

        with pytest.raises(BoardError) as err:
            UpdateNicknameUseCase(profiles).execute(mallory, "innocent")

        assert err.value.kind == ErrorKind.FORBIDDEN
        assert profiles.get(mallory.user.id).nickname == "mallory"

    @pytest.mark.parametrize("nickname", ["", "   "])
    def test_blank_nickname_is_validation_error(self, profiles, make_user, nickname):
        alice = make_user("a@x.com", "alice")

        with pytest.raises(BoardError) as err:
            UpdateNicknameUseCase(profiles).execute(alice, nickname)

        assert err.value.kind == ErrorKind.VALIDATION

    def test_no_session_is_auth_error(self, profiles):
        with pytest.raises(BoardError) as err:
            UpdateNicknameUseCase(profiles).execute(None, "alice")

        assert err.value.kind == ErrorKind.AUTH
