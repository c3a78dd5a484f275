from __future__ import annotations

from unittest.mock import Mock

import pytest

from src.application.errors import store_errors
from src.application.use_cases.provision_profile import ProvisionOutcome, ProvisionProfileUseCase
from src.application.use_cases.sign_up import SignUpUseCase
from src.domain.entities.profile import ProfileEntity
from src.domain.entities.session import UserInfo
from src.domain.errors import BoardError, ErrorKind
from src.infrastructure.database import supabase_client
from src.infrastructure.database.supabase_client import SupabaseAuthAdapter


class TestProvisionProfile:
    def test_creates_profile_once(self, profiles):
        user = UserInfo(id="u-1", email="a@x.com")
        uc = ProvisionProfileUseCase(profiles)

        assert uc.execute(user) == ProvisionOutcome.CREATED
        assert uc.execute(user) == ProvisionOutcome.EXISTS

        prof = profiles.get("u-1")
        assert prof.email == "a@x.com"
        assert prof.nickname is None
        assert prof.is_admin is False
        assert prof.banned is False
        assert len(profiles.list_recent(10)) == 1

    def test_stores_given_nickname(self, profiles):
        ProvisionProfileUseCase(profiles).execute(UserInfo(id="u-1", email=None), "alice")
        assert profiles.get("u-1").nickname == "alice"

    def test_no_identity_is_skipped(self, profiles):
        assert ProvisionProfileUseCase(profiles).execute(None) == ProvisionOutcome.SKIPPED

    def test_store_failure_is_swallowed(self):
        repo = Mock()
        repo.get.side_effect = RuntimeError("DB get profile failed: timeout")

        outcome = ProvisionProfileUseCase(repo).execute(UserInfo(id="u-1", email="a@x.com"))

        assert outcome == ProvisionOutcome.FAILED
        repo.create.assert_not_called()

    def test_constraint_violation_is_swallowed(self, profiles):
        profiles.create("u-0", "first@x.com", "alice")
        outcome = ProvisionProfileUseCase(profiles).execute(UserInfo(id="u-1", email="b@x.com"), "alice")

        assert outcome == ProvisionOutcome.FAILED
        assert profiles.get("u-1") is None


class TestSignUp:
    def test_creates_identity_and_profile(self, auth, profiles):
        result = SignUpUseCase(auth, profiles).execute("a@x.com", "pw", "alice")

        assert result.confirmation_required is False
        assert result.provisioning == ProvisionOutcome.CREATED
        prof = profiles.get(result.user.id)
        assert prof.nickname == "alice"
        assert prof.email == "a@x.com"

    def test_taken_nickname_conflicts_before_identity_creation(self, auth, profiles):
        SignUpUseCase(auth, profiles).execute("a@x.com", "pw", "alice")

        with pytest.raises(BoardError) as err:
            SignUpUseCase(auth, profiles).execute("b@x.com", "pw", "alice")

        assert err.value.kind == ErrorKind.CONFLICT
        assert "b@x.com" not in supabase_client._MEM_IDENTITIES
        assert len(profiles.list_recent(10)) == 1

    def test_conflict_never_reaches_gateway(self):
        gateway = Mock()
        repo = Mock()
        repo.get_by_nickname.return_value = ProfileEntity(id="u-0", email=None, nickname="alice")

        with pytest.raises(BoardError) as err:
            SignUpUseCase(gateway, repo).execute("b@x.com", "pw", "alice")

        assert err.value.kind == ErrorKind.CONFLICT
        gateway.sign_up.assert_not_called()
        repo.create.assert_not_called()

    @pytest.mark.parametrize(
        "email,password,nickname",
        [("", "pw", "alice"), ("a@x.com", "", "alice"), ("a@x.com", "pw", "   "), (" ", " ", " ")],
    )
    def test_blank_fields_fail_validation_without_store_calls(self, email, password, nickname):
        gateway = Mock()
        repo = Mock()

        with pytest.raises(BoardError) as err:
            SignUpUseCase(gateway, repo).execute(email, password, nickname)

        assert err.value.kind == ErrorKind.VALIDATION
        assert repo.mock_calls == []
        assert gateway.mock_calls == []

    def test_deferred_identity_creates_no_profile(self, profiles):
        deferred = SupabaseAuthAdapter(require_confirmation=True)

        result = SignUpUseCase(deferred, profiles).execute("a@x.com", "pw", "alice")

        assert result.confirmation_required is True
        assert result.provisioning is None
        assert profiles.list_recent(10) == []

    def test_failed_nickname_check_is_store_error(self):
        gateway = Mock()
        repo = Mock()
        repo.get_by_nickname.side_effect = RuntimeError("DB get profile by nickname failed: down")

        with pytest.raises(BoardError) as err:
            SignUpUseCase(gateway, repo).execute("a@x.com", "pw", "alice")

        assert err.value.kind == ErrorKind.STORE_ERROR
        gateway.sign_up.assert_not_called()

    def test_gateway_rejection_is_validation_error(self, auth, profiles):
        SignUpUseCase(auth, profiles).execute("a@x.com", "pw", "alice")

        with pytest.raises(BoardError) as err:
            SignUpUseCase(auth, profiles).execute("a@x.com", "pw", "bob")

        assert err.value.kind == ErrorKind.VALIDATION
        assert profiles.get_by_nickname("bob") is None

    def test_gateway_outage_is_store_error(self, profiles):
        gateway = Mock()
        gateway.sign_up.side_effect = RuntimeError("Auth sign-up failed: 503")

        with pytest.raises(BoardError) as err:
            SignUpUseCase(gateway, profiles).execute("a@x.com", "pw", "alice")

        assert err.value.kind == ErrorKind.STORE_ERROR


def test_store_errors_converts_runtime_errors():
    with pytest.raises(BoardError) as err:
        with store_errors("load posts"):
            raise RuntimeError("DB list posts failed: boom")
    assert err.value.kind == ErrorKind.STORE_ERROR
    assert "load posts" in err.value.message


def test_store_errors_lets_board_errors_through():
    with pytest.raises(BoardError) as err:
        with store_errors("load posts"):
            raise BoardError(ErrorKind.NOT_FOUND, "Post not found.")
    assert err.value.kind == ErrorKind.NOT_FOUND
