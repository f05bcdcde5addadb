"""Tests for the bearer token authenticator entity and its validity rules."""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from bearer_auth.authenticators import BearerTokenAuthenticator, LoginInfo

from conftest import T0


def make_authenticator(
    last_used_offset: int = 0,
    expiry: int = 43200,
    idle_timeout=timedelta(seconds=1800),
) -> BearerTokenAuthenticator:
    return BearerTokenAuthenticator(
        id="a" * 64,
        login_info=LoginInfo(provider_id="credentials", provider_key="alice"),
        last_used_date=T0 + timedelta(seconds=last_used_offset),
        expiration_date=T0 + timedelta(seconds=expiry),
        idle_timeout=idle_timeout,
    )


def at(seconds: int):
    return T0 + timedelta(seconds=seconds)


class TestValidity:
    """Tests for the combination of absolute and sliding expiration."""

    def test_fresh_authenticator_is_valid(self):
        assert make_authenticator().is_valid(T0)

    def test_valid_within_idle_timeout(self):
        """Idle timeout 1800s, expiry 43200s, checked at T0+1000."""
        authenticator = make_authenticator()
        assert authenticator.is_valid(at(1000))

    def test_idle_timeout_exceeded_without_touch(self):
        """At T0+1801 the authenticator timed out although it has not expired."""
        authenticator = make_authenticator()
        assert not authenticator.is_expired(at(1801))
        assert authenticator.is_timed_out(at(1801))
        assert not authenticator.is_valid(at(1801))

    def test_no_idle_timeout_valid_until_absolute_expiry(self):
        """Without an idle timeout only the absolute expiry counts."""
        authenticator = make_authenticator(expiry=200000, idle_timeout=None)
        assert authenticator.is_valid(at(100000))
        assert not authenticator.is_timed_out(at(199999))
        assert authenticator.is_valid(at(199999))
        assert not authenticator.is_valid(at(200000))

    def test_recent_use_does_not_override_absolute_expiry(self):
        authenticator = make_authenticator(last_used_offset=43100, expiry=43200)
        assert not authenticator.is_timed_out(at(43201))
        assert authenticator.is_expired(at(43201))
        assert not authenticator.is_valid(at(43201))

    def test_expiration_date_equal_to_now_is_expired(self):
        authenticator = make_authenticator()
        assert authenticator.is_expired(at(43200))
        assert not authenticator.is_valid(at(43200))
        assert not authenticator.is_expired(at(43199))

    def test_idle_boundary_is_timed_out(self):
        authenticator = make_authenticator()
        assert authenticator.is_timed_out(at(1800))
        assert not authenticator.is_timed_out(at(1799))

    @pytest.mark.parametrize("offset", [0, 500, 1799, 1800, 1801, 43199, 43200, 50000])
    def test_validity_matches_definition(self, offset):
        authenticator = make_authenticator()
        now = at(offset)
        expected = now < authenticator.expiration_date and (
            authenticator.idle_timeout is None
            or now < authenticator.last_used_date + authenticator.idle_timeout
        )
        assert authenticator.is_valid(now) == expected


class TestImmutability:
    """Authenticators are values; changes produce copies."""

    def test_fields_cannot_be_assigned(self):
        authenticator = make_authenticator()
        with pytest.raises(ValidationError):
            authenticator.last_used_date = at(10)

    def test_copy_leaves_original_untouched(self):
        authenticator = make_authenticator()
        touched = authenticator.model_copy(update={"last_used_date": at(1000)})

        assert authenticator.last_used_date == T0
        assert touched.last_used_date == at(1000)
        assert touched.expiration_date == authenticator.expiration_date
        assert touched.id == authenticator.id

    def test_string_form_does_not_leak_token(self):
        authenticator = make_authenticator()
        assert "a" * 64 not in str(authenticator)
        assert "a" * 64 not in repr(authenticator)
        assert "credentials:alice" in str(authenticator)

    def test_json_roundtrip_keeps_idle_timeout(self):
        authenticator = make_authenticator()
        restored = BearerTokenAuthenticator.model_validate_json(authenticator.model_dump_json())
        assert restored == authenticator
        assert restored.idle_timeout == timedelta(seconds=1800)
