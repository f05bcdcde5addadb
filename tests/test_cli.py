"""Tests for the token management CLI."""

import pytest
from typer.testing import CliRunner

from bearer_auth.cli import token_cli
from bearer_auth.cli.main_cli import app

from conftest import make_service

runner = CliRunner()


@pytest.fixture
def cli_service(store, clock, id_generator, monkeypatch):
    service = make_service(store, clock=clock, id_generator=id_generator)

    async def fake_get_authenticator_service():
        return service

    monkeypatch.setattr(token_cli, "get_authenticator_service", fake_get_authenticator_service)
    return service


class TestTokenCommands:
    def test_issue_prints_token(self, cli_service):
        result = runner.invoke(app, ["token", "issue", "credentials", "alice@example.com"])

        assert result.exit_code == 0
        assert "token-0001" in result.output

    def test_show_issued_token(self, cli_service):
        runner.invoke(app, ["token", "issue", "credentials", "alice@example.com"])

        result = runner.invoke(app, ["token", "show", "token-0001"])

        assert result.exit_code == 0
        assert '"provider_key": "alice@example.com"' in result.output
        assert '"valid": true' in result.output
        assert "token-0001" not in result.output

    def test_show_reports_timed_out_token(self, cli_service, clock):
        runner.invoke(app, ["token", "issue", "credentials", "alice@example.com"])
        clock.advance(1801)

        result = runner.invoke(app, ["token", "show", "token-0001"])

        assert result.exit_code == 0
        assert '"valid": false' in result.output

    def test_show_unknown_token(self, cli_service):
        result = runner.invoke(app, ["token", "show", "missing"])

        assert result.exit_code == 1
        assert "Token not found" in result.output

    def test_revoke_removes_token(self, cli_service, store):
        runner.invoke(app, ["token", "issue", "credentials", "alice@example.com"])

        result = runner.invoke(app, ["token", "revoke", "token-0001"])

        assert result.exit_code == 0
        assert "Token revoked" in result.output
        assert runner.invoke(app, ["token", "show", "token-0001"]).exit_code == 1

    def test_revoke_unknown_token(self, cli_service):
        result = runner.invoke(app, ["token", "revoke", "missing"])
        assert result.exit_code == 1

    def test_service_error_exits_with_message(self, cli_service, monkeypatch):
        async def broken_find(authenticator_id):
            raise ConnectionError("store down")

        monkeypatch.setattr(cli_service.store, "find", broken_find)

        result = runner.invoke(app, ["token", "show", "token-0001"])

        assert result.exit_code == 1
        assert "Could not retrieve authenticator" in result.output


def test_no_arguments_shows_help():
    result = runner.invoke(app, [])
    assert "token" in result.output
