"""Integration tests for ``gcli authorize``.

The login and password are fed through the runner's stdin; the remote
``auth create`` call is answered by the scripted API.
"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from gcli.exceptions import AuthError
from gcli.models import HTTPMethod


@pytest.fixture(autouse=True)
def _wide_terminal(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("COLUMNS", "200")


def _read(path: Path) -> dict:
    return yaml.safe_load(path.read_text(encoding="utf-8"))


class TestAuthorize:
    def test_saves_credentials_and_token(self, invoke_cli, fake_api, isolated_config: Path) -> None:
        fake_api.result = {"id": 1, "token": "ghp_abc123"}

        result = invoke_cli("authorize", input="octocat\ns3cret\n")

        assert result.exit_code == 0, result.output
        path = isolated_config / "home" / ".gcliconfig"
        user = _read(path)["user"]
        assert user["login"] == "octocat"
        assert user["password"] == "s3cret"
        assert user["token"] == "ghp_abc123"
        assert _read(path)["core"]["endpoint"] == "https://api.github.com"
        assert "s3cret" not in result.output

    def test_calls_auth_create_with_default_scopes(self, invoke_cli, fake_api) -> None:
        fake_api.result = {"token": "t"}

        invoke_cli("authorize", input="octocat\ns3cret\n")

        [(endpoint, positionals, keywords)] = fake_api.calls
        assert endpoint.method == HTTPMethod.POST
        assert endpoint.path == "/authorizations"
        assert positionals == []
        assert keywords["scopes"] == ["public_repo", "repo"]
        assert keywords["note"] == "gcli"

    def test_scopes_and_note_flags(self, invoke_cli, fake_api) -> None:
        fake_api.result = {"token": "t"}

        invoke_cli("authorize", "--scopes", "gist", "--note", "laptop", input="o\np\n")

        keywords = fake_api.calls[0][2]
        assert keywords["scopes"] == ["gist"]
        assert keywords["note"] == "laptop"

    def test_client_uses_prompted_credentials(self, cli_runner, fake_api, isolated_config) -> None:
        from gcli.app import app

        seen = []
        fake_api.result = {"token": "t"}

        def factory(app_ctx):
            seen.append(
                (
                    app_ctx.config.fetch("user.login"),
                    app_ctx.config.fetch("user.password"),
                    app_ctx.config.fetch("user.token"),
                )
            )
            return fake_api

        result = cli_runner.invoke(
            app,
            ["--token", "old-token", "authorize"],
            obj={"client_factory": factory},
            input="octocat\ns3cret\n",
        )

        assert result.exit_code == 0, result.output
        assert seen == [("octocat", "s3cret", "")]

    def test_local(self, invoke_cli, fake_api, isolated_config: Path) -> None:
        fake_api.result = {"token": "t"}
        result = invoke_cli("authorize", "--local", input="o\np\n")
        assert result.exit_code == 0, result.output
        assert _read(isolated_config / "work" / ".gcliconfig")["user"]["token"] == "t"
        assert not (isolated_config / "home" / ".gcliconfig").exists()

    def test_existing_file_keeps_other_settings(self, invoke_cli, fake_api, isolated_config: Path) -> None:
        path = isolated_config / "home" / ".gcliconfig"
        path.write_text("core:\n  format: json\n", encoding="utf-8")
        fake_api.result = {"token": "t"}

        result = invoke_cli("authorize", input="y\noctocat\ns3cret\n")

        assert result.exit_code == 0, result.output
        data = _read(path)
        assert data["core"] == {"format": "json"}
        assert data["user"] == {"login": "octocat", "password": "s3cret", "token": "t"}

    def test_declining_leaves_file_untouched(self, invoke_cli, fake_api, isolated_config: Path) -> None:
        path = isolated_config / "home" / ".gcliconfig"
        path.write_text("core:\n  format: json\n", encoding="utf-8")

        result = invoke_cli("authorize", input="n\n")

        assert result.exit_code == 1
        assert "Not overwriting existing config file" in result.stderr
        assert fake_api.calls == []
        assert _read(path) == {"core": {"format": "json"}}

    def test_force_skips_question(self, invoke_cli, fake_api, isolated_config: Path) -> None:
        path = isolated_config / "home" / ".gcliconfig"
        path.write_text("core:\n  format: json\n", encoding="utf-8")
        fake_api.result = {"token": "t"}

        result = invoke_cli("authorize", "--force", input="octocat\ns3cret\n")

        assert result.exit_code == 0, result.output
        assert _read(path)["user"]["login"] == "octocat"

    def test_rejected_credentials(self, invoke_cli, fake_api, isolated_config: Path) -> None:
        fake_api.error = AuthError("HTTP 401: Bad credentials")

        result = invoke_cli("authorize", input="octocat\nwrong\n")

        assert result.exit_code == 3
        assert "Bad credentials" in result.stderr
        assert not (isolated_config / "home" / ".gcliconfig").exists()

    def test_missing_token_in_response(self, invoke_cli, fake_api, isolated_config: Path) -> None:
        fake_api.result = {"id": 1}
        result = invoke_cli("authorize", input="o\np\n")
        assert result.exit_code == 5
        assert not (isolated_config / "home" / ".gcliconfig").exists()

    def test_whoami_after_authorize(self, invoke_cli, fake_api) -> None:
        fake_api.result = {"token": "t"}
        invoke_cli("authorize", input="octocat\ns3cret\n")
        assert invoke_cli("whoami").stdout.strip() == "octocat"
