"""Shared pytest fixtures for the gcli test suite.

Provides:
- ``isolated_config``: isolates HOME, XDG data dir and the working directory
- ``registry``: the full command registry built from the resource modules
- ``output``: an uncoloured :class:`~gcli.output.OutputManager`
- ``fake_api``: a scripted stand-in for :class:`~gcli.client.GitHubClient`
- ``cli_runner`` / ``invoke_cli``: run the real Typer app against ``fake_api``
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Optional, Sequence

import pytest

from gcli.models import Endpoint
from gcli.output import OutputManager
from gcli.registry import CommandRegistry
from gcli.resources import build_registry


class FakeAPI:
    """Records every ``invoke`` call and answers with a canned result.

    Usable wherever the router or the app expects a remote client: it is a
    context manager and exposes ``invoke``.  Setting ``error`` makes the
    next call raise it instead of returning ``result``.
    """

    def __init__(self, result: Any = None) -> None:
        self.result = result
        self.error: Optional[BaseException] = None
        self.calls: list[tuple[Endpoint, list[Any], dict[str, Any]]] = []

    def __enter__(self) -> FakeAPI:
        return self

    def __exit__(self, *args: object) -> None:
        pass

    def invoke(
        self,
        endpoint: Endpoint,
        positionals: Sequence[Any],
        keywords: dict[str, Any],
    ) -> Any:
        self.calls.append((endpoint, list(positionals), dict(keywords)))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME and XDG_DATA_HOME into tmp_path, disable colour, chdir into a work dir.

    Returns the tmp_path root.  The home directory is ``tmp_path / "home"``
    and the working directory ``tmp_path / "work"``.
    """
    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.delenv("PAGER", raising=False)
    monkeypatch.delenv("FORCE_COLOR", raising=False)
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.chdir(work)
    return tmp_path


@pytest.fixture(scope="session")
def registry() -> CommandRegistry:
    """The frozen registry of every API command."""
    return build_registry()


@pytest.fixture
def output(capsys: pytest.CaptureFixture[str]) -> OutputManager:
    """An OutputManager bound to the captured stdout / stderr."""
    return OutputManager(no_color=True)


@pytest.fixture
def fake_api() -> FakeAPI:
    return FakeAPI()


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()


@pytest.fixture
def invoke_cli(cli_runner, fake_api: FakeAPI, isolated_config: Path) -> Callable[..., Any]:
    """Invoke the real ``gcli`` app with ``fake_api`` as the remote client.

    Example::

        result = invoke_cli("ref:update", "octocat", "hello", "heads/main", "--sha", "aa2")
    """
    from gcli.app import app

    def _invoke(*args: str, input: Optional[str] = None):
        return cli_runner.invoke(
            app,
            list(args),
            obj={"client_factory": lambda app_ctx: fake_api},
            input=input,
        )

    return _invoke
