"""Shared test fixtures.

Every test runs with HTB_API_KEY and CS_OPT pointing at throwaway values,
and HTTP goes through an in-memory ``httpx.MockTransport``.
"""

from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import httpx
import pytest

from htbcli.client import HtbClient
from htbcli.config import API_URL, get_settings

Routes = dict[tuple[str, str], Any]


class FakeApi:
    """Serves canned envelopes keyed by (method, path below /api/v4/)."""

    def __init__(self, routes: Routes) -> None:
        self.routes = routes
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api/v4/")
        key = (request.method, path)
        if key not in self.routes:
            return httpx.Response(404, json={"message": "Not Found"})
        body = self.routes[key]
        if isinstance(body, (bytes, str)):
            return httpx.Response(200, content=body)
        return httpx.Response(200, json=body)

    def client(self) -> HtbClient:
        return HtbClient(
            "test-token",
            base_url=API_URL,
            transport=httpx.MockTransport(self.handler),
        )


@pytest.fixture(autouse=True)
def htb_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point settings at a temporary lab root and a fake token.

    Runs from tmp_path so a developer's .env / .env.local is never read.
    """
    monkeypatch.chdir(tmp_path)
    lab_root = tmp_path / "opt"
    lab_root.mkdir()
    monkeypatch.setenv("HTB_API_KEY", "test-token")
    monkeypatch.setenv("CS_OPT", str(lab_root))
    monkeypatch.delenv("HTB_API_URL", raising=False)
    get_settings.cache_clear()
    yield lab_root
    get_settings.cache_clear()


@pytest.fixture
def fake_api() -> Callable[[Routes], FakeApi]:
    """Factory building a FakeApi from a route table."""
    return FakeApi


@pytest.fixture
def lame_json() -> dict[str, Any]:
    """A machine object shaped like the profile endpoint's ``info``."""
    return {
        "id": 1,
        "name": "Lame",
        "os": "Linux",
        "difficultyText": "Easy",
        "ip": "10.10.10.3",
        "stars": 4.4,
    }


@pytest.fixture
def machine_list_json(lame_json: dict[str, Any]) -> list[dict[str, Any]]:
    """A short machine list mixing operating systems and difficulties."""
    return [
        lame_json,
        {"id": 2, "name": "Legacy", "os": "Windows", "difficultyText": "Easy", "ip": None},
        {"id": 3, "name": "Devel", "os": "Windows", "difficultyText": "Medium", "ip": None},
        {"id": 4, "name": "Meow", "os": "Linux", "difficultyText": "Very Easy", "ip": None},
        {"id": 5, "name": "Brainfuck", "os": "Linux", "difficultyText": "Insane", "ip": None},
    ]
