"""Shared fixtures for api-test tests."""

import json

import pytest
from click.testing import CliRunner

from apitest.executor import RemoteError, RequestResult, TransportError


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def fake_home(tmp_path, monkeypatch):
    """Point HOME at a temp dir so tests never touch ~/.api_test_history.json."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("USERPROFILE", raising=False)
    return home


@pytest.fixture
def history_file(fake_home):
    return fake_home / ".api_test_history.json"


def read_history(path):
    return json.loads(path.read_text())


def make_request_result(
    status_code=200,
    body=None,
    headers=None,
    status_text="OK",
    elapsed_ms=42.0,
    raw_text="",
):
    """Factory for mock RequestResult objects."""
    r = RequestResult()
    r.status_code = status_code
    r.status_text = status_text
    r.headers = headers or {}
    r.body = body
    r.elapsed_ms = elapsed_ms
    r.raw_text = raw_text or (
        json.dumps(body) if isinstance(body, dict | list) else str(body or "")
    )
    return r


def make_remote_error(status_code=404, body=None, status_text="Not Found"):
    result = make_request_result(status_code=status_code, body=body, status_text=status_text)
    return RemoteError(f"Request failed with status code {status_code}", result=result)


def make_transport_error(message="Connection error: [Errno 111] Connection refused"):
    return TransportError(message)
