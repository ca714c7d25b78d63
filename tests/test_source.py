"""
Source acquisition without hitting the network: requests.get is patched.
"""

import asyncio
from unittest.mock import Mock, patch

import pytest
import requests
from bpsummary import source as source_module
from bpsummary.errors import SourceUnavailable
from bpsummary.source import fetch_source, read_source, resolve_location


def test_named_source_resolves_against_base(monkeypatch):
    monkeypatch.setattr(source_module, "BASE_URL", "https://example.org/exports")
    assert resolve_location("home") == "https://example.org/exports/home.csv"
    assert resolve_location("other.csv") == "other.csv"


def test_bytes_pass_through():
    assert read_source(b"abc") == b"abc"
    assert asyncio.run(fetch_source(b"abc")) == b"abc"


def test_read_file(tmp_path):
    path = tmp_path / "export.csv"
    path.write_bytes(b"Date,Time\n")
    assert read_source(str(path)) == b"Date,Time\n"
    assert asyncio.run(fetch_source(path)) == b"Date,Time\n"


def test_missing_file_is_unavailable(tmp_path):
    with pytest.raises(SourceUnavailable):
        read_source(str(tmp_path / "nope.csv"))


def test_url_fetch_uses_requests():
    resp = Mock(status_code=200, content=b"payload")
    with patch("bpsummary.source.requests.get", return_value=resp) as get:
        assert read_source("https://example.org/x.csv", timeout=3) == b"payload"
    get.assert_called_once_with("https://example.org/x.csv", timeout=3)


def test_url_fetch_failure_is_unavailable_and_not_retried():
    with patch(
        "bpsummary.source.requests.get", side_effect=requests.ConnectionError("down")
    ) as get:
        with pytest.raises(SourceUnavailable):
            asyncio.run(fetch_source("https://example.org/x.csv"))
    assert get.call_count == 1


def test_http_error_status_is_unavailable():
    resp = Mock(status_code=404)
    resp.raise_for_status.side_effect = requests.HTTPError("404")
    with patch("bpsummary.source.requests.get", return_value=resp):
        with pytest.raises(SourceUnavailable):
            read_source("https://example.org/x.csv")
