"""Tests for the HTTP sessions used by the data sources."""

from __future__ import annotations

from unittest.mock import patch

import pytest
import requests
from urllib3.util.retry import Retry

from climate_envelope.services.http import (
    API_TIMEOUT,
    DEFAULT_RETRY,
    DOWNLOAD_TIMEOUT,
    create_session,
    download_session,
    session,
)


def sent_timeout(s: requests.Session, **kwargs: object) -> object:
    """Send a prepared GET through ``s`` and return the timeout the adapter saw."""
    prep = requests.Request("GET", "https://api.gbif.org/v1/occurrence/search").prepare()
    with patch.object(
        requests.adapters.HTTPAdapter, "send", return_value=requests.Response()
    ) as mock_send:
        s.send(prep, **kwargs)
    return mock_send.call_args.kwargs.get("timeout")


class TestRetryPolicy:
    """What the shared retry strategy reacts to."""

    @pytest.mark.parametrize("status", [429, 502, 503, 504])
    def test_retries_transient_status(self, status: int) -> None:
        assert DEFAULT_RETRY.is_retry("GET", status)

    @pytest.mark.parametrize("status", [400, 404, 500])
    def test_does_not_retry_other_errors(self, status: int) -> None:
        assert not DEFAULT_RETRY.is_retry("GET", status)

    def test_does_not_retry_post(self) -> None:
        assert not DEFAULT_RETRY.is_retry("POST", 503)

    def test_honours_retry_after(self) -> None:
        assert DEFAULT_RETRY.respect_retry_after_header is True


class TestCreateSession:
    """Session factory."""

    def test_mounts_retry_adapter(self) -> None:
        s = create_session(retry=Retry(total=9))
        for url in ("https://api.gbif.org", "http://example.com"):
            assert s.get_adapter(url).max_retries.total == 9

    def test_accept_header(self) -> None:
        assert create_session(accept="text/csv").headers["Accept"] == "text/csv"

    def test_default_timeout_injected(self) -> None:
        assert sent_timeout(create_session(timeout=(1.0, 2.0))) == (1.0, 2.0)

    def test_explicit_timeout_wins(self) -> None:
        assert sent_timeout(create_session(timeout=(1.0, 2.0)), timeout=99) == 99


class TestModuleSessions:
    """The two sessions the data sources import."""

    def test_api_session(self) -> None:
        assert session.headers["Accept"] == "application/json"
        assert session.headers["User-Agent"].startswith("climate-envelope/")
        assert sent_timeout(session) == API_TIMEOUT

    def test_download_session_waits_longer(self) -> None:
        assert "application/zip" in download_session.headers["Accept"]
        assert sent_timeout(download_session) == DOWNLOAD_TIMEOUT
        assert DOWNLOAD_TIMEOUT[1] > API_TIMEOUT[1]
