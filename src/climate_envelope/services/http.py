"""
HTTP sessions for the remote data sources.

Two pre-configured ``requests.Session`` objects share one retry policy
(connection errors plus 429/502/503/504, exponential backoff, honouring
``Retry-After``) but differ in what they fetch:

- ``session``: small JSON responses from the GBIF API.
- ``download_session``: large WorldClim zip archives, streamed, with a
  long read timeout.

Usage::

    from climate_envelope.services.http import session

    resp = session.get("https://api.gbif.org/v1/occurrence/search", params={...})
    resp.raise_for_status()
"""

from __future__ import annotations

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from climate_envelope import __version__

#: GBIF rate-limits bursts with 429; WorldClim mirrors occasionally 503.
DEFAULT_RETRY = Retry(
    total=4,
    backoff_factor=2,  # 0s, 2s, 4s, 8s between retries
    status_forcelist=[429, 502, 503, 504],
    allowed_methods=["GET", "HEAD"],
    respect_retry_after_header=True,
    raise_on_status=False,  # callers use resp.raise_for_status()
)

#: (connect, read) in seconds
API_TIMEOUT = (10.0, 30.0)
DOWNLOAD_TIMEOUT = (10.0, 300.0)

USER_AGENT = f"climate-envelope/{__version__} (+https://www.gbif.org/developer/summary)"


def create_session(
    retry: Retry | None = None,
    timeout: float | tuple[float, float] = API_TIMEOUT,
    *,
    accept: str = "application/json",
) -> requests.Session:
    """
    Build a ``requests.Session`` with the retry adapter mounted.

    Args:
        retry: Retry strategy (defaults to ``DEFAULT_RETRY``).
        timeout: Timeout used when a request does not pass one.
        accept: ``Accept`` header sent with every request.
    """
    s = requests.Session()
    adapter = HTTPAdapter(max_retries=retry or DEFAULT_RETRY)
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    s.headers.update({"User-Agent": USER_AGENT, "Accept": accept})

    send = s.send

    def send_with_timeout(
        prepared: requests.PreparedRequest, **kwargs: object
    ) -> requests.Response:
        kwargs.setdefault("timeout", timeout)
        return send(prepared, **kwargs)  # type: ignore[arg-type]

    s.send = send_with_timeout  # type: ignore[method-assign]
    return s


#: GBIF API client session.
session: requests.Session = create_session()

#: WorldClim archive downloads.
download_session: requests.Session = create_session(
    timeout=DOWNLOAD_TIMEOUT, accept="application/zip, application/octet-stream"
)
