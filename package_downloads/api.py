from __future__ import annotations

import datetime
import http.client
import json
import math
import urllib.error
import urllib.parse
import urllib.request
from typing import Dict, List, Optional

from .data import PackageMetadata, Sample


NPM_REGISTRY_URL = "https://registry.npmjs.org"
NPM_DOWNLOADS_API_URL = "https://api.npmjs.org"
USER_AGENT = "package-downloads/0.1"
DEFAULT_TIMEOUT = 10


class ApiError(RuntimeError):
    """Raised when a registry or downloads API request fails."""


def _make_request(
    url: str,
    timeout: float,
    headers: Optional[Dict[str, str]] = None,
) -> bytes:
    request_headers = {
        "User-Agent": USER_AGENT,
        "Accept": "application/json",
    }
    if headers:
        request_headers.update(headers)
    request = urllib.request.Request(
        url,
        headers=request_headers,
        method="GET",
    )
    try:
        with urllib.request.urlopen(request, timeout=timeout) as response:
            return response.read()
    except urllib.error.HTTPError as exc:
        message = f"{exc.code} {exc.reason}"
        body = _read_error_body(exc)
        if body:
            message = f"{message} - {body}"
        raise ApiError(message) from exc
    except urllib.error.URLError as exc:
        raise ApiError(str(exc.reason)) from exc
    except (OSError, http.client.HTTPException) as exc:
        raise ApiError(str(exc) or type(exc).__name__) from exc


def _read_error_body(exc: urllib.error.HTTPError) -> str:
    try:
        return exc.read().decode("utf-8", "replace").strip()
    except (OSError, AttributeError):
        return ""


def _fetch_json(url: str, timeout: float) -> dict:
    payload = _make_request(url, timeout)
    try:
        data = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ApiError(f"Invalid JSON from {url}: {exc}") from exc
    if not isinstance(data, dict):
        raise ApiError(f"Unexpected response shape from {url}.")
    return data


def _quote_package(name: str) -> str:
    # scoped names keep their leading "@" but the slash must be encoded
    return urllib.parse.quote(name, safe="@")


def _extract_text(value: object) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _extract_count(value: object) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return int(value)
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def fetch_package_metadata(
    name: str,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    registry_url: str = NPM_REGISTRY_URL,
) -> PackageMetadata:
    """Fetch the registry document for ``name`` and keep the summary fields."""
    url = f"{registry_url.rstrip('/')}/{_quote_package(name)}"
    data = _fetch_json(url, timeout)
    dist_tags = data.get("dist-tags")
    latest = dist_tags.get("latest") if isinstance(dist_tags, dict) else None
    return PackageMetadata(
        name=_extract_text(data.get("name")) or name,
        description=_extract_text(data.get("description")),
        latest_version=_extract_text(latest),
        homepage=_extract_text(data.get("homepage")),
    )


def parse_download_rows(rows: object) -> List[Sample]:
    """Turn ``[{"day": ..., "downloads": ...}]`` rows into samples, skipping bad rows."""
    samples: List[Sample] = []
    if not isinstance(rows, list):
        return samples
    for row in rows:
        if not isinstance(row, dict):
            continue
        day = row.get("day")
        count = _extract_count(row.get("downloads"))
        if not isinstance(day, str) or count is None:
            continue
        try:
            parsed = datetime.date.fromisoformat(day)
        except ValueError:
            continue
        samples.append(Sample(date=parsed, value=max(count, 0)))
    samples.sort(key=lambda sample: sample.date)
    return samples


def fetch_download_range(
    name: str,
    start: datetime.date,
    end: datetime.date,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    api_url: str = NPM_DOWNLOADS_API_URL,
) -> List[Sample]:
    """Fetch daily download counts for ``name`` between ``start`` and ``end`` inclusive."""
    date_range = f"{start.isoformat()}:{end.isoformat()}"
    url = f"{api_url.rstrip('/')}/downloads/range/{date_range}/{name}"
    data = _fetch_json(url, timeout)
    if "downloads" not in data and data.get("error"):
        raise ApiError(str(data["error"]))
    return parse_download_rows(data.get("downloads"))
