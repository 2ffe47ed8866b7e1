from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from pydantic import ValidationError

from models.snapshot import MonitorPayload

from .base import FetchError, ServiceRecord, Snapshot, now_utc

log = logging.getLogger("heartboard.monitor")

DEFAULT_MONITOR_URL = "http://localhost:8080/monitor/services"


def _get_json(url: str, timeout_s: float) -> dict:
    req = Request(
        url,
        headers={"Accept": "application/json", "User-Agent": "heartboard/0.1"},
        method="GET",
    )
    with urlopen(req, timeout=timeout_s) as resp:
        payload = json.loads(resp.read().decode("utf-8"))

    if not isinstance(payload, dict):
        raise ValueError(f"Expected JSON object, got {type(payload).__name__}")

    return payload


def parse_snapshot(data: dict) -> Snapshot:
    """Validate a monitor body and turn it into a Snapshot.

    Only the envelope is strict: a body without a ``services`` object is a
    failed fetch. Individual records are read leniently, so one garbled entry
    shows up as a dead service instead of hiding the whole fleet.
    """
    try:
        payload = MonitorPayload.model_validate(data)
    except ValidationError as exc:
        raise FetchError(f"Monitor payload invalid: {exc.error_count()} error(s)") from exc

    services = {name: ServiceRecord.from_raw(raw) for name, raw in payload.services.items()}
    return Snapshot(
        services=services,
        captured_at=now_utc(),
        reported_total=payload.total_services,
        reported_at=payload.timestamp,
    )


@dataclass(frozen=True)
class MonitorFetcher:
    url: str = DEFAULT_MONITOR_URL
    timeout_s: float = 2.0

    def fetch(self) -> Snapshot:
        try:
            data = _get_json(self.url, timeout_s=self.timeout_s)
        except HTTPError as e:
            raise FetchError(f"Health Monitor not responding (HTTP {e.code})") from e
        except URLError as e:
            raise FetchError(f"Health Monitor unreachable: {getattr(e, 'reason', e)}") from e
        except (ValueError, UnicodeDecodeError) as e:
            # json.JSONDecodeError is a ValueError
            raise FetchError(f"Health Monitor sent an unreadable body: {e}") from e

        snapshot = parse_snapshot(data)
        log.debug("fetched %d service(s) from %s", len(snapshot), self.url)
        return snapshot
