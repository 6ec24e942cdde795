# pricescout/services/health_checker.py

"""Reachability probe for each platform's homepage.

This is a cheap pre-flight check, separate from extraction: it fetches
the homepage with a browser-impersonating ``curl_cffi`` session instead
of launching Chromium, so it can run while the browser is busy.
"""

import asyncio
import importlib
import logging
import time
from dataclasses import dataclass

from curl_cffi import requests as curl_requests

from pricescout.config.settings import Settings

logger = logging.getLogger("pricescout.health")


@dataclass
class HealthResult:
    """Outcome of probing one platform."""

    source_id: str
    status: str  # "ok", "slow", "down"
    latency_ms: float
    message: str
    url: str = ""


def _origin_for(source: dict[str, str]) -> str:
    """ORIGIN of the extractor class registered for ``source``."""
    module_path, class_name = source["extractor"].rsplit(".", 1)
    module = importlib.import_module(module_path)
    origin: str = getattr(module, class_name).ORIGIN
    return origin


def _classify(status_code: int, elapsed_ms: float) -> tuple[str, str]:
    if status_code != 200:
        return "down", f"HTTP {status_code}"
    if elapsed_ms > Settings.HEALTH_SLOW_MS:
        return "slow", "High latency"
    return "ok", ""


def probe_source(source: dict[str, str]) -> HealthResult:
    """Fetch one platform homepage and grade the response.

    Runs synchronously; :class:`HealthChecker` calls it from worker
    threads.  Never raises.
    """
    source_id = source["id"]
    try:
        origin = _origin_for(source)
    except Exception as exc:
        return HealthResult(
            source_id, "down", 0.0, f"Failed to load extractor: {exc}"
        )

    url = f"{origin}/"
    start = time.monotonic()
    try:
        with curl_requests.Session(
            impersonate=Settings.IMPERSONATE_BROWSER
        ) as session:
            resp = session.get(
                url,
                headers={**Settings.DEFAULT_HEADERS, "Referer": origin},
                timeout=Settings.HEALTH_TIMEOUT,
            )
    except Exception as exc:
        elapsed_ms = (time.monotonic() - start) * 1000
        return HealthResult(
            source_id, "down", elapsed_ms, str(exc)[:80], url
        )

    elapsed_ms = (time.monotonic() - start) * 1000
    status, message = _classify(resp.status_code, elapsed_ms)
    return HealthResult(source_id, status, elapsed_ms, message, url)


class HealthChecker:
    """Probes every registered platform concurrently."""

    def __init__(self, sources: list[dict[str, str]] | None = None) -> None:
        self.sources = (
            sources if sources is not None else Settings.AVAILABLE_SOURCES
        )

    async def check_all(self) -> list[HealthResult]:
        results: list[HealthResult] = list(
            await asyncio.gather(
                *(asyncio.to_thread(probe_source, src) for src in self.sources)
            )
        )
        for r in results:
            log = logger.warning if r.status == "down" else logger.info
            log(
                "Health check %s: %s (%.0fms) %s",
                r.source_id,
                r.status,
                r.latency_ms,
                r.message,
            )
        return results
