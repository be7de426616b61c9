"""Postman API client wrapper around httpx.

Uploads run one request per API key, concurrently. Each outcome is captured
in an ``UploadResult`` so one failure never hides another; the caller decides
what to do with the ``UploadReport``.
"""

import asyncio
import logging

import httpx
from pydantic import BaseModel

from postman_builder.exceptions import UploadError

logger = logging.getLogger(__name__)

POSTMAN_API_URL = "https://api.getpostman.com/"
DEFAULT_TIMEOUT = 30.0


def mask_key(api_key: str) -> str:
    """Keep only the last four characters of an API key for display."""
    return f"...{api_key[-4:]}" if len(api_key) > 4 else "****"


class UploadResult(BaseModel):
    key: str  # masked
    ok: bool
    status_code: int | None = None
    error: str | None = None


class UploadReport(BaseModel):
    """Outcome of one upload batch, one result per API key in input order."""

    results: list[UploadResult] = []

    @property
    def failures(self) -> list[UploadResult]:
        return [r for r in self.results if not r.ok]

    @property
    def ok(self) -> bool:
        return not self.failures

    def raise_for_failures(self) -> None:
        if self.failures:
            raise UploadError(self.failures)


class PostmanClient:
    """Uploads collections to the Postman API."""

    def __init__(
        self,
        base_url: str = POSTMAN_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self._transport = transport

    async def upload_collection(self, client: httpx.AsyncClient, api_key: str, collection: dict) -> UploadResult:
        """POST one collection with one API key and record the outcome."""
        key = mask_key(api_key)
        try:
            response = await client.post(
                "collections",
                headers={"X-Api-Key": api_key},
                json={"collection": collection},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            return UploadResult(key=key, ok=False, status_code=status, error=f"HTTP {status}: {e.response.text[:200]}")
        except httpx.HTTPError as e:
            return UploadResult(key=key, ok=False, error=f"{type(e).__name__}: {e}")
        return UploadResult(key=key, ok=True, status_code=response.status_code)

    async def upload_all(self, collection: dict, api_keys: list[str], deadline: float | None = None) -> UploadReport:
        """Upload *collection* once per key; uploads still running at *deadline* are cancelled."""
        if not api_keys:
            return UploadReport()

        async with httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self._transport) as client:
            tasks = [asyncio.create_task(self.upload_collection(client, key, collection)) for key in api_keys]
            _, pending = await asyncio.wait(tasks, timeout=deadline)
            for task in pending:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        results = []
        for api_key, task in zip(api_keys, tasks):
            if task in pending:
                results.append(UploadResult(key=mask_key(api_key), ok=False, error=f"deadline of {deadline}s exceeded"))
            elif task.exception() is not None:
                error = task.exception()
                results.append(UploadResult(key=mask_key(api_key), ok=False, error=f"{type(error).__name__}: {error}"))
            else:
                results.append(task.result())

        for result in results:
            if result.ok:
                logger.info("Uploaded collection with key %s (HTTP %s)", result.key, result.status_code)
            else:
                logger.warning("Upload with key %s failed: %s", result.key, result.error)
        return UploadReport(results=results)


def upload(
    collection: dict,
    api_keys: list[str],
    timeout: float = DEFAULT_TIMEOUT,
    deadline: float | None = None,
    client: PostmanClient | None = None,
) -> UploadReport:
    """Blocking entry point for :meth:`PostmanClient.upload_all`."""
    client = client or PostmanClient(timeout=timeout)
    return asyncio.run(client.upload_all(collection, api_keys, deadline))
