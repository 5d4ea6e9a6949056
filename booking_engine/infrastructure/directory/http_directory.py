from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError as RecordError

from booking_engine.application.dto.directory_records import ProviderRecord, ServiceRecord, ShopRecord
from booking_engine.application.exceptions import UpstreamFailure
from booking_engine.application.ports.directory import DirectoryPort
from booking_engine.application.ports.service_catalog import ServiceCatalogPort
from booking_engine.core.config import settings
from booking_engine.domain.entities.provider import Provider, Shop
from booking_engine.domain.entities.service_catalog import ServiceEntry


class DirectoryClient:
    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._base_url = (base_url or settings.DIRECTORY_BASE_URL or "").rstrip("/")
        self._api_key = api_key or settings.DIRECTORY_API_KEY
        self._client = client or httpx.Client(timeout=timeout or settings.UPSTREAM_TIMEOUT_SECONDS)
        self._logger = logging.getLogger(__name__)

        if not self._base_url:
            raise ValueError("DIRECTORY_BASE_URL is required for the HTTP directory")

    def fetch(self, path: str) -> dict[str, Any] | None:
        """GET a JSON document; None on 404. Unwraps a ``{"data": ...}`` envelope."""
        headers = {"Authorization": f"Bearer {self._api_key}"} if self._api_key else {}
        url = f"{self._base_url}{path}"
        try:
            response = self._client.get(url, headers=headers)
        except httpx.HTTPError as e:
            self._logger.error("Directory request failed", extra={"error": str(e), "url": url})
            raise UpstreamFailure(f"Directory unreachable: {e}") from e

        if response.status_code == 404:
            return None
        if response.status_code >= 400:
            self._logger.error(
                "Directory returned error",
                extra={"status": response.status_code, "url": url},
            )
            raise UpstreamFailure(f"Directory returned {response.status_code} for {path}")

        try:
            body = response.json()
        except ValueError as e:
            raise UpstreamFailure(f"Directory returned invalid JSON for {path}") from e
        if isinstance(body, dict) and isinstance(body.get("data"), dict):
            return body["data"]
        return body


class HttpDirectory(DirectoryPort):
    def __init__(self, client: DirectoryClient | None = None) -> None:
        self._client = client or DirectoryClient()

    def get_provider(self, provider_id: str) -> Provider | None:
        data = self._client.fetch(f"/providers/{provider_id}")
        if data is None:
            return None
        try:
            return ProviderRecord.model_validate(data).to_entity()
        except (RecordError, ValueError) as e:
            raise UpstreamFailure(f"Directory sent a malformed provider {provider_id}: {e}") from e

    def get_shop(self, shop_id: str) -> Shop | None:
        data = self._client.fetch(f"/shops/{shop_id}")
        if data is None:
            return None
        try:
            return ShopRecord.model_validate(data).to_entity()
        except (RecordError, ValueError) as e:
            raise UpstreamFailure(f"Directory sent a malformed shop {shop_id}: {e}") from e


class HttpServiceCatalog(ServiceCatalogPort):
    def __init__(self, client: DirectoryClient | None = None, default_duration: int = 30) -> None:
        self._client = client or DirectoryClient()
        self._default_duration = default_duration

    def get_service(self, service_id: str) -> ServiceEntry | None:
        data = self._client.fetch(f"/services/{service_id}")
        if data is None:
            return None
        try:
            return ServiceRecord.model_validate(data).to_entity(self._default_duration)
        except RecordError as e:
            raise UpstreamFailure(f"Catalog sent a malformed service {service_id}: {e}") from e
