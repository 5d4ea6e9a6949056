from __future__ import annotations

import re

import httpx
import pytest

from booking_engine.application.exceptions import UpstreamFailure, ValidationError
from booking_engine.application.ports.notifier import NotificationEvent
from booking_engine.application.utils.identifiers import generate_uid
from booking_engine.application.utils.time_input import parse_booking_date, parse_time_slot
from booking_engine.domain.entities.provider import ProviderKind
from booking_engine.infrastructure.directory.http_directory import (
    DirectoryClient,
    HttpDirectory,
    HttpServiceCatalog,
)
from booking_engine.infrastructure.notifications.webhook_notifier import WebhookNotifier
from booking_engine.infrastructure.payments.webhook_verify import sign_body, verify_post_signature

from tests.conftest import CUSTOMER, MONDAY, new_booking


def _directory_client(handler) -> DirectoryClient:
    return DirectoryClient(
        base_url="https://directory.test",
        api_key="key-1",
        client=httpx.Client(transport=httpx.MockTransport(handler)),
    )


class TestWebhookSignature:
    def test_valid_signature(self):
        body = b'{"type": "payment.completed"}'
        assert verify_post_signature(body, sign_body("s", body), "s", "prod")

    def test_tampered_body(self):
        body = b'{"type": "payment.completed"}'
        assert not verify_post_signature(body + b" ", sign_body("s", body), "s", "prod")

    def test_missing_header(self):
        assert verify_post_signature(b"{}", None, "s", "dev")
        assert not verify_post_signature(b"{}", None, "s", "prod")

    def test_wrong_algorithm(self):
        assert not verify_post_signature(b"{}", "md5=abc", "s", "prod")

    def test_missing_secret(self):
        assert not verify_post_signature(b"{}", sign_body("s", b"{}"), None, "prod")


class TestHttpDirectory:
    def test_provider_and_shop(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.headers["Authorization"] == "Bearer key-1"
            if request.url.path == "/providers/barber-1":
                return httpx.Response(
                    200,
                    json={"data": {
                        "id": "barber-1",
                        "kind": "employedBarber",
                        "shopId": "shop-1",
                        "schedule": {"monday": {"from": "09:00", "to": "13:00", "status": "available"}},
                    }},
                )
            if request.url.path == "/shops/shop-1":
                return httpx.Response(200, json={"id": "shop-1", "ownerId": "owner-1", "openingHours": []})
            return httpx.Response(404)

        directory = HttpDirectory(_directory_client(handler))
        provider = directory.get_provider("barber-1")
        assert provider.kind == ProviderKind.EMPLOYED_BARBER
        assert provider.schedule_for_date(MONDAY, directory.get_shop).start_minute == 540
        assert directory.get_shop("shop-1").owner_id == "owner-1"
        assert directory.get_provider("missing") is None

    def test_server_error_is_upstream_failure(self):
        directory = HttpDirectory(_directory_client(lambda request: httpx.Response(502)))
        with pytest.raises(UpstreamFailure):
            directory.get_provider("barber-1")

    def test_transport_error_is_upstream_failure(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        catalog = HttpServiceCatalog(_directory_client(handler))
        with pytest.raises(UpstreamFailure):
            catalog.get_service("svc-1")

    def test_service_default_duration(self):
        catalog = HttpServiceCatalog(
            _directory_client(
                lambda request: httpx.Response(200, json={"id": "svc-1", "name": "Cut", "type": "homeBased"})
            ),
            default_duration=45,
        )
        assert catalog.get_service("svc-1").duration_minutes == 45

    def test_malformed_record(self):
        directory = HttpDirectory(_directory_client(lambda request: httpx.Response(200, json={"id": "x"})))
        with pytest.raises(UpstreamFailure):
            directory.get_provider("x")


def test_webhook_notifier_posts_payload(machine):
    captured = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(204)

    booking = machine.create(CUSTOMER, new_booking())
    notifier = WebhookNotifier("https://notify.test/hook", client=httpx.Client(transport=httpx.MockTransport(handler)))
    notifier.notify("cust-1", booking, NotificationEvent.CONFIRMED)

    [request] = captured
    assert request.method == "POST"
    assert b'"event":"confirmed"' in request.content.replace(b" ", b"")


def test_webhook_notifier_raises_on_error(machine):
    booking = machine.create(CUSTOMER, new_booking())
    notifier = WebhookNotifier(
        "https://notify.test/hook",
        client=httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(500))),
    )
    with pytest.raises(httpx.HTTPStatusError):
        notifier.notify("cust-1", booking, NotificationEvent.CONFIRMED)


def test_uid_format():
    for _ in range(20):
        assert re.fullmatch(r"BK[A-Z]{2}\d{8}", generate_uid())


def test_time_input():
    assert parse_booking_date("2030-01-07") == MONDAY
    assert str(parse_time_slot({"hour": 9, "minute": 5})) == "09:05"
    with pytest.raises(ValidationError):
        parse_booking_date("2030-13-01")
    with pytest.raises(ValidationError):
        parse_time_slot({"hour": 24, "minute": 0})
    with pytest.raises(ValidationError):
        parse_time_slot(930)
