"""Unit tests for the email notification dispatcher."""

import json
from typing import Any
from uuid import uuid4

import httpx
import pytest

from domain.entities.notification import DispatchStatus, NotificationEvent, RequestSnapshot
from infrastructure.notifications.email_dispatcher import (
    SUBJECTS,
    EmailNotificationDispatcher,
    render_email,
)

SITE = "https://skillswap.example/"


@pytest.fixture
def snapshot() -> RequestSnapshot:
    return RequestSnapshot(
        request_id=uuid4(),
        from_user_name="Marc <Demo>",
        to_user_name="Joe Wills",
        message="Teach me Photoshop & I'll teach you Python",
        status="pending",
    )


class TestRenderEmail:
    def test_request_sent_quotes_message_and_links_requests(
        self, snapshot: RequestSnapshot
    ) -> None:
        html = render_email(NotificationEvent.REQUEST_SENT, snapshot, SITE)

        assert "Hi Joe Wills" in html
        assert "Marc &lt;Demo&gt;" in html
        assert "Photoshop &amp; I&#x27;ll" in html
        assert 'href="https://skillswap.example/requests"' in html

    def test_accepted_addresses_sender(self, snapshot: RequestSnapshot) -> None:
        html = render_email(NotificationEvent.REQUEST_ACCEPTED, snapshot, SITE)

        assert "Hi Marc &lt;Demo&gt;" in html
        assert "has accepted your skill swap request" in html

    def test_rejected_links_back_to_browse(self, snapshot: RequestSnapshot) -> None:
        html = render_email(NotificationEvent.REQUEST_REJECTED, snapshot, SITE)

        assert "has declined your skill swap request" in html
        assert 'href="https://skillswap.example/browse"' in html


class TestNotify:
    @pytest.mark.asyncio
    async def test_without_contact_is_skipped(self, snapshot: RequestSnapshot) -> None:
        dispatcher = EmailNotificationDispatcher(endpoint_url="", site_url=SITE)

        outcome = await dispatcher.notify(NotificationEvent.REQUEST_SENT, None, snapshot)

        assert outcome.status == DispatchStatus.SKIPPED

    @pytest.mark.asyncio
    async def test_without_endpoint_logs_and_reports_sent(
        self, snapshot: RequestSnapshot
    ) -> None:
        dispatcher = EmailNotificationDispatcher(endpoint_url="", site_url=SITE)

        outcome = await dispatcher.notify(
            NotificationEvent.REQUEST_ACCEPTED, "marc@example.com", snapshot
        )

        assert outcome.status == DispatchStatus.SENT
        assert outcome.recipient == "marc@example.com"
        assert outcome.subject == SUBJECTS[NotificationEvent.REQUEST_ACCEPTED]
        assert outcome.html

    @pytest.mark.asyncio
    async def test_forwards_payload_to_endpoint(self, snapshot: RequestSnapshot) -> None:
        seen: list[dict[str, Any]] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(json.loads(request.content))
            return httpx.Response(200, json={"success": True})

        dispatcher = EmailNotificationDispatcher(
            endpoint_url="https://hooks.example/email",
            site_url=SITE,
            transport=httpx.MockTransport(handler),
        )

        outcome = await dispatcher.notify(
            NotificationEvent.REQUEST_SENT, "joe@example.com", snapshot
        )

        assert outcome.ok
        payload = seen[0]
        assert payload["to"] == "joe@example.com"
        assert payload["subject"] == "New Skill Swap Request"
        assert payload["type"] == "request_sent"
        assert payload["requestData"] == {
            "fromUserName": "Marc <Demo>",
            "toUserName": "Joe Wills",
            "message": "Teach me Photoshop & I'll teach you Python",
        }

    @pytest.mark.asyncio
    async def test_endpoint_error_is_failed_outcome(self, snapshot: RequestSnapshot) -> None:
        dispatcher = EmailNotificationDispatcher(
            endpoint_url="https://hooks.example/email",
            site_url=SITE,
            transport=httpx.MockTransport(lambda request: httpx.Response(500)),
        )

        outcome = await dispatcher.notify(
            NotificationEvent.REQUEST_REJECTED, "marc@example.com", snapshot
        )

        assert outcome.status == DispatchStatus.FAILED
        assert outcome.error == "endpoint returned 500"

    @pytest.mark.asyncio
    async def test_unreachable_endpoint_is_failed_outcome(
        self, snapshot: RequestSnapshot
    ) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        dispatcher = EmailNotificationDispatcher(
            endpoint_url="https://hooks.example/email",
            site_url=SITE,
            transport=httpx.MockTransport(handler),
        )

        outcome = await dispatcher.notify(
            NotificationEvent.REQUEST_SENT, "joe@example.com", snapshot
        )

        assert outcome.status == DispatchStatus.FAILED
        assert outcome.error.startswith("endpoint unreachable")
