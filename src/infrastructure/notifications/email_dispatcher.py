"""Email notification dispatcher.

Renders a message for each swap request event and logs it. When a
notification endpoint is configured the payload is also POSTed there;
otherwise the log line is the delivery.
"""

from html import escape

import httpx
import structlog

from core.config import settings
from domain.entities.notification import (
    DispatchOutcome,
    DispatchStatus,
    NotificationEvent,
    RequestSnapshot,
)

logger = structlog.get_logger()

SUBJECTS: dict[NotificationEvent, str] = {
    NotificationEvent.REQUEST_SENT: "New Skill Swap Request",
    NotificationEvent.REQUEST_ACCEPTED: "Your Skill Swap Request was Accepted!",
    NotificationEvent.REQUEST_REJECTED: "Skill Swap Request Update",
}

_BUTTON = (
    '<a href="{href}" style="background-color: {color}; color: white; '
    "padding: 12px 24px; text-decoration: none; border-radius: 6px; "
    'display: inline-block; margin: 16px 0;">{label}</a>'
)


def render_email(event: NotificationEvent, snapshot: RequestSnapshot, site_url: str) -> str:
    """HTML body for an event."""
    site = site_url.rstrip("/")
    sender = escape(snapshot.from_user_name)
    recipient = escape(snapshot.to_user_name)

    if event == NotificationEvent.REQUEST_SENT:
        return (
            "<h2>New Skill Swap Request</h2>"
            f"<p>Hi {recipient},</p>"
            f"<p>You have received a new skill swap request from <strong>{sender}</strong>.</p>"
            '<blockquote style="border-left: 4px solid #3b82f6; padding-left: 16px; '
            f'margin: 16px 0; font-style: italic;">"{escape(snapshot.message)}"</blockquote>'
            "<p>Log in to your SkillSwap account to respond to this request.</p>"
            + _BUTTON.format(href=f"{site}/requests", color="#3b82f6", label="View Request")
            + "<p>Best regards,<br>The SkillSwap Team</p>"
        )

    if event == NotificationEvent.REQUEST_ACCEPTED:
        return (
            "<h2>Your Skill Swap Request was Accepted!</h2>"
            f"<p>Hi {sender},</p>"
            f"<p>Great news! <strong>{recipient}</strong> has accepted your skill swap request.</p>"
            "<p>You can now coordinate your skill exchange session. "
            "We recommend reaching out to discuss:</p>"
            "<ul>"
            "<li>Preferred meeting times</li>"
            "<li>Communication platform (video call, in-person, etc.)</li>"
            "<li>Specific topics to cover</li>"
            "<li>Session duration and frequency</li>"
            "</ul>"
            + _BUTTON.format(href=f"{site}/requests", color="#10b981", label="View Details")
            + "<p>Happy learning!<br>The SkillSwap Team</p>"
        )

    return (
        "<h2>Skill Swap Request Update</h2>"
        f"<p>Hi {sender},</p>"
        f"<p><strong>{recipient}</strong> has declined your skill swap request.</p>"
        "<p>Don't worry! There are many other skilled individuals on SkillSwap "
        "who would love to connect with you.</p>"
        + _BUTTON.format(href=f"{site}/browse", color="#3b82f6", label="Browse More Profiles")
        + "<p>Keep exploring and connecting!<br>The SkillSwap Team</p>"
    )


class EmailNotificationDispatcher:
    """Renders, logs and optionally forwards swap request emails."""

    def __init__(
        self,
        endpoint_url: str = settings.notification_endpoint_url,
        site_url: str = settings.site_url,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._endpoint_url = endpoint_url
        self._site_url = site_url
        self._transport = transport
        self._timeout = timeout

    async def notify(
        self,
        event: NotificationEvent,
        recipient_contact: str | None,
        snapshot: RequestSnapshot,
    ) -> DispatchOutcome:
        """Render the email for ``event`` and hand it off."""
        if not recipient_contact:
            logger.info(
                "email_notification_skipped",
                type=event.value,
                request_id=str(snapshot.request_id),
                reason="no_recipient_contact",
            )
            return DispatchOutcome(status=DispatchStatus.SKIPPED, event=event)

        subject = SUBJECTS[event]
        html = render_email(event, snapshot, self._site_url)
        logger.info(
            "email_notification",
            to=recipient_contact,
            subject=subject,
            type=event.value,
            request_data=snapshot.as_payload(),
        )

        if self._endpoint_url:
            error = await self._forward(
                {
                    "to": recipient_contact,
                    "subject": subject,
                    "html": html,
                    "type": event.value,
                    "requestData": snapshot.as_payload(),
                }
            )
            if error:
                return DispatchOutcome(
                    status=DispatchStatus.FAILED,
                    event=event,
                    recipient=recipient_contact,
                    subject=subject,
                    html=html,
                    error=error,
                )

        return DispatchOutcome(
            status=DispatchStatus.SENT,
            event=event,
            recipient=recipient_contact,
            subject=subject,
            html=html,
        )

    async def _forward(self, payload: dict) -> str | None:
        """POST the payload to the endpoint. Returns an error string on failure."""
        try:
            async with httpx.AsyncClient(
                transport=self._transport, timeout=self._timeout
            ) as client:
                response = await client.post(self._endpoint_url, json=payload)
        except httpx.HTTPError as e:
            return f"endpoint unreachable: {e}"
        if response.is_error:
            return f"endpoint returned {response.status_code}"
        return None
