"""Outgoing guest email through the Resend API.

Templates live in ``emails/`` next to this module and use ``{placeholder}``
markers; values are HTML-escaped on substitution.
"""
from __future__ import annotations

import html
import logging
import re
from pathlib import Path

import resend

from ..config import settings

EMAIL_TEMPLATES = Path(__file__).parent / "emails"

log = logging.getLogger(__name__)

_api_key_set = False


def load_template(name: str) -> str:
    return (EMAIL_TEMPLATES / f"{name}.html").read_text(encoding="utf-8")


def render_template(template_name: str, /, **values) -> str:
    """Fill ``{key}`` markers one by one; str.format would trip over the CSS braces."""
    rendered = load_template(template_name)
    for key, value in values.items():
        rendered = rendered.replace("{" + key + "}", html.escape(str(value)))
    return rendered


def html_to_text(html_body: str) -> str:
    """Plain-text fallback for clients that do not render HTML."""
    text = re.sub(r"<(style|script)[^>]*>.*?</\1>", "", html_body, flags=re.S | re.I)
    text = re.sub(r"<br\s*/?>", "\n", text, flags=re.I)
    text = re.sub(r"</p>", "\n\n", text, flags=re.I)
    text = re.sub(r"<li[^>]*>", "• ", text, flags=re.I)
    text = re.sub(r"</(li|h[1-6]|div)>", "\n", text, flags=re.I)
    text = re.sub(r"<[^>]+>", "", text)
    text = html.unescape(text).replace("\xa0", " ")
    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r"\n\s*\n\s*\n+", "\n\n", text)
    return "\n".join(line.strip() for line in text.splitlines()).strip()


def init_resend() -> bool:
    """Hand the API key to the resend client once. False when no key is configured."""
    global _api_key_set

    if not settings.RESEND_API_KEY:
        log.warning("[Email] RESEND_API_KEY is not set, cannot send through Resend")
        return False

    if not _api_key_set:
        resend.api_key = settings.RESEND_API_KEY
        _api_key_set = True
    return True


async def send_resend_email(
    to_email: str | list[str],
    subject: str,
    html_body: str | None = None,
    text_body: str | None = None,
    from_email: str | None = None,
) -> bool:
    """
    Send one message through Resend.

    Returns True once Resend accepted the message. Every failure (missing
    key, empty body, API error) is logged and reported as False so callers
    can treat email as best-effort.
    """
    if not init_resend():
        return False

    if not (html_body or text_body):
        log.error(f"[Email] Refusing to send '{subject}' with an empty body")
        return False

    recipients = [to_email] if isinstance(to_email, str) else list(to_email)
    message = {
        "from": from_email or settings.RESEND_FROM_EMAIL,
        "to": recipients,
        "subject": subject,
    }
    if html_body:
        message["html"] = html_body
    if text_body:
        message["text"] = text_body

    try:
        sent = resend.Emails.send(message)
    except Exception as e:
        log.error(f"[Email] Resend rejected '{subject}' for {', '.join(recipients)}: {e}")
        return False

    log.info(f"[Email] '{subject}' sent to {', '.join(recipients)} (id={sent.get('id')})")
    return True


def create_checkout_reminder_email_html(
    guest_name: str,
    room_number: str,
    checkout_time: str,
    time_remaining: str,
) -> str:
    return render_template(
        "checkout_reminder",
        hotel_name=settings.HOTEL_NAME,
        guest_name=guest_name,
        room_number=room_number,
        checkout_time=checkout_time,
        time_remaining=time_remaining,
    )
