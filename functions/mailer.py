# functions/mailer.py
"""Renders the reset email and hands it to the Resend HTTP API."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

import requests
from jinja2 import Environment, FileSystemLoader, select_autoescape

import config

logger = logging.getLogger(__name__)

RESET_SUBJECT = "Reset your password"

_env = Environment(
    loader=FileSystemLoader(str(Path(__file__).with_name("templates"))),
    autoescape=select_autoescape(["html"]),
)


class MailerError(Exception):
    pass


def render_reset_email(reset_link: str) -> str:
    return _env.get_template("reset_email.html").render(reset_link=reset_link, subject=RESET_SUBJECT)


def send_reset_email(email: str, reset_link: str) -> Dict[str, Any]:
    """Send one reset email; returns the provider's JSON answer."""
    if not config.RESEND_API_KEY:
        raise MailerError("RESEND_API_KEY is not configured")
    payload = {
        "from": config.MAIL_FROM,
        "to": [email],
        "subject": RESET_SUBJECT,
        "html": render_reset_email(reset_link),
    }
    try:
        resp = requests.post(
            config.RESEND_API_URL,
            json=payload,
            headers={"Authorization": f"Bearer {config.RESEND_API_KEY}"},
        )
    except requests.RequestException as e:
        raise MailerError(f"Email provider unreachable: {e}")

    try:
        data = resp.json()
    except ValueError:
        data = {}
    if not resp.ok:
        message = data.get("message") if isinstance(data, dict) else None
        raise MailerError(message or f"Email provider answered {resp.status_code}")
    logger.info("Reset email accepted by provider")
    return data
