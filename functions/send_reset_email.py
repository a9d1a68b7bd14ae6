# functions/send_reset_email.py
"""POST /functions/v1/send-reset-email: mail a password reset link."""

from __future__ import annotations

import logging

from fastapi import APIRouter
from pydantic import BaseModel, EmailStr

from functions import mailer
from functions.common import FunctionError

logger = logging.getLogger(__name__)

router = APIRouter()


class ResetEmailRequest(BaseModel):
    email: EmailStr
    resetLink: str


@router.post("/functions/v1/send-reset-email")
def send_reset_email(body: ResetEmailRequest):
    try:
        return mailer.send_reset_email(str(body.email), body.resetLink)
    except mailer.MailerError as e:
        logger.error("send-reset-email failed: %s", e)
        raise FunctionError(str(e), 500)
