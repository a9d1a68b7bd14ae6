# config.py

#============================================================#
#                         Foundry-PM                         #
#============================================================#
# Purpose     : Settings shared by the Streamlit app and the #
#               functions service. Streamlit secrets win,    #
#               then environment variables, then defaults.   #
#============================================================#

from __future__ import annotations

import logging
import os

import streamlit as st


def _setting(name: str, default: str = "") -> str:
    # st.secrets raises when no secrets.toml exists
    try:
        value = st.secrets.get(name)
    except Exception:
        value = None
    return str(value or os.getenv(name) or default)


DATABASE_URL = _setting("DATABASE_URL", "sqlite:///foundry.db")

# JWT access tokens (signed by the app, verified by the functions service)
JWT_SECRET = _setting("JWT_SECRET", "change-me-in-production")
JWT_ALGORITHM = _setting("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_MINUTES = int(_setting("ACCESS_TOKEN_MINUTES", "60"))
RESET_TOKEN_MINUTES = int(_setting("RESET_TOKEN_MINUTES", "60"))
MIN_PASSWORD_LENGTH = 6

# Where the Streamlit app and the functions service are reachable
APP_URL = _setting("APP_URL", "http://localhost:8501").rstrip("/")
FUNCTIONS_URL = _setting("FUNCTIONS_URL", "http://localhost:8000").rstrip("/")

# Transactional mail (Resend HTTP API)
RESEND_API_KEY = _setting("RESEND_API_KEY")
RESEND_API_URL = _setting("RESEND_API_URL", "https://api.resend.com/emails")
MAIL_FROM = _setting("MAIL_FROM", "Foundry-PM <onboarding@resend.dev>")

CORS_ORIGINS = [o.strip() for o in _setting("CORS_ORIGINS", "*").split(",") if o.strip()]

LOG_LEVEL = _setting("LOG_LEVEL", "INFO").upper()


def configure_logging() -> None:
    """Configure root logging once; later calls are no-ops."""
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
