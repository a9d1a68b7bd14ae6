# functions_client.py
"""
HTTP client for the privileged server functions.

Every call goes through `invoke`, which attaches the caller's bearer token
and turns non-2xx answers into FunctionCallError. 401 and 403 become
FunctionAuthorizationError so callers can react to that kind alone.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

import config
from errors import FunctionAuthorizationError, FunctionCallError

logger = logging.getLogger(__name__)


class FunctionsClient:
    def __init__(self, access_token: Optional[str] = None, base_url: Optional[str] = None):
        self.access_token = access_token
        self.base_url = (base_url or config.FUNCTIONS_URL).rstrip("/")

    def invoke(self, name: str, body: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url}/functions/v1/{name}"
        headers = {"Accept": "application/json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"

        try:
            resp = requests.post(url, json=body, headers=headers)
        except requests.RequestException as e:
            logger.error("Could not reach %s: %s", name, e)
            raise FunctionCallError(f"Could not reach {name}: {e}")

        try:
            data = resp.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {"result": data}

        if resp.status_code in (401, 403):
            raise FunctionAuthorizationError(data.get("error") or "Unauthorized", resp.status_code)
        if not resp.ok:
            logger.warning("%s answered %s", name, resp.status_code)
            raise FunctionCallError(data.get("error") or f"{name} failed ({resp.status_code})",
                                    resp.status_code)
        return data

    # ---- manage-users ----
    def list_users(self) -> List[Dict[str, Any]]:
        return self.invoke("manage-users", {"action": "listUsers"}).get("users", [])

    def delete_user(self, user_id: str) -> bool:
        return bool(self.invoke("manage-users", {"action": "deleteUser", "userId": user_id}).get("success"))

    # ---- send-reset-email ----
    def send_reset_email(self, email: str, reset_link: str) -> Dict[str, Any]:
        return self.invoke("send-reset-email", {"email": email, "resetLink": reset_link})
