"""Facebook Page feed posting via the Graph API."""

from __future__ import annotations

import logging

import requests

logger = logging.getLogger(__name__)

FB_API_BASE = "https://graph.facebook.com/v21.0"


class FacebookPostError(RuntimeError):
    """A post attempt failed; carries the HTTP status and Graph API error code."""

    def __init__(self, message: str, http_status: int | None = None, fb_code: int | None = None):
        super().__init__(message)
        self.http_status = http_status
        self.fb_code = fb_code

    @property
    def code(self) -> str | None:
        if self.fb_code is not None:
            return f"fb_{self.fb_code}"
        if self.http_status is not None:
            return f"http_{self.http_status}"
        return None


def _error_code(response: requests.Response) -> int | None:
    try:
        body = response.json()
    except ValueError:
        return None
    error = body.get("error") if isinstance(body, dict) else None
    code = error.get("code") if isinstance(error, dict) else None
    return code if isinstance(code, int) else None


def post_to_facebook(
    page_id: str, token: str, message: str, link: str, timeout: float = 10.0
) -> str:
    """Publish a message with a link to the page feed and return the post id."""
    try:
        response = requests.post(
            f"{FB_API_BASE}/{page_id}/feed",
            json={"message": message, "link": link, "access_token": token},
            timeout=timeout,
        )
    except requests.RequestException as exc:
        raise FacebookPostError(f"Facebook request failed: {exc}") from exc

    if not response.ok:
        fb_code = _error_code(response)
        logger.warning("Facebook API %d (error code %s)", response.status_code, fb_code)
        raise FacebookPostError(
            f"Facebook API {response.status_code}",
            http_status=response.status_code,
            fb_code=fb_code,
        )

    post_id = response.json().get("id")
    if not post_id:
        raise FacebookPostError("Facebook API: missing post id in response")
    return post_id
