"""Tests for crosspost.facebook module."""

from unittest.mock import Mock, patch

import pytest

from crosspost.facebook import FacebookPostError, post_to_facebook


class TestPostToFacebook:
    @patch("crosspost.facebook.requests.post")
    def test_returns_post_id(self, mock_post) -> None:
        mock_post.return_value = Mock(ok=True, json=lambda: {"id": "123_456"})

        post_id = post_to_facebook("123", "token", "msg", "https://site/story/s1")

        assert post_id == "123_456"
        args, kwargs = mock_post.call_args
        assert args[0] == "https://graph.facebook.com/v21.0/123/feed"
        assert kwargs["json"] == {
            "message": "msg", "link": "https://site/story/s1", "access_token": "token",
        }
        assert kwargs["timeout"] == 10.0

    @patch("crosspost.facebook.requests.post")
    def test_error_carries_codes(self, mock_post) -> None:
        mock_post.return_value = Mock(
            ok=False, status_code=400, json=lambda: {"error": {"code": 190, "message": "expired"}}
        )

        with pytest.raises(FacebookPostError) as exc_info:
            post_to_facebook("123", "token", "msg", "link")

        assert exc_info.value.http_status == 400
        assert exc_info.value.fb_code == 190
        assert exc_info.value.code == "fb_190"

    @patch("crosspost.facebook.requests.post")
    def test_unparseable_error_body(self, mock_post) -> None:
        response = Mock(ok=False, status_code=502)
        response.json.side_effect = ValueError("not json")
        mock_post.return_value = response

        with pytest.raises(FacebookPostError) as exc_info:
            post_to_facebook("123", "token", "msg", "link")

        assert exc_info.value.fb_code is None
        assert exc_info.value.code == "http_502"

    @patch("crosspost.facebook.requests.post")
    def test_missing_id_raises(self, mock_post) -> None:
        mock_post.return_value = Mock(ok=True, json=lambda: {})
        with pytest.raises(FacebookPostError, match="missing post id"):
            post_to_facebook("123", "token", "msg", "link")
