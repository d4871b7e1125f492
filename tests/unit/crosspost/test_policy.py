"""Tests for crosspost.policy module."""

from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy import text

from crosspost.facebook import FacebookPostError
from crosspost.models import CrosspostConfig
from crosspost.policy import build_message, classify_error, run_fb_crosspost
from run_pipeline.budget import RunBudget
from store.items_repo import upsert_items
from store.publications_repo import FbStoryRow, get_publication
from store.stories_repo import create_story, update_story_summary
from store.story_items_repo import attach_item

CONFIG = CrosspostConfig(
    enabled=True, page_id="page", access_token="token", site_base_url="https://news.example"
)


@pytest.fixture
def published(session, make_entry):
    def _publish(story_id: str, last_update: str) -> None:
        entry = make_entry(f"https://example.com/{story_id}", "כותרת")
        upsert_items(session, [entry], "ynet_main")
        create_story(session, story_id, last_update, last_update)
        attach_item(session, story_id, entry.item_key, last_update)
        update_story_summary(session, story_id, f"Заголовок {story_id}", "Строка 1\n\nСтрока 2\nСтрока 3", story_id)

    return _publish


class TestClassifyError:
    @pytest.mark.parametrize(
        ("code", "status"),
        [(190, "auth_error"), (102, "auth_error"), (4, "rate_limited"), (32, "rate_limited"),
         (100, "failed"), (None, "failed")],
    )
    def test_mapping(self, code, status) -> None:
        assert classify_error(code) == status


class TestBuildMessage:
    def test_title_excerpt_and_link(self) -> None:
        message = build_message("Заголовок", "Строка 1\n\nСтрока 2\nСтрока 3", "https://x/story/1")
        assert message == "📌 Заголовок\n\nСтрока 1\nСтрока 2\n\nЧитать полностью → https://x/story/1"

    def test_missing_title_and_summary(self) -> None:
        assert build_message(None, None, "https://x") == "📌 Новость\n\nЧитать полностью → https://x"


class TestRunFbCrosspost:
    def test_disabled_does_nothing(self, session) -> None:
        poster = MagicMock()
        counters = run_fb_crosspost(session, "run-1", CrosspostConfig(enabled=True), poster)
        assert counters.posted == 0
        poster.assert_not_called()

    def test_posts_eligible_stories(self, session, published) -> None:
        published("s1", "2024-05-01T10:00:00.000+00:00")
        published("s2", "2024-05-01T11:00:00.000+00:00")
        poster = MagicMock(side_effect=["p2", "p1"])

        counters = run_fb_crosspost(session, "run-1", CONFIG, poster)

        assert counters.posted == 2
        first_call = poster.call_args_list[0].args
        assert first_call[0:2] == ("page", "token")
        assert first_call[3] == "https://news.example/story/s2"
        assert get_publication(session, "s1")["fb_post_id"] == "p1"
        assert get_publication(session, "s2")["fb_status"] == "posted"

    def test_second_pass_does_not_repost(self, session, published) -> None:
        published("s1", "2024-05-01T10:00:00.000+00:00")
        poster = MagicMock(return_value="p1")
        run_fb_crosspost(session, "run-1", CONFIG, poster)

        counters = run_fb_crosspost(session, "run-2", CONFIG, poster)

        assert counters.posted == 0
        assert poster.call_count == 1

    def test_story_with_post_id_never_resubmitted(self, session, published) -> None:
        published("s1", "2024-05-01T10:00:00.000+00:00")
        session.execute(text("UPDATE publications SET fb_post_id = 'p1' WHERE story_id = 's1'"))
        session.commit()
        poster = MagicMock(return_value="p2")
        stale = [FbStoryRow(story_id="s1", title="t", summary="s")]

        with patch("crosspost.policy.get_stories_for_fb_posting", return_value=stale):
            counters = run_fb_crosspost(session, "run-1", CONFIG, poster)

        poster.assert_not_called()
        assert counters.skipped == 1
        assert get_publication(session, "s1")["fb_post_id"] == "p1"

    def test_auth_error_stops_pass(self, session, published) -> None:
        published("s1", "2024-05-01T10:00:00.000+00:00")
        published("s2", "2024-05-01T11:00:00.000+00:00")
        poster = MagicMock(side_effect=FacebookPostError("Facebook API 400", 400, 190))

        counters = run_fb_crosspost(session, "run-1", CONFIG, poster)

        assert poster.call_count == 1
        assert counters.failed == 1
        assert get_publication(session, "s2")["fb_status"] == "auth_error"
        assert get_publication(session, "s2")["fb_attempts"] == 1
        assert get_publication(session, "s1")["fb_status"] == "disabled"
        code = session.execute(text("SELECT code, phase FROM error_events")).one()
        assert tuple(code) == ("fb_190", "fb_crosspost")

    def test_rate_limit_continues(self, session, published) -> None:
        published("s1", "2024-05-01T10:00:00.000+00:00")
        published("s2", "2024-05-01T11:00:00.000+00:00")
        poster = MagicMock(side_effect=[FacebookPostError("Facebook API 400", 400, 32), "p1"])

        counters = run_fb_crosspost(session, "run-1", CONFIG, poster)

        assert (counters.posted, counters.failed) == (1, 1)
        assert get_publication(session, "s2")["fb_status"] == "rate_limited"
        assert get_publication(session, "s1")["fb_status"] == "posted"

    def test_unexpected_error_is_transient(self, session, published) -> None:
        published("s1", "2024-05-01T10:00:00.000+00:00")
        poster = MagicMock(side_effect=TimeoutError("timed out"))

        counters = run_fb_crosspost(session, "run-1", CONFIG, poster)

        assert counters.failed == 1
        publication = get_publication(session, "s1")
        assert publication["fb_status"] == "failed"
        assert publication["fb_error_last"] == "timed out"

    def test_post_timeout_capped_by_budget(self, session, published) -> None:
        published("s1", "2024-05-01T10:00:00.000+00:00")
        poster = MagicMock(return_value="p1")
        budget = RunBudget(25_000, start=0.0, clock=lambda: 21.0)

        run_fb_crosspost(session, "run-1", CONFIG, poster, budget=budget)

        assert poster.call_args.kwargs["timeout"] == 4.0

    def test_post_timeout_defaults_to_config(self, session, published) -> None:
        published("s1", "2024-05-01T10:00:00.000+00:00")
        poster = MagicMock(return_value="p1")

        run_fb_crosspost(session, "run-1", CONFIG, poster)

        assert poster.call_args.kwargs["timeout"] == CONFIG.timeout_sec

    def test_budget_exhausted(self, session, published) -> None:
        published("s1", "2024-05-01T10:00:00.000+00:00")
        poster = MagicMock(return_value="p1")
        budget = RunBudget(1000, start=0.0, clock=lambda: 2.0)

        counters = run_fb_crosspost(session, "run-1", CONFIG, poster, budget=budget)

        assert counters.posted == 0
        poster.assert_not_called()
