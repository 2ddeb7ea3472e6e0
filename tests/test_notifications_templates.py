"""Tests for Jinja2 template rendering and template contexts."""

from datetime import datetime, timezone

import pytest

from pastewatch.domain.models import ErrorStage, MatchedPaste, OperationalError, PasteItem
from pastewatch.notifications.models import NotificationTemplateError
from pastewatch.notifications.payloads import (
    build_error_context,
    build_paste_context,
    truncate_body,
)
from pastewatch.notifications.templates import ERROR_ALERT, PASTE_ALERT, TemplateRenderer

DETECTED = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def renderer():
    return TemplateRenderer()


@pytest.fixture
def matched():
    return MatchedPaste(
        item=PasteItem(
            key="AbCd1234",
            metadata={
                "key": "AbCd1234",
                "title": "db dump",
                "user": "someone",
                "syntax": "sql",
                "date": "1700000000",
                "full_url": "https://pastebin.com/AbCd1234",
            },
        ),
        body="-- dump\npassword: hunter2\n",
        hits={"password": "password: hunter2"},
        detected_at=DETECTED,
    )


class TestPayloads:
    def test_truncate_body_short(self):
        assert truncate_body("short", 10) == "short"

    def test_truncate_body_long(self):
        assert truncate_body("a" * 20, 10) == "a" * 10 + "\n[... truncated]"

    def test_build_paste_context(self, matched):
        context = build_paste_context(matched, subject_prefix="[pw]", max_body_chars=4000)

        assert context["subject_prefix"] == "[pw]"
        assert context["key"] == "AbCd1234"
        assert context["title"] == "db dump"
        assert context["url"] == "https://pastebin.com/AbCd1234"
        assert context["user"] == "someone"
        assert context["syntax"] == "sql"
        assert context["published_at"] == "2023-11-14T22:13:20+00:00"
        assert context["detected_at"] == "2024-01-01T12:00:00+00:00"
        assert context["keywords"] == ["password"]
        assert context["hits"] == [{"keyword": "password", "line": "password: hunter2"}]
        assert context["body_truncated"] is False
        assert context["body_length"] == len(matched.body)

    def test_build_paste_context_truncates(self, matched):
        matched.body = "x" * 500

        context = build_paste_context(matched, subject_prefix="[pw]", max_body_chars=200)

        assert context["body_truncated"] is True
        assert context["body_length"] == 500

    def test_build_paste_context_without_metadata(self):
        matched = MatchedPaste(item=PasteItem(key="k1"), body="b", hits={"a": "a"})

        context = build_paste_context(matched, subject_prefix="", max_body_chars=200)

        assert context["title"] == "Untitled"
        assert context["url"] == "https://pastebin.com/k1"
        assert context["published_at"] is None

    def test_build_error_context(self):
        error = OperationalError(
            ErrorStage.ITEM_FETCH,
            "timed out",
            paste_key="AbCd1234",
            error_type="FetchTimeoutError",
            occurred_at=DETECTED,
        )

        context = build_error_context(error, subject_prefix="[pw]")

        assert context == {
            "subject_prefix": "[pw]",
            "stage": "item-fetch",
            "message": "timed out",
            "paste_key": "AbCd1234",
            "error_type": "FetchTimeoutError",
            "occurred_at": "2024-01-01T12:00:00+00:00",
        }


class TestTemplateRenderer:
    def test_paste_alert(self, renderer, matched):
        rendered = renderer.render(
            PASTE_ALERT, build_paste_context(matched, "[pastewatch]", 4000)
        )

        assert rendered["subject"] == "[pastewatch] password found in paste AbCd1234 (db dump)"
        assert "password: password: hunter2" in rendered["text_body"]
        assert "https://pastebin.com/AbCd1234" in rendered["text_body"]
        assert "User:      someone" in rendered["text_body"]
        assert "<pre>-- dump" in rendered["html_body"]

    def test_untitled_paste_subject(self, renderer):
        matched = MatchedPaste(item=PasteItem(key="k1"), body="b", hits={"token": "token=1"})

        rendered = renderer.render(PASTE_ALERT, build_paste_context(matched, "[pw]", 4000))

        assert rendered["subject"] == "[pw] token found in paste k1"

    def test_html_is_escaped_text_is_not(self, renderer, matched):
        matched.body = "<script>alert(1)</script>"

        rendered = renderer.render(PASTE_ALERT, build_paste_context(matched, "[pw]", 4000))

        assert "&lt;script&gt;" in rendered["html_body"]
        assert "<script>alert(1)</script>" in rendered["text_body"]

    def test_error_alert_has_no_html(self, renderer):
        error = OperationalError(ErrorStage.LIST_FETCH, "HTTP 503: Service Unavailable")

        rendered = renderer.render(ERROR_ALERT, build_error_context(error, "[pw]"))

        assert rendered["subject"] == "[pw] error during list-fetch"
        assert "HTTP 503: Service Unavailable" in rendered["text_body"]
        assert "html_body" not in rendered
        assert not renderer.has_html(ERROR_ALERT)
        assert renderer.has_html(PASTE_ALERT)

    def test_error_alert_subject_mentions_paste(self, renderer):
        error = OperationalError(ErrorStage.ITEM_FETCH, "timed out", paste_key="AbCd1234")

        rendered = renderer.render(ERROR_ALERT, build_error_context(error, "[pw]"))

        assert rendered["subject"] == "[pw] error during item-fetch of paste AbCd1234"

    def test_missing_variable_raises(self, renderer):
        with pytest.raises(NotificationTemplateError):
            renderer.render(ERROR_ALERT, {"subject_prefix": "[pw]"})

    def test_unknown_template_raises(self, renderer):
        with pytest.raises(NotificationTemplateError):
            renderer.render("does_not_exist", {})
