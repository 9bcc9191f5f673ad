"""Tests for URL joining and access-token handling."""

import pytest
from envelope_rest.urls import join_url, redact_params, redact_url, with_access_token


class TestJoinUrl:
    @pytest.mark.parametrize(
        ("left", "right"),
        [("a", "b"), ("a/", "b"), ("a", "/b"), ("a/", "/b")],
    )
    def test_single_separator(self, left, right):
        """Exactly one slash joins the parts, whatever either side carries."""
        assert join_url(left, right) == "a/b"

    def test_multiple_segments(self):
        assert join_url("https://api.test/v1/", "/users/", "7") == "https://api.test/v1/users/7"

    def test_empty_segment_skipped(self):
        """An empty segment adds no trailing slash."""
        assert join_url("https://api.test", "") == "https://api.test"


class TestWithAccessToken:
    def test_token_appended_last(self):
        """The token follows the caller's pairs, in their original order."""
        pairs = with_access_token([("b", "2"), ("a", "1")], "tok")
        assert pairs == [("b", "2"), ("a", "1"), ("access_token", "tok")]

    def test_no_token_omits_pair(self):
        assert with_access_token([("b", "2"), ("a", "1")], None) == [("b", "2"), ("a", "1")]

    def test_does_not_mutate_input(self):
        """The caller's list is left as it was."""
        params = [("a", "1")]
        with_access_token(params, "tok")
        assert params == [("a", "1")]


def test_redact_url_hides_token():
    """redact_url masks the access_token value and keeps the rest."""
    assert redact_url("https://x.test/a?access_token=s3cret&b=1") == "https://x.test/a?access_token=***&b=1"


def test_redact_url_without_token_unchanged():
    assert redact_url("https://x.test/a?b=1") == "https://x.test/a?b=1"


def test_redact_params():
    assert redact_params([("a", "1"), ("access_token", "s3cret")]) == [("a", "1"), ("access_token", "***")]
