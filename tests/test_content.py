"""Tests for title extraction from window content."""

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from window_engine.engine.content import split_content


class TestSplitContent:
    def test_no_title_returns_default_and_unchanged_body(self):
        assert split_content("<p>hello</p>") == ("Window", "<p>hello</p>")

    def test_title_removed_from_body(self):
        title, body = split_content("<title>Settings</title><p>body</p>")
        assert title == "Settings"
        assert body == "<p>body</p>"

    def test_case_insensitive_marker(self):
        title, body = split_content("a<TITLE>Loud</Title>b")
        assert title == "Loud"
        assert body == "ab"

    def test_only_first_segment_used_and_removed(self):
        title, body = split_content("<title>One</title>x<title>Two</title>")
        assert title == "One"
        assert body == "x<title>Two</title>"

    def test_non_greedy_match(self):
        title, _ = split_content("<title>A</title> and </title>")
        assert title == "A"

    def test_empty_title(self):
        assert split_content("<title></title>rest") == ("", "rest")

    def test_custom_default_title(self):
        assert split_content("plain", default_title="Panel") == ("Panel", "plain")
