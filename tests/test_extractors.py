"""Tests for cukejson.runtime.extractors."""

from cukejson.messages.models import Comment, Location, Tag
from cukejson.runtime.extractors import extract_comments, extract_tags


class TestExtractTags:

    def test_names_in_source_order(self):
        tags = [Tag(name="@smoke", location=Location(line=2)), Tag(name="@auth", location=Location(line=2))]
        assert extract_tags(tags) == ["@smoke", "@auth"]

    def test_absent_list_is_none(self):
        assert extract_tags(None) is None

    def test_empty_list_is_empty(self):
        assert extract_tags([]) == []

    def test_accepts_wire_mappings(self):
        assert extract_tags([{"name": "@wip", "id": "t1"}]) == ["@wip"]


class TestExtractComments:

    def test_line_and_value_pairs(self):
        comments = [
            Comment(location=Location(line=1, column=1), text="# language: en"),
            Comment(location=Location(line=7, column=3), text="  # flaky on CI"),
        ]
        assert extract_comments(comments) == [
            {"line": 1, "value": "# language: en"},
            {"line": 7, "value": "  # flaky on CI"},
        ]

    def test_absent_list_is_none(self):
        assert extract_comments(None) is None

    def test_empty_list_is_empty(self):
        assert extract_comments([]) == []

    def test_accepts_wire_mappings(self):
        comments = [{"location": {"line": 4, "column": 1}, "text": "# note"}]
        assert extract_comments(comments) == [{"line": 4, "value": "# note"}]

    def test_missing_location_is_line_zero(self):
        assert extract_comments([{"text": "# orphan"}]) == [{"line": 0, "value": "# orphan"}]
