"""Tests for docexport.query.builder."""

import pytest

from docexport.models.export_request import ExportRequest
from docexport.query.builder import (
    build_date_condition,
    build_export_query,
    build_field_condition,
    build_type_condition,
    normalize_date_filter,
    parse_field_names,
)
from docexport.query.relations import REFERENCE_MARKER


class TestCustomQuery:
    def test_custom_query_returned_verbatim(self):
        custom = '*[_type == "post" && defined(publishedAt)]'
        request = ExportRequest(
            types=("page",),
            date_filter="2023-01-01",
            required_fields=("title",),
            custom_query=custom,
            use_custom_query=True,
            include_references=True,
            reference_depth=3,
            max_documents=5,
        )
        assert build_export_query(request) == custom

    def test_custom_query_whitespace_preserved(self):
        custom = "  *[_type == 'post']  "
        request = ExportRequest(custom_query=custom, use_custom_query=True)
        assert build_export_query(request) == custom

    def test_blank_custom_query_falls_back_to_filters(self):
        request = ExportRequest(types=("post",), custom_query="   ", use_custom_query=True)
        assert build_export_query(request) == '*[_type in ["post"]][0...1000]'

    def test_custom_query_ignored_when_flag_off(self):
        request = ExportRequest(types=("post",), custom_query="*[]")
        assert build_export_query(request) == '*[_type in ["post"]][0...1000]'


class TestFilterQuery:
    def test_single_type(self):
        request = ExportRequest(types=("post",), max_documents=1000)
        assert build_export_query(request) == '*[_type in ["post"]][0...1000]'

    def test_types_and_date(self):
        request = ExportRequest(types=("post", "page"), date_filter="2023-01-01", max_documents=250)
        assert build_export_query(request) == (
            '*[_type in ["post", "page"] && '
            'dateTime(_createdAt) >= dateTime("2023-01-01T00:00:00Z")][0...250]'
        )

    def test_all_conditions_in_fixed_order(self):
        request = ExportRequest(
            types=("post",),
            date_filter="2023-01-01",
            required_fields=("title, slug",),
        )
        query = build_export_query(request)
        type_pos = query.index("_type in")
        date_pos = query.index("dateTime(_createdAt)")
        field_pos = query.index("defined(title)")
        assert type_pos < date_pos < field_pos
        assert "(defined(title) || defined(slug))" in query

    def test_no_conditions_selects_everything(self):
        request = ExportRequest(use_custom_query=True, max_documents=10)
        assert build_export_query(request) == "*[][0...10]"

    def test_range_uses_max_documents(self):
        request = ExportRequest(types=("post",), max_documents=1)
        assert build_export_query(request).endswith("[0...1]")

    def test_blank_date_filter_ignored(self):
        request = ExportRequest(types=("post",), date_filter="   ")
        assert "dateTime" not in build_export_query(request)

    def test_build_is_deterministic(self):
        request = ExportRequest(
            types=("post", "page"),
            date_filter="2023-01-01",
            required_fields=("title",),
            include_references=True,
        )
        assert build_export_query(request) == build_export_query(request)


class TestReferenceProjection:
    def test_projection_appended_when_requested(self):
        request = ExportRequest(types=("post",), include_references=True, reference_depth=1)
        query = build_export_query(request)
        assert query.startswith('*[_type in ["post"]][0...1000] {')
        assert "...," in query
        assert query.count(REFERENCE_MARKER) == 1
        assert query.endswith("}")

    def test_zero_depth_adds_no_projection(self):
        request = ExportRequest(types=("post",), include_references=True, reference_depth=0)
        assert build_export_query(request) == '*[_type in ["post"]][0...1000]'

    def test_depth_without_flag_adds_no_projection(self):
        request = ExportRequest(types=("post",), reference_depth=3)
        assert REFERENCE_MARKER not in build_export_query(request)


class TestConditionHelpers:
    def test_type_condition_quotes_names(self):
        assert build_type_condition(['say "hi"']) == '_type in ["say \\"hi\\""]'

    def test_type_condition_empty(self):
        assert build_type_condition([]) == ""

    def test_bare_date_expanded_to_timestamp(self):
        assert build_date_condition(" 2023-01-01 ") == (
            'dateTime(_createdAt) >= dateTime("2023-01-01T00:00:00Z")'
        )

    def test_full_timestamp_kept(self):
        assert build_date_condition("2023-01-01T12:30:00+02:00") == (
            'dateTime(_createdAt) >= dateTime("2023-01-01T12:30:00+02:00")'
        )

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("2024-05-17", "2024-05-17T00:00:00Z"),
            ("  2024-05-17\n", "2024-05-17T00:00:00Z"),
            ("2024-05-17T08:00:00Z", "2024-05-17T08:00:00Z"),
            ("", ""),
        ],
    )
    def test_normalize_date_filter(self, value, expected):
        assert normalize_date_filter(value) == expected

    def test_field_condition_single_field(self):
        assert build_field_condition(["title"]) == "(defined(title))"

    def test_field_condition_only_blank_names(self):
        assert build_field_condition([" , ,"]) == ""

    @pytest.mark.parametrize(
        "values,expected",
        [
            (["title, slug, publishedAt"], ["title", "slug", "publishedAt"]),
            (["title", "slug"], ["title", "slug"]),
            (["title,,", " "], ["title"]),
            ([], []),
        ],
    )
    def test_parse_field_names(self, values, expected):
        assert parse_field_names(values) == expected
