"""Tests for reference expansion fragments."""

import pytest

from docexport.query.relations import REFERENCE_FIELDS, REFERENCE_MARKER, build_reference_expansion


class TestBuildReferenceExpansion:
    @pytest.mark.parametrize("depth", [0, -1, -5])
    def test_non_positive_depth_is_empty(self, depth):
        assert build_reference_expansion(depth) == ""

    def test_depth_one(self):
        assert build_reference_expansion(1) == (
            '"references": *[references(^._id)] { _id, _type, title, name, slug }'
        )

    @pytest.mark.parametrize("depth", [1, 2, 3, 5])
    def test_marker_count_matches_depth(self, depth):
        assert build_reference_expansion(depth).count(REFERENCE_MARKER) == depth

    def test_deeper_level_nests_inside_parent(self):
        fragment = build_reference_expansion(2)
        inner = build_reference_expansion(1)
        assert fragment.startswith(REFERENCE_MARKER)
        assert f", {inner} }}" in fragment

    def test_braces_balanced(self):
        fragment = build_reference_expansion(3)
        assert fragment.count("{") == fragment.count("}") == 3

    def test_every_level_projects_display_fields(self):
        fragment = build_reference_expansion(3)
        assert fragment.count(", ".join(REFERENCE_FIELDS)) == 3
