"""
Tests for pass-through option merging.
"""

from node2doc.processor import drop_none, merge_defined, merge_options


class TestMerging:

    def test_drop_none(self):
        assert drop_none({"a": None, "b": 0, "c": False}) == {"b": 0, "c": False}

    def test_merge_defined(self):
        assert merge_defined(None, None) is None
        assert merge_defined({"a": 1}, None) == {"a": 1}
        assert merge_defined(None, {}) == {}
        assert merge_defined({"a": 1, "b": 1}, {"b": 2}) == {"a": 1, "b": 2}

    def test_passthrough_wins_key_by_key(self):
        computed = {"alignment": "left", "width": {"size": 100, "type": "pct"}}
        merged = merge_options(computed, {"alignment": "center", "style": "Light Grid"})
        assert merged == {"alignment": "center", "width": {"size": 100, "type": "pct"}, "style": "Light Grid"}
        assert computed["alignment"] == "left"

    def test_no_passthrough(self):
        computed = {"a": 1}
        merged = merge_options(computed, None)
        assert merged == computed
        assert merged is not computed
