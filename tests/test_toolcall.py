"""Tests for agentic_guard.toolcall."""
from __future__ import annotations

import math

import pytest

from agentic_guard.toolcall import (
    MAX_COLLECTED_STRINGS,
    MAX_NESTING_DEPTH,
    EditInput,
    GrepInput,
    ReadInput,
    ShellInput,
    TodoWriteInput,
    ToolCall,
    ToolKind,
    UnknownInput,
    WebFetchInput,
    WriteInput,
    get_int,
    get_str,
    normalize,
    normalize_call,
)


# ---------------------------------------------------------------------------
# ToolKind
# ---------------------------------------------------------------------------

class TestToolKind:
    @pytest.mark.parametrize(
        "name,kind",
        [
            ("Bash", ToolKind.SHELL),
            ("Write", ToolKind.FILE_WRITE),
            ("Edit", ToolKind.FILE_EDIT),
            ("Read", ToolKind.FILE_READ),
            ("Glob", ToolKind.GLOB),
            ("Grep", ToolKind.GREP),
            ("NotebookEdit", ToolKind.NOTEBOOK_EDIT),
            ("TodoWrite", ToolKind.TODO_WRITE),
            ("WebFetch", ToolKind.WEB_FETCH),
            ("WebSearch", ToolKind.WEB_SEARCH),
        ],
    )
    def test_host_names(self, name, kind):
        assert ToolKind.from_name(name) is kind

    def test_canonical_value_accepted(self):
        assert ToolKind.from_name("shell_command") is ToolKind.SHELL

    def test_unrecognized_is_unknown(self):
        assert ToolKind.from_name("mcp__github__create_issue") is ToolKind.UNKNOWN

    def test_empty_and_non_string_are_unknown(self):
        assert ToolKind.from_name("") is ToolKind.UNKNOWN
        assert ToolKind.from_name(None) is ToolKind.UNKNOWN  # type: ignore[arg-type]

    def test_call_kind_derived_from_name(self):
        assert ToolCall(tool_name="Bash").kind is ToolKind.SHELL


# ---------------------------------------------------------------------------
# Field coercion
# ---------------------------------------------------------------------------

class TestCoercion:
    def test_get_str_wrong_shape(self):
        assert get_str({"k": 5}, "k") == ""
        assert get_str({"k": ["a"]}, "k") == ""
        assert get_str({}, "k") == ""

    def test_get_int_accepts_whole_float(self):
        assert get_int({"n": 30.0}, "n") == 30

    def test_get_int_truncates_fraction(self):
        assert get_int({"n": 2.9}, "n") == 2

    def test_get_int_rejects_bool_string_and_nan(self):
        assert get_int({"n": True}, "n") == 0
        assert get_int({"n": "10"}, "n") == 0
        assert get_int({"n": math.nan}, "n") == 0
        assert get_int({"n": math.inf}, "n") == 0


# ---------------------------------------------------------------------------
# normalize
# ---------------------------------------------------------------------------

class TestNormalize:
    def test_shell(self):
        view = normalize(ToolKind.SHELL, {"command": "ls", "description": "list", "timeout": 1000})
        assert view == ShellInput(command="ls", description="list", timeout=1000)

    def test_missing_fields_default_to_empty(self):
        assert normalize(ToolKind.FILE_WRITE, {}) == WriteInput()

    def test_mistyped_fields_default(self):
        view = normalize(ToolKind.FILE_EDIT, {"file_path": 42, "old_string": None, "new_string": "x"})
        assert view == EditInput(file_path="", old_string="", new_string="x")

    def test_non_mapping_arguments_treated_as_empty(self):
        assert normalize(ToolKind.FILE_READ, ["not", "a", "dict"]) == ReadInput()
        assert normalize(ToolKind.SHELL, None) == ShellInput()

    def test_read_offsets(self):
        view = normalize(ToolKind.FILE_READ, {"file_path": "a.py", "offset": 10.0, "limit": "x"})
        assert view == ReadInput(file_path="a.py", offset=10, limit=0)

    def test_grep(self):
        view = normalize(ToolKind.GREP, {"pattern": "TODO", "path": "src", "glob": "*.py"})
        assert view == GrepInput(pattern="TODO", path="src", glob="*.py")

    def test_todo_counts_items(self):
        assert normalize(ToolKind.TODO_WRITE, {"todos": [{}, {}, {}]}) == TodoWriteInput(item_count=3)
        assert normalize(ToolKind.TODO_WRITE, {"todos": "bad"}) == TodoWriteInput(item_count=0)

    def test_unknown_keeps_strings_in_order(self):
        view = normalize(ToolKind.UNKNOWN, {"title": "t", "count": 3, "body": "b", "nested": {"x": "y"}})
        assert view == UnknownInput(strings=(("title", "t"), ("body", "b"), ("nested.x", "y")))

    def test_unknown_walks_nested_mappings_and_lists(self):
        args = {"params": {"body": "hi", "tags": ["a", {"label": "b"}], "size": 2}}
        view = normalize(ToolKind.UNKNOWN, args)
        assert view.strings == (
            ("params.body", "hi"),
            ("params.tags.0", "a"),
            ("params.tags.1.label", "b"),
        )

    def test_unknown_walk_is_depth_bounded(self):
        deep: dict = {"leaf": "x"}
        for _ in range(MAX_NESTING_DEPTH + 5):
            deep = {"n": deep}
        view = normalize(ToolKind.UNKNOWN, {"top": "t", "deep": deep})
        assert view.strings == (("top", "t"),)

    def test_unknown_walk_is_count_bounded(self):
        view = normalize(ToolKind.UNKNOWN, {"items": ["s"] * (MAX_COLLECTED_STRINGS + 10)})
        assert len(view.strings) == MAX_COLLECTED_STRINGS

    def test_normalize_call(self):
        call = ToolCall(tool_name="WebFetch", arguments={"url": "https://example.com", "prompt": "p"})
        assert normalize_call(call) == WebFetchInput(url="https://example.com", prompt="p")

    def test_views_are_immutable(self):
        view = ShellInput(command="ls")
        with pytest.raises(AttributeError):
            view.command = "rm -rf /"  # type: ignore[misc]
