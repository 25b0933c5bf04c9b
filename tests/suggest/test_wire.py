"""Tests for the completion wire decoder."""

import pytest

from shellsuggest.application.normalizer import normalize_all
from shellsuggest.application.wire import (
    WireShape,
    decode,
    decode_text,
    load_payload,
    parse_completions_message,
    parse_pwsh_commands_message,
    sniff_shape,
    split_message,
)
from shellsuggest.domain.exceptions import ProtocolDecodeError
from shellsuggest.domain.types import RawCompletion


class TestShapeSniffing:
    """Payload forms are told apart by their first element."""

    @pytest.mark.parametrize(
        "payload, shape",
        [
            (None, WireShape.EMPTY),
            ([], WireShape.EMPTY),
            ({"CompletionText": "ls", "ResultType": 2}, WireShape.OBJECT),
            (["ls", 2], WireShape.TUPLE),
            ([["ls", 2], ["cd", 2]], WireShape.TUPLE_LIST),
            ([{"CompletionText": "ls", "ResultType": 2}], WireShape.OBJECT_LIST),
        ],
    )
    def test_sniff_shape(self, payload, shape):
        assert sniff_shape(payload) is shape


class TestDecode:
    def test_empty_payloads(self):
        """Missing or empty payloads decode to no records."""
        assert decode(None) == []
        assert decode([]) == []
        assert decode_text("") == []

    def test_single_object(self):
        raws = decode({"CompletionText": "Get-Item", "ResultType": 2, "ToolTip": "Get-Item [-Path]"})
        assert raws == [RawCompletion("Get-Item", 2, "Get-Item [-Path]", None)]

    def test_single_tuple(self):
        assert decode(["src", 4]) == [RawCompletion("src", 4)]

    def test_tuple_list_with_optional_fields(self):
        raws = decode([["main", 0, "branch", "gitBranch"], ["-Force", 7, "Force"]])
        assert raws == [
            RawCompletion("main", 0, "branch", "gitBranch"),
            RawCompletion("-Force", 7, "Force", None),
        ]

    def test_object_list(self):
        raws = decode(
            [
                {"CompletionText": "a.txt", "ResultType": 3},
                {"CompletionText": "b", "ResultType": 4, "CustomIcon": "folder"},
            ]
        )
        assert [r.text for r in raws] == ["a.txt", "b"]
        assert raws[1].custom_icon_id == "folder"

    def test_object_and_tuple_forms_normalize_identically(self):
        """Both wire forms describe the same completions."""
        objects = [
            {"CompletionText": "git.exe", "ResultType": 2, "ToolTip": "C:\\git.exe"},
            {"CompletionText": "docs", "ResultType": 4},
            {"CompletionText": "foreach", "ResultType": 12, "CustomIcon": "symbolKeyword"},
        ]
        tuples = [["git.exe", 2, "C:\\git.exe"], ["docs", 4], ["foreach", 12, None, "symbolKeyword"]]

        assert normalize_all(decode(objects), 0, 2, "/") == normalize_all(decode(tuples), 0, 2, "/")

    def test_malformed_json_raises(self):
        with pytest.raises(ProtocolDecodeError) as exc_info:
            decode_text("[[\"git\", 2]")
        assert exc_info.value.payload == "[[\"git\", 2]"

    @pytest.mark.parametrize(
        "payload",
        [
            [["git"]],
            [[1, 2]],
            [["git", "2"]],
            [{"ResultType": 2}],
            [{"CompletionText": "x", "ResultType": 2, "ToolTip": 5}],
            "just a string",
        ],
    )
    def test_invalid_records_raise(self, payload):
        with pytest.raises(ProtocolDecodeError):
            decode(payload)

    def test_decode_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            load_payload("{not json")


class TestMessages:
    def test_split_message(self):
        assert split_message("Completions;0;2;2;[]") == ("Completions", ["0", "2", "2", "[]"])

    def test_parse_completions_message(self):
        message = parse_completions_message('Completions;4;3;7;[["src/",4]]')
        assert message.replacement_index == 4
        assert message.replacement_length == 3
        assert message.cursor_index == 7
        assert message.payload == '[["src/",4]]'

    def test_payload_may_contain_separators(self):
        message = parse_completions_message('Completions;0;1;1;[["a;b",0,"x;y"]]')
        assert decode_text(message.payload) == [RawCompletion("a;b", 0, "x;y")]

    def test_missing_arguments(self):
        message = parse_completions_message("Completions")
        assert message.replacement_index is None
        assert message.replacement_length is None
        assert message.payload == ""

    def test_non_numeric_window_raises(self):
        with pytest.raises(ProtocolDecodeError):
            parse_completions_message("Completions;x;1;1;[]")

    def test_parse_pwsh_commands_message(self):
        message = parse_pwsh_commands_message('CompletionsPwshCommands;commands;[["gci",2]]')
        assert message.batch_type == "commands"
        assert decode_text(message.payload) == [RawCompletion("gci", 2)]
