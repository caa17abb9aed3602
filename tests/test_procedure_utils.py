from sb2import.procedure_utils import parse_procedure_arg_ids, parse_procedure_arg_map
from sb2import.specmap import InputArg


def test_arg_ids_follow_marker_order():
    assert parse_procedure_arg_ids("abc %n %b %s") == ["input0", "input1", "input2"]


def test_arg_ids_ignore_label_text_between_markers():
    assert parse_procedure_arg_ids("go to %n and then %s please") == ["input0", "input1"]


def test_signature_without_markers_has_no_arguments():
    assert parse_procedure_arg_ids("jump") == []
    assert parse_procedure_arg_map("jump") == [None]


def test_arg_map_records_shadow_kinds():
    arg_map = parse_procedure_arg_map("abc %n %b %s")
    assert arg_map == [
        None,
        InputArg("input0", "math_number"),
        InputArg("input1", None),
        InputArg("input2", "text"),
    ]


def test_escaped_marker_is_literal_text():
    assert parse_procedure_arg_ids("100\\%n done %s") == ["input0"]


def test_unknown_marker_is_literal_text():
    assert parse_procedure_arg_ids("rate %d %x %n") == ["input0"]


def test_non_string_signature_degrades_to_no_arguments():
    assert parse_procedure_arg_ids(None) == []
