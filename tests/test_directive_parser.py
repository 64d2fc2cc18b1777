from harness.directives.parser import (
    escape_cli_value,
    format_cli_arg,
    iter_directive_lines,
    substitute_working_dir,
    values_equal_ignore_case,
)


def test_comments_blank_lines_and_lines_without_equals_are_skipped():
    text = "error_reporting=E_ALL\n;note\n\nnot a directive\ndisplay_errors=0\n"

    assert list(iter_directive_lines(text)) == [
        ("error_reporting", "E_ALL"),
        ("display_errors", "0"),
    ]


def test_split_happens_on_first_equals_and_sides_are_trimmed():
    assert list(iter_directive_lines("  docref_root = a=b  ")) == [("docref_root", "a=b")]


def test_missing_value_becomes_empty_string():
    assert list(iter_directive_lines("open_basedir=\nsafe_mode =   ")) == [
        ("open_basedir", ""),
        ("safe_mode", ""),
    ]


def test_windows_and_old_mac_line_endings():
    assert list(iter_directive_lines("a=1\r\nb=2\rc=3")) == [("a", "1"), ("b", "2"), ("c", "3")]


def test_indented_comment_is_not_a_comment():
    # Only lines that start with ';' are comments
    assert list(iter_directive_lines(" ;x=1")) == [(";x", "1")]


def test_working_dir_replaces_placeholder_and_normalizes_slashes():
    result = substitute_working_dir("include_path={PWD}/lib\nauto_prepend_file=/etc/x.php", "C:\\php\\tests")

    assert result == "include_path=C:\\php\\tests\\lib\nauto_prepend_file=\\etc\\x.php"


def test_working_dir_is_ignored_without_placeholder():
    assert substitute_working_dir("include_path=/usr/share", "C:\\php") == "include_path=/usr/share"


def test_placeholder_is_kept_without_working_dir():
    assert substitute_working_dir("include_path={PWD}/lib", None) == "include_path={PWD}/lib"


def test_cli_escaping_of_quotes_ampersands_and_pipes():
    assert escape_cli_value('He said "hi" & bye | ok', False) == 'He said \\"hi\\" \\& bye \\| ok'


def test_percent_is_doubled_only_on_windows():
    assert escape_cli_value("%PATH%", True) == "%%PATH%%"
    assert escape_cli_value("%PATH%", False) == "%PATH%"


def test_format_cli_arg_has_leading_space():
    assert format_cli_arg("precision", "14", False) == ' -d "precision=14"'


def test_case_insensitive_comparison_never_matches_missing_values():
    assert values_equal_ignore_case("on", "On")
    assert not values_equal_ignore_case(None, "On")
