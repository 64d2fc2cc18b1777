"""
Directive text parser and command-line escaping.

This module reads the line-oriented directive grammar (``name=value`` lines,
``;`` full-line comments, no sections, no quoting, no continuation) and
renders single directives as ``-d`` command-line arguments. The store in
``harness.directives.store`` builds on both.
"""

import re
from typing import Iterator, Optional, Tuple

from harness.constants import COMMENT_PREFIX, EMPTY, PWD_PLACEHOLDER


#######################################################################
## Text Grammar
#######################################################################

_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_PWD_PATTERN = re.compile(re.escape(PWD_PLACEHOLDER))


def substitute_working_dir(text: str, working_dir: Optional[str]) -> str:
    """Replace ``{PWD}`` with the working directory and normalize separators.

    Nothing happens unless a working directory is supplied and the text
    actually contains the placeholder. When it does, every forward slash in
    the whole text becomes a backslash (host path convention for the
    directive files this grammar comes from).

    Examples:
        >>> substitute_working_dir("include_path={PWD}/lib", "C:/work")
        'include_path=C:\\\\work\\\\lib'
    """
    if working_dir is None or PWD_PLACEHOLDER not in text:
        return text

    # Backslashes are escaped so the regex replacement inserts the path literally
    text = _PWD_PATTERN.sub(working_dir.replace("\\", "\\\\"), text)
    return text.replace("/", "\\")


def iter_directive_lines(text: str) -> Iterator[Tuple[str, str]]:
    """Yield ``(name, value)`` pairs from directive text.

    Empty lines and lines starting with ``;`` are ignored. Lines without an
    ``=`` are skipped silently; malformed input never raises.

    Examples:
        >>> list(iter_directive_lines("a=1\\n;comment\\nbogus\\nb ="))
        [('a', '1'), ('b', '')]
    """
    for line in _LINE_BREAK.split(text):
        if not line or line.startswith(COMMENT_PREFIX):
            continue

        name, separator, value = line.partition("=")
        if not separator:
            continue

        yield name.strip(), value.strip() if value else EMPTY


#######################################################################
## Command-line Rendering
#######################################################################

# Applied in order; none of the replacements produce text a later one matches
_CLI_ESCAPES = (
    ('"', '\\"'),
    ("&", "\\&"),
    ("|", "\\|"),
)


def escape_cli_value(value: str, is_windows_host: bool) -> str:
    """Escape a directive value for use inside a double-quoted ``-d`` argument.

    On Windows hosts ``%`` is doubled since batch scripts expand it.
    """
    for raw, escaped in _CLI_ESCAPES:
        value = value.replace(raw, escaped)
    if is_windows_host:
        value = value.replace("%", "%%")
    return value


def format_cli_arg(directive: str, value: str, is_windows_host: bool) -> str:
    """Render one directive as a ``-d`` token, leading space included."""
    return f' -d "{directive}={escape_cli_value(value, is_windows_host)}"'


def values_equal_ignore_case(left: Optional[str], right: Optional[str]) -> bool:
    """Case-insensitive comparison where a missing value never matches."""
    if left is None or right is None:
        return False
    return left.lower() == right.lower()
