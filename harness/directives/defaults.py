"""
Baseline directives every test run starts from.
"""

from harness.constants import (
    AUTO_APPEND_FILE,
    AUTO_PREPEND_FILE,
    DISABLE_DEFS,
    DISPLAY_ERRORS,
    DISPLAY_STARTUP_ERRORS,
    DOCREF_EXT,
    DOCREF_ROOT,
    DOT_HTML,
    E_ALL_OR_E_STRICT,
    EMPTY,
    ERROR_APPEND_STRING,
    ERROR_PREPEND_STRING,
    ERROR_REPORTING,
    HTML_ERRORS,
    IGNORE_REPEATED_ERRORS,
    ISO_8859_1,
    LOG_ERRORS,
    MAGIC_QUOTES_RUNTIME,
    OFF,
    OPEN_BASEDIR,
    OUTPUT_BUFFERING,
    OUTPUT_HANDLER,
    PRECISION,
    REPORT_MEMLEAKS,
    REPORT_ZEND_DEBUG,
    SAFE_MODE,
    SESSION_AUTO_START,
    TRACK_ERRORS,
    U_INVALID_SUBSTITUTE,
    UNICODE_FROM_ERROR_MODE,
    UNICODE_OUTPUT_ENCODING,
    UNICODE_RUNTIME_ENCODING,
    UNICODE_SCRIPT_ENCODING,
    UTF_8,
)

from .store import DirectiveStore


_DEFAULT_DIRECTIVES = (
    (OUTPUT_HANDLER, EMPTY),
    (OPEN_BASEDIR, EMPTY),
    (SAFE_MODE, 0),
    (DISABLE_DEFS, EMPTY),
    (OUTPUT_BUFFERING, OFF),
    (ERROR_REPORTING, E_ALL_OR_E_STRICT),
    # display_errors=0: output is unaffected, and on Windows a 1 can raise a
    # blocking error dialog
    (DISPLAY_ERRORS, 0),
    (DISPLAY_STARTUP_ERRORS, 0),
    (LOG_ERRORS, 0),
    (HTML_ERRORS, 0),
    (TRACK_ERRORS, 1),
    (REPORT_MEMLEAKS, 1),
    (REPORT_ZEND_DEBUG, 0),
    (DOCREF_ROOT, EMPTY),
    (DOCREF_EXT, DOT_HTML),
    (ERROR_PREPEND_STRING, EMPTY),
    (ERROR_APPEND_STRING, EMPTY),
    (AUTO_PREPEND_FILE, EMPTY),
    (AUTO_APPEND_FILE, EMPTY),
    (MAGIC_QUOTES_RUNTIME, 0),
    (IGNORE_REPEATED_ERRORS, 0),
    (PRECISION, 14),
    (UNICODE_RUNTIME_ENCODING, ISO_8859_1),
    (UNICODE_SCRIPT_ENCODING, UTF_8),
    (UNICODE_OUTPUT_ENCODING, UTF_8),
    (UNICODE_FROM_ERROR_MODE, U_INVALID_SUBSTITUTE),
    (SESSION_AUTO_START, 0),
)


def create_default_store() -> DirectiveStore:
    """Return a fresh store holding the harness's baseline directives."""
    store = DirectiveStore()
    for directive, value in _DEFAULT_DIRECTIVES:
        store.add(directive, value)
    return store
