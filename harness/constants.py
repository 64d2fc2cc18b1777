"""
Core harness constants.

Directive names and well-known directive values used across the directive
store, the default directive set and the built-in capabilities.

Only place true invariants here. Deployment-specific paths live in
harness.settings; use those helpers rather than adding env-derived values here.
"""

from __future__ import annotations


# ==============================================================================
# Directive names
# ==============================================================================

INCLUDE_PATH = "include_path"
EXTENSION = "extension"
ZEND_EXTENSION = "zend_extension"
EXTENSION_DIR = "extension_dir"
OUTPUT_HANDLER = "output_handler"
OPEN_BASEDIR = "open_basedir"
SAFE_MODE = "safe_mode"
DISABLE_DEFS = "disable_defs"
OUTPUT_BUFFERING = "output_buffering"
ERROR_REPORTING = "error_reporting"
DISPLAY_ERRORS = "display_errors"
DISPLAY_STARTUP_ERRORS = "display_startup_errors"
LOG_ERRORS = "log_errors"
HTML_ERRORS = "html_errors"
TRACK_ERRORS = "track_errors"
REPORT_MEMLEAKS = "report_memleaks"
REPORT_ZEND_DEBUG = "report_zend_debug"
DOCREF_ROOT = "docref_root"
DOCREF_EXT = "docref_ext"
ERROR_PREPEND_STRING = "error_prepend_string"
ERROR_APPEND_STRING = "error_append_string"
AUTO_PREPEND_FILE = "auto_prepend_file"
AUTO_APPEND_FILE = "auto_append_file"
MAGIC_QUOTES_RUNTIME = "magic_quotes_runtime"
IGNORE_REPEATED_ERRORS = "ignore_repeated_errors"
PRECISION = "precision"
UNICODE_RUNTIME_ENCODING = "unicode.runtime_encoding"
UNICODE_SCRIPT_ENCODING = "unicode.script_encoding"
UNICODE_OUTPUT_ENCODING = "unicode.output_encoding"
UNICODE_FROM_ERROR_MODE = "unicode.from_error_mode"
SESSION_AUTO_START = "session.auto_start"
OPCACHE_ENABLE = "opcache.enable"
OPCACHE_ENABLE_CLI = "opcache.enable_cli"

# ==============================================================================
# Directive values
# ==============================================================================

EMPTY = ""
ON = "On"
OFF = "Off"
UTF_8 = "UTF-8"
ISO_8859_1 = "ISO-8859-1"
U_INVALID_SUBSTITUTE = "U_INVALID_SUBSTITUTE"
DOT_HTML = ".html"
E_ALL_OR_E_STRICT = "E_ALL|E_STRICT"

# Placeholder replaced with the working directory when parsing directive text
PWD_PLACEHOLDER = "{PWD}"

# Comment marker for directive text (full-line only)
COMMENT_PREFIX = ";"

# ==============================================================================
# Capability serialization
# ==============================================================================

CAPABILITY_SET_TAG = "capability_set"
CAPABILITY_TAG = "capability"
CAPABILITY_NAME_ATTRIBUTE = "name"

# Activity log file name under the system root
ACTIVITY_LOG_FILE = "activity.log"

# Profiles file name under the system root
PROFILES_FILE = "profiles.yaml"
