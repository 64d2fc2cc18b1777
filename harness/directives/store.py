"""
Multi-valued directive store.

A DirectiveStore is the runtime configuration handed to the interpreter
under test: an INI file without sections where each directive holds one or
more distinct values in insertion order. Most directives hold one value; a
few, like ``extension``, hold many.

Derived views (canonical text, ``-d`` arguments, the extensions-only
projection) are memoized. Replacing mutations (``set``, ``remove``,
``merge_replace``) drop the memoized views; ``add`` deliberately does not,
so a view requested before an ``add`` can be stale afterwards. Stores are
built by one owner and treated as read-only once published; memoization is
guarded by a lock so concurrent readers only ever see complete values.
"""

from __future__ import annotations

import threading
from typing import Dict, Iterator, List, Optional, Union

from harness.constants import EXTENSION, EXTENSION_DIR, INCLUDE_PATH, OFF, ON
from harness.exceptions import DirectiveStoreError
from harness.runtime.host import Build, Host

from .parser import (
    format_cli_arg,
    iter_directive_lines,
    substitute_working_dir,
    values_equal_ignore_case,
)


DirectiveValue = Union[str, int]


class ReadOnlyStoreError(DirectiveStoreError):
    """Raised when mutating a read-only directive store."""
    pass


def extension_file_name(host: Host, name: str) -> str:
    """Return the shared library file name of an extension for a host.

    Windows builds ship ``php_<name>.dll``; everything else ships ``<name>.so``.
    """
    return f"php_{name}.dll" if host.is_windows_host() else f"{name}.so"


class DirectiveStore:
    """Ordered map of directive name to distinct values."""

    def __init__(self):
        self._directives: Dict[str, List[str]] = {}
        self._cache_lock = threading.Lock()
        self._text_cache: Optional[str] = None
        self._cli_cache: Dict[bool, str] = {}
        self._extensions_cache: Optional[ReadOnlyDirectiveStore] = None

    @classmethod
    def parse(cls, text: str, working_dir: Optional[str] = None) -> "DirectiveStore":
        """Build a store from directive text.

        Args:
            text: Line-oriented ``name=value`` text
            working_dir: Substituted for ``{PWD}``; when used, forward
                slashes in the text become backslashes

        Returns:
            A new store; repeated directives accumulate values
        """
        store = cls()
        for name, value in iter_directive_lines(substitute_working_dir(text, working_dir)):
            store.add(name, value)
        return store

    #######################################################################
    ## Mutation
    #######################################################################

    def _invalidate(self) -> None:
        with self._cache_lock:
            self._text_cache = None
            self._cli_cache = {}
            self._extensions_cache = None

    def set(self, directive: str, value: DirectiveValue) -> None:
        """Replace every value of ``directive`` with ``value``."""
        self._directives[directive] = [str(value)]
        self._invalidate()

    def add(self, directive: str, value: DirectiveValue) -> None:
        """Append ``value`` to ``directive`` unless already present.

        Memoized views are left untouched.
        """
        value = str(value)
        values = self._directives.get(directive)
        if values is None:
            self._directives[directive] = [value]
        elif value not in values:
            values.append(value)

    def remove(self, directive: str) -> None:
        self._directives.pop(directive, None)
        self._invalidate()

    def merge_replace(self, other: "DirectiveStore") -> None:
        """Overwrite each directive present in ``other`` with its values.

        Directives only present in this store are kept.
        """
        for directive, values in other._directives.items():
            self._directives[directive] = list(values)
        if other.count_directives() > 0:
            self._invalidate()

    def merge_append(self, other: "DirectiveStore") -> None:
        """Re-add every value of ``other`` into ``other`` itself.

        This store is never modified. The behavior is kept as observed in
        production use until the intended semantics (append ``other`` into
        this store) are confirmed.
        """
        for directive in list(other.directives()):
            for value in other.get_all(directive) or []:
                other.add(directive, value)

    #######################################################################
    ## Access
    #######################################################################

    def get(self, directive: str) -> Optional[str]:
        """Return the first value of ``directive`` or None."""
        values = self._directives.get(directive)
        return values[0] if values else None

    def get_all(self, directive: str) -> Optional[List[str]]:
        """Return a copy of every value of ``directive`` or None if never set."""
        values = self._directives.get(directive)
        return None if values is None else list(values)

    def directives(self) -> List[str]:
        return list(self._directives.keys())

    def contains(self, directive: str) -> bool:
        return directive in self._directives

    def contains_exact(self, directive: str, value: str) -> bool:
        """Check if any value of ``directive`` equals ``value`` (case sensitive)."""
        return value in self._directives.get(directive, ())

    def contains_partial(self, directive: str, value: str) -> bool:
        """Check if any value of ``directive`` contains ``value`` (ignoring case)."""
        needle = value.lower()
        return any(needle in candidate.lower() for candidate in self._directives.get(directive, ()))

    def is_on(self, directive: str) -> bool:
        """True only if ``directive`` is explicitly ``On``; never assumed."""
        return values_equal_ignore_case(self.get(directive), ON)

    def is_off(self, directive: str) -> bool:
        """True only if ``directive`` is explicitly ``Off``; never assumed."""
        return values_equal_ignore_case(self.get(directive), OFF)

    def count_directives(self) -> int:
        return len(self._directives)

    def count_values(self, directive: str) -> int:
        return len(self._directives.get(directive, ()))

    def count_all_values(self) -> int:
        return sum(len(values) for values in self._directives.values())

    def is_empty(self) -> bool:
        return not self._directives

    def copy(self) -> "DirectiveStore":
        """Return an independent mutable store with the same content."""
        duplicate = DirectiveStore()
        for directive, values in self._directives.items():
            duplicate._directives[directive] = list(values)
        return duplicate

    #######################################################################
    ## Include Path and Extensions
    #######################################################################

    @property
    def include_path(self) -> Optional[str]:
        return self.get(INCLUDE_PATH)

    def add_to_include_path(self, host: Host, path: str) -> None:
        """Append ``path`` to the include path using the host's list separator."""
        if self.contains(INCLUDE_PATH):
            combined = f"{self.get(INCLUDE_PATH)}{host.path_separator()}{path}"
        else:
            combined = path
        self.set(INCLUDE_PATH, combined)

    def remove_include_path(self) -> None:
        self.remove(INCLUDE_PATH)

    @property
    def extension_dir(self) -> Optional[str]:
        return self.get(EXTENSION_DIR)

    def set_extension_dir(self, extension_dir: str) -> None:
        self.set(EXTENSION_DIR, extension_dir)

    def resolve_extension_dir(self, build: Optional[Build]) -> Optional[str]:
        """Return the configured extension dir, else the build's default."""
        extension_dir = self.extension_dir
        if build is not None and not extension_dir:
            extension_dir = build.default_extension_directory()
        return extension_dir

    @property
    def extensions(self) -> Optional[List[str]]:
        """Shared library names of dynamically loaded extensions, or None."""
        return self.get_all(EXTENSION)

    def add_extension(self, file_name: str) -> None:
        self.add(EXTENSION, file_name)

    def host_has_extension(self, host: Host, build: Optional[Build], name: str) -> bool:
        """Check whether the extension's library exists in the extension dir.

        ``name`` may be a full file name or a bare extension name, in which
        case the host's naming convention is tried as well. This does not
        check extensions compiled statically into the build.
        """
        if self._extension_file_exists(host, build, name):
            return True
        return not name.startswith("php_") and self._extension_file_exists(
            host, build, extension_file_name(host, name)
        )

    def add_host_extension(self, host: Host, build: Optional[Build], name: str) -> None:
        """Enable an extension, applying the host's file naming when needed."""
        if not self._extension_file_exists(host, build, name):
            name = extension_file_name(host, name)
        self.add_extension(name)

    def has_extension(self, name: str) -> bool:
        """Check whether an enabled extension entry mentions ``name``."""
        return self.contains_partial(EXTENSION, name)

    def _extension_file_exists(self, host: Host, build: Optional[Build], file_name: str) -> bool:
        return host.exists(f"{self.resolve_extension_dir(build)}/{file_name}")

    #######################################################################
    ## Derived Views
    #######################################################################

    def project_extensions_only(self) -> "ReadOnlyDirectiveStore":
        """Return a read-only store holding only ``extension_dir`` and ``extension``.

        Useful to run with the same extensions without carrying any other
        directive. The projection is memoized until a replacing mutation.
        """
        with self._cache_lock:
            if self._extensions_cache is None:
                directives: Dict[str, List[str]] = {}
                extension_dir = self.get(EXTENSION_DIR)
                if extension_dir is not None:
                    directives[EXTENSION_DIR] = [extension_dir]
                extensions = self._directives.get(EXTENSION)
                if extensions is not None:
                    directives[EXTENSION] = list(extensions)
                self._extensions_cache = ReadOnlyDirectiveStore(directives)
            return self._extensions_cache

    def to_text(self) -> str:
        """Render one ``directive=value`` line per value."""
        with self._cache_lock:
            if self._text_cache is None:
                self._text_cache = "".join(
                    f"{directive}={value}\n"
                    for directive, values in self._directives.items()
                    for value in values
                )
            return self._text_cache

    def to_cli_args(self, is_windows_host: bool) -> str:
        """Render ``-d`` arguments for the interpreter command line.

        Only the first value of each directive is passed; multi-valued
        directives collapse on the command line.
        """
        with self._cache_lock:
            cli_args = self._cli_cache.get(is_windows_host)
            if cli_args is None:
                cli_args = "".join(
                    format_cli_arg(directive, values[0], is_windows_host)
                    for directive, values in self._directives.items()
                    if values
                )
                self._cli_cache[is_windows_host] = cli_args
            return cli_args

    #######################################################################
    ## Protocol Methods
    #######################################################################

    def __contains__(self, directive: object) -> bool:
        return directive in self._directives

    def __iter__(self) -> Iterator[str]:
        return iter(self.directives())

    def __len__(self) -> int:
        return len(self._directives)

    def __eq__(self, other: object) -> bool:
        # Order sensitive: equal content inserted in another order compares unequal
        if other is self:
            return True
        if not isinstance(other, DirectiveStore):
            return NotImplemented
        return self.to_text() == other.to_text()

    def __hash__(self) -> int:
        return hash(self.to_text())

    def __str__(self) -> str:
        return self.to_text()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._directives!r})"


class ReadOnlyDirectiveStore(DirectiveStore):
    """Directive store snapshot that rejects every mutation."""

    def __init__(self, directives: Optional[Dict[str, List[str]]] = None):
        super().__init__()
        self._directives = {name: list(values) for name, values in (directives or {}).items()}

    def _reject(self, *args, **kwargs) -> None:
        raise ReadOnlyStoreError(f"{type(self).__name__} cannot be modified")

    set = _reject
    add = _reject
    remove = _reject
    merge_replace = _reject

    def project_extensions_only(self) -> "ReadOnlyDirectiveStore":
        # Already holds at most the extension directives
        return self
