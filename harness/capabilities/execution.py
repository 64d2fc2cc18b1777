"""
Execution-mode capabilities: how the interpreter under test is started.
"""

from harness.constants import OFF, OUTPUT_BUFFERING
from harness.directives.store import DirectiveStore

from .base import Capability, CapabilityContext, Category, TestContext


class CliCapability(Capability):
    """Run each test through the command-line interpreter (default)."""

    category = Category.EXECUTION_MODE

    def name(self) -> str:
        return "CLI"

    def is_implemented(self) -> bool:
        return True


class BuiltinWebServerCapability(Capability):
    """Run each test as a request against the interpreter's built-in web server."""

    category = Category.EXECUTION_MODE

    CLI_ONLY_MARKER = "sapi/cli/"

    def name(self) -> str:
        return "Builtin-WWW"

    def is_implemented(self) -> bool:
        return True

    def will_skip(self, test_context: TestContext) -> bool:
        # Tests of the command-line front end cannot run behind a web server
        return self.CLI_ONLY_MARKER in test_context.normalized_name

    def apply_directives(self, store: DirectiveStore, context: CapabilityContext) -> None:
        store.set(OUTPUT_BUFFERING, OFF)
