"""
Base exceptions shared across the harness packages.

Component-specific errors live beside the code that raises them and derive
from the classes below.
"""


class HarnessError(Exception):
    """Base exception for all harness errors."""
    pass


class DirectiveStoreError(HarnessError):
    """Base exception for directive store errors."""
    pass


class CapabilityError(HarnessError):
    """Base exception for capability and composition errors."""
    pass
