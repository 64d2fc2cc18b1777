"""
Capability package.

Import specific capabilities or helpers from their dedicated modules, e.g.:
- `harness.capabilities.base`
- `harness.capabilities.registry`
- `harness.capabilities.bootstrap`
"""

__all__: list[str] = []
