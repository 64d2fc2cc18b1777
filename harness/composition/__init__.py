"""
Composition package.

Import specific helpers from their dedicated modules, e.g.:
- `harness.composition.capability_set`
- `harness.composition.codec`
- `harness.composition.setup`
- `harness.composition.runnable`
"""

__all__: list[str] = []
