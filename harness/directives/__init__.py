"""
Directive package.

Import specific helpers from their dedicated modules, e.g.:
- `harness.directives.store`
- `harness.directives.parser`
- `harness.directives.defaults`
"""

__all__: list[str] = []
