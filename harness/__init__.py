"""
Configuration composition for interpreter test runs.

- `harness.directives` - multi-valued directive store (INI) and its grammar
- `harness.capabilities` - environment facets and their registry
- `harness.composition` - capability sets, XML codec, setup, runnable configs
"""

__version__ = "0.1.0"
