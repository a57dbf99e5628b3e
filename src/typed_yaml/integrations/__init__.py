"""Integrations subpackage for typed-yaml.

- ``_pytest_plugin``: pytest fixtures, auto-loaded through the ``pytest11``
  entry point when typed-yaml is installed.
"""

__all__: list[str] = []
