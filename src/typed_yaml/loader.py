"""Document loading glue around PyYAML's composer.

``compose_yaml`` and ``read_yaml_file`` turn YAML text into the node tree the
converters work on.  Read and syntax errors are returned as LOAD_FAILURE
ConversionErrors rather than raised.
"""

from __future__ import annotations

import logging
import os
from typing import IO

import yaml

from typed_yaml.errors import ConversionError, ErrorKind
from typed_yaml.result import ConversionResult
from typed_yaml.tree.nodes import NULL_TAG

__all__ = ["compose_yaml", "read_yaml_file"]

logger = logging.getLogger(__name__)


def _compose(stream: str | IO[str]) -> yaml.Node:
    node = yaml.compose(stream, Loader=yaml.SafeLoader)
    # An empty document is a null node, not a missing one.
    if node is None:
        return yaml.ScalarNode(NULL_TAG, "")
    return node


def compose_yaml(text: str) -> ConversionResult[yaml.Node]:
    """Compose a single YAML document from ``text`` into its node tree."""
    try:
        return ConversionResult.success(_compose(text))
    except yaml.YAMLError as exc:
        return ConversionResult.failure(
            ConversionError(f"failed to parse YAML: {exc}", kind=ErrorKind.LOAD_FAILURE)
        )


def read_yaml_file(path: str | os.PathLike[str]) -> ConversionResult[yaml.Node]:
    """Read and compose the YAML document stored at ``path``.

    Args:
        path: Location of a UTF-8 encoded YAML file holding one document.

    Returns:
        The root node, or a LOAD_FAILURE error when the file cannot be read
        or is not valid YAML.
    """
    logger.debug("reading yaml file %s", path)
    try:
        with open(path, encoding="utf-8") as stream:
            return ConversionResult.success(_compose(stream))
    except OSError as exc:
        message = f"failed to read {os.fspath(path)}: {exc.strerror or exc}"
    except (yaml.YAMLError, UnicodeDecodeError) as exc:
        message = f"failed to parse {os.fspath(path)}: {exc}"
    logger.debug("loading %s failed: %s", path, message)
    return ConversionResult.failure(ConversionError(message, kind=ErrorKind.LOAD_FAILURE))
