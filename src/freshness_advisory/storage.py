"""
JSON document persistence shared by the cache and advisory stores.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from .exceptions import PersistenceError


def read_json(path: Path, description: str) -> Any | None:
    """
    Read a JSON document.

    Returns:
        Parsed document, or None when the file does not exist

    Raises:
        PersistenceError: The file exists but cannot be read or parsed
    """
    try:
        with open(path) as f:
            return json.load(f)
    except FileNotFoundError:
        return None
    except json.JSONDecodeError as e:
        raise PersistenceError(
            f"Error parsing {description} file: {e}", path=str(path)
        ) from e
    except OSError as e:
        raise PersistenceError(
            f"Error reading {description} file: {e}", path=str(path)
        ) from e


def write_json(path: Path, data: Any, description: str, sort_keys: bool = False) -> None:
    """
    Write a JSON document atomically.

    The document is written to a temporary file in the target directory and
    moved into place, so readers never observe a partial file.

    Raises:
        PersistenceError: The document cannot be serialized or written
    """
    try:
        content = json.dumps(data, indent=2, sort_keys=sort_keys) + "\n"
    except (TypeError, ValueError) as e:
        raise PersistenceError(
            f"Error marshalling {description} data: {e}", path=str(path)
        ) from e

    temp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
        with os.fdopen(fd, "w") as f:
            f.write(content)
        os.replace(temp_name, path)
    except OSError as e:
        if temp_name is not None:
            Path(temp_name).unlink(missing_ok=True)
        raise PersistenceError(
            f"Error writing {description} file: {e}", path=str(path)
        ) from e
