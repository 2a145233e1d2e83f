"""Compilation database loading.

A compilation database (``compile_commands.json``) is a JSON array of
``{"directory", "command", "file"}`` entries, one per translation unit. The
command is turned into front-end flags by dropping the compiler executable
and a fixed number of trailing tokens (``-o out.o -c file.cpp`` style).
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from .exceptions import CompilationDatabaseError
from .logging_config import get_logger

logger = get_logger(__name__)

REQUIRED_KEYS = ("directory", "command", "file")


@dataclass(frozen=True)
class CompilationEntry:
    """One build command of a compilation database."""

    directory: str
    command: str
    file: str

    @property
    def source_path(self) -> str:
        """The entry's file, resolved against its directory when relative."""
        return os.path.join(self.directory, self.file)


def compiler_flags(command: str, trailing: int = 4) -> list[str]:
    """Tokenize a build command into front-end flags.

    Splits on whitespace, drops the compiler executable and the last
    ``trailing`` tokens.

    Raises:
        ValueError: If the command has too few tokens
    """
    tokens = command.split()
    if len(tokens) < 1 + trailing:
        raise ValueError(
            f"command has {len(tokens)} tokens, expected at least {1 + trailing}"
        )
    return tokens[1 : len(tokens) - trailing]


def parse_compilation_database(data: object, source: str = "<memory>") -> list[CompilationEntry]:
    """Validate decoded JSON and build entries in database order."""
    if not isinstance(data, list):
        raise CompilationDatabaseError(source, "top level must be a JSON array")

    entries = []
    for i, item in enumerate(data):
        if not isinstance(item, dict):
            raise CompilationDatabaseError(source, f"entry {i} is not an object")
        missing = [key for key in REQUIRED_KEYS if key not in item]
        if missing:
            raise CompilationDatabaseError(
                source, f"entry {i} is missing {', '.join(missing)}"
            )
        if not all(isinstance(item[key], str) for key in REQUIRED_KEYS):
            raise CompilationDatabaseError(source, f"entry {i} has non-string fields")
        entries.append(
            CompilationEntry(
                directory=item["directory"], command=item["command"], file=item["file"]
            )
        )
    return entries


def load_compilation_database(path: Union[str, Path]) -> list[CompilationEntry]:
    """Read and validate a compilation database file.

    Raises:
        CompilationDatabaseError: If the file is unreadable or malformed
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise CompilationDatabaseError(path, f"cannot read file: {e}")
    except json.JSONDecodeError as e:
        raise CompilationDatabaseError(path, f"invalid JSON: {e}")

    entries = parse_compilation_database(data, str(path))
    logger.debug("Loaded %d entries from %s", len(entries), path)
    return entries


def entry_flags(entry: CompilationEntry, trailing: int = 4) -> list[str]:
    """Front-end flags of an entry, reporting malformed commands as database errors."""
    try:
        return compiler_flags(entry.command, trailing)
    except ValueError as e:
        raise CompilationDatabaseError(entry.file, str(e))
