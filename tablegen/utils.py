# File: tablegen/utils.py
"""
TableGen - Utility Functions & Helpers
=======================================
Name transforms, Java identifier checks, file I/O and timing helpers used
throughout the generation pipeline.
"""

from __future__ import annotations

import hashlib
import logging
import os
import re
import tempfile
import time
from pathlib import Path
from typing import FrozenSet, List, Optional

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("tablegen.utils")

# ---------------------------------------------------------------------------
# Java naming rules
# ---------------------------------------------------------------------------

_JAVA_IDENTIFIER_RE: re.Pattern[str] = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

_JAVA_KEYWORDS: FrozenSet[str] = frozenset({
    "abstract", "assert", "boolean", "break", "byte", "case", "catch",
    "char", "class", "const", "continue", "default", "do", "double",
    "else", "enum", "extends", "final", "finally", "float", "for", "goto",
    "if", "implements", "import", "instanceof", "int", "interface", "long",
    "native", "new", "package", "private", "protected", "public", "return",
    "short", "static", "strictfp", "super", "switch", "synchronized",
    "this", "throw", "throws", "transient", "try", "void", "volatile",
    "while", "true", "false", "null",
})


def capitalize_first(name: str) -> str:
    """
    Title-case the first character only; the rest is left untouched.

    The first character is kept as is when its title-case form is not a
    single character.

    Examples:
        >>> capitalize_first("person")
        'Person'
        >>> capitalize_first("eMail")
        'EMail'
    """
    if not name:
        return name
    first: str = name[0].title()
    if len(first) != 1:
        first = name[0]
    return first + name[1:]


def is_java_identifier(name: str) -> bool:
    """True when *name* can be used as a Java class or field name."""
    return bool(_JAVA_IDENTIFIER_RE.match(name)) and name not in _JAVA_KEYWORDS


def is_qualified_name(name: str) -> bool:
    """True for dotted names whose every segment is a Java identifier."""
    return all(is_java_identifier(part) for part in name.split("."))


def simple_type_name(declared_type: str) -> str:
    """Strip generics and the package: ``java.util.List<X>`` → ``List``."""
    without_generics: str = re.sub(r"<.*>", "", declared_type, count=1)
    return without_generics.rsplit(".", 1)[-1]


def package_to_path(package_name: str) -> Path:
    """``com.example.model`` → ``com/example/model`` (empty for the default package)."""
    if not package_name:
        return Path()
    return Path(*package_name.split("."))


# ---------------------------------------------------------------------------
# File I/O helpers
# ---------------------------------------------------------------------------


def write_file(path: Path, content: str, atomic: bool = True) -> int:
    """
    Write *content* to *path*, replacing any previous content.

    When *atomic* is True, writes to a temporary file in the same directory
    first and then renames it over the target.

    Returns the number of bytes written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    encoded: bytes = content.encode("utf-8")

    if atomic:
        fd, tmp_path = tempfile.mkstemp(
            dir=str(path.parent),
            prefix=f".{path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(encoded)
            os.replace(tmp_path, str(path))
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
    else:
        path.write_bytes(encoded)

    logger.debug("Wrote %d bytes to %s", len(encoded), path)
    return len(encoded)


def read_file(path: Path) -> str:
    """Read a file and return its content as a string."""
    return path.read_text(encoding="utf-8")


# ---------------------------------------------------------------------------
# Checksum & metrics
# ---------------------------------------------------------------------------


def sha256_hex(content: str) -> str:
    """Return SHA-256 hex digest of a string."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def count_lines(content: str) -> int:
    """Count the number of lines in a string."""
    if not content:
        return 0
    return content.count("\n") + (1 if not content.endswith("\n") else 0)


# ---------------------------------------------------------------------------
# Timer context manager
# ---------------------------------------------------------------------------


class Timer:
    """
    Simple context-manager timer for profiling pipeline phases.

    Usage:
        with Timer("build schemas") as t:
            ...
        print(t.elapsed)
    """

    __slots__ = ("label", "start_time", "end_time", "elapsed")

    def __init__(self, label: str = "operation") -> None:
        self.label: str = label
        self.start_time: float = 0.0
        self.end_time: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[object],
    ) -> None:
        self.end_time = time.perf_counter()
        self.elapsed = self.end_time - self.start_time
        logger.debug("Timer [%s]: %.4f seconds", self.label, self.elapsed)

    def __repr__(self) -> str:
        return f"<Timer {self.label}: {self.elapsed:.4f}s>"


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "capitalize_first",
    "is_java_identifier",
    "is_qualified_name",
    "simple_type_name",
    "package_to_path",
    "write_file",
    "read_file",
    "sha256_hex",
    "count_lines",
    "Timer",
]
