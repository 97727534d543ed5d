# File: tablegen/exporters.py
"""
TableGen - Source Exporter (File-System Manager)
=================================================

Responsible for:
    1. Checking that the output location is usable before anything is written.
    2. Mapping ``(package, artifact name)`` to ``<output>/<package path>/<name>.java``.
    3. Writing each file atomically (write-to-temp then rename).
    4. Keeping a manifest with sizes and checksums of everything written.

Writes are whole-file overwrites, so re-running with the same input leaves
byte-identical files.  A batch is not transactional: if a run aborts midway
the files already written stay in place until the next run replaces them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from tablegen.errors import ConfigurationError
from tablegen.utils import count_lines, package_to_path, sha256_hex, write_file

logger: logging.Logger = logging.getLogger("tablegen.exporters")


# ---------------------------------------------------------------------------
# Data classes for export results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FileRecord:
    """Immutable record of a single exported file."""

    package_name: str
    artifact_name: str
    relative_path: str
    absolute_path: str
    size_bytes: int
    line_count: int
    sha256: str
    written: bool = True


@dataclass(frozen=False, slots=True)
class ExportManifest:
    """All files handled by one exporter."""

    output_directory: str = ""
    files: List[FileRecord] = field(default_factory=list)

    @property
    def total_files(self) -> int:
        return len(self.files)

    @property
    def total_bytes(self) -> int:
        return sum(f.size_bytes for f in self.files)

    @property
    def total_lines(self) -> int:
        return sum(f.line_count for f in self.files)


# ---------------------------------------------------------------------------
# SourceExporter
# ---------------------------------------------------------------------------


class SourceExporter:
    """
    Writes generated sources under the output directory.

    Usage::

        exporter = SourceExporter(Path("build/generated"))
        exporter.write("com.example", "PersonTable", text)

    Thread-safety: NOT thread-safe.  Use one exporter per run.
    """

    def __init__(
        self,
        output_dir: Optional[Path],
        *,
        file_extension: str = ".java",
        atomic_writes: bool = True,
        dry_run: bool = False,
    ) -> None:
        """
        Initialise the exporter.

        Raises:
            ConfigurationError: no output directory was given (outside dry-run
                mode) or the path exists and is not a directory.
        """
        if output_dir is None:
            if not dry_run:
                raise ConfigurationError(
                    "Output location not configured: set 'output_dir' (CLI: -o/--output) "
                    "so generated sources have somewhere to go."
                )
            output_dir = Path(".")
        resolved: Path = Path(output_dir).resolve()
        if resolved.exists() and not resolved.is_dir():
            raise ConfigurationError(
                f"Output location {resolved} exists and is not a directory."
            )

        self._output_dir: Path = resolved
        self._file_extension: str = file_extension
        self._atomic_writes: bool = atomic_writes
        self._dry_run: bool = dry_run
        self._manifest: ExportManifest = ExportManifest(output_directory=str(resolved))

        logger.debug(
            "SourceExporter initialised: output_dir=%s, atomic=%s, dry_run=%s.",
            self._output_dir,
            self._atomic_writes,
            self._dry_run,
        )

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    @property
    def manifest(self) -> ExportManifest:
        return self._manifest

    def relative_path(self, package_name: str, artifact_name: str) -> Path:
        return package_to_path(package_name) / f"{artifact_name}{self._file_extension}"

    def write(self, package_name: str, artifact_name: str, content: str) -> FileRecord:
        """Write one artifact, replacing any previous version."""
        rel_path: Path = self.relative_path(package_name, artifact_name)
        full_path: Path = self._output_dir / rel_path

        if self._dry_run:
            size: int = len(content.encode("utf-8"))
            logger.debug("Dry run: would write %s (%d bytes).", rel_path, size)
        else:
            size = write_file(full_path, content, atomic=self._atomic_writes)

        record = FileRecord(
            package_name=package_name,
            artifact_name=artifact_name,
            relative_path=rel_path.as_posix(),
            absolute_path=str(full_path),
            size_bytes=size,
            line_count=count_lines(content),
            sha256=sha256_hex(content),
            written=not self._dry_run,
        )
        self._manifest.files.append(record)
        return record


__all__: List[str] = [
    "FileRecord",
    "ExportManifest",
    "SourceExporter",
]
