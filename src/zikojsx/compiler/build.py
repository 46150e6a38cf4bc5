"""Build system: compile every matching file of a source tree."""

from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from zikojsx.compiler.exceptions import ZikoJsxError
from zikojsx.compiler.pipeline import compile_file
from zikojsx.config import CompilerOptions

log = logging.getLogger(__name__)

MANIFEST_NAME = "manifest.json"

# Output suffix per input suffix; the markup is gone, the dialect is not.
OUTPUT_SUFFIXES = {".jsx": ".js", ".tsx": ".ts"}

_SKIPPED_DIRS = {"node_modules"}


@dataclass
class BuildSummary:
    compiled: int = 0
    unchanged: int = 0
    out_dir: Optional[Path] = None
    errors: List[ZikoJsxError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class ArtifactBuilder:
    """Compiles a source tree into ``out_dir`` and tracks source hashes."""

    def __init__(
        self, src_dir: Path, out_dir: Path, options: Optional[CompilerOptions] = None
    ) -> None:
        self.src_dir = src_dir.resolve()
        self.out_dir = out_dir.resolve()
        self.options = options or CompilerOptions()
        self.entries: Dict[str, dict] = self._load_manifest()

    def build(self, force: bool = False) -> BuildSummary:
        summary = BuildSummary(out_dir=self.out_dir)
        for path in self.iter_sources():
            self._build_file(path, summary, force=force)
        self._write_manifest()
        return summary

    def iter_sources(self) -> List[Path]:
        """Matching files under ``src_dir``, in a stable order."""
        found: List[Path] = []
        self._scan_directory(self.src_dir, found)
        return found

    def _scan_directory(self, dir_path: Path, found: List[Path]) -> None:
        try:
            entries = sorted(dir_path.iterdir())
        except FileNotFoundError:
            return

        for entry in entries:
            if entry.name.startswith("."):
                continue
            if entry.is_dir():
                if entry.name in _SKIPPED_DIRS or entry.resolve() == self.out_dir:
                    continue
                self._scan_directory(entry, found)
            elif entry.is_file() and self.options.matches(entry):
                found.append(entry)

    def compile_one(self, path: Path, force: bool = True) -> BuildSummary:
        """Recompile a single file (used by watch mode)."""
        summary = BuildSummary(out_dir=self.out_dir)
        self._build_file(path, summary, force=force)
        self._write_manifest()
        return summary

    def remove(self, path: Path) -> bool:
        """Drop the artifact of a deleted source file."""
        entry = self.entries.pop(str(path.resolve()), None)
        if entry is None:
            return False
        artifact = self.out_dir / entry["artifact"]
        artifact.unlink(missing_ok=True)
        self._write_manifest()
        return True

    def artifact_path_for(self, path: Path) -> Path:
        rel = path.resolve().relative_to(self.src_dir)
        return rel.with_suffix(OUTPUT_SUFFIXES.get(rel.suffix, ".js"))

    def _build_file(self, path: Path, summary: BuildSummary, force: bool) -> None:
        key = str(path.resolve())
        source_hash = _hash_file(path)
        artifact_rel = self.artifact_path_for(path)
        artifact_path = self.out_dir / artifact_rel

        entry = self.entries.get(key)
        if (
            not force
            and entry is not None
            and entry.get("hash") == source_hash
            and artifact_path.exists()
        ):
            summary.unchanged += 1
            return

        try:
            output = compile_file(path, self.options)
        except ZikoJsxError as e:
            log.error("%s", e)
            summary.errors.append(e)
            return

        artifact_path.parent.mkdir(parents=True, exist_ok=True)
        artifact_path.write_text(output, encoding="utf-8")
        self.entries[key] = {"artifact": str(artifact_rel), "hash": source_hash}
        summary.compiled += 1
        log.info("Compiled %s -> %s", path, artifact_rel)

    def _load_manifest(self) -> Dict[str, dict]:
        manifest_path = self.out_dir / MANIFEST_NAME
        if not manifest_path.exists():
            return {}
        try:
            data = json.loads(manifest_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            log.warning("Ignoring unreadable manifest %s", manifest_path)
            return {}
        if data.get("src_dir") != str(self.src_dir):
            return {}
        return dict(data.get("entries", {}))

    def _write_manifest(self) -> None:
        self.out_dir.mkdir(parents=True, exist_ok=True)
        manifest = {
            "version": 1,
            "src_dir": str(self.src_dir),
            "entries": self.entries,
        }
        manifest_path = self.out_dir / MANIFEST_NAME
        manifest_path.write_text(json.dumps(manifest, indent=2), encoding="utf-8")


def _hash_file(path: Path) -> str:
    return hashlib.sha256(path.read_bytes()).hexdigest()


def build_project(
    src_dir: Path,
    out_dir: Path,
    options: Optional[CompilerOptions] = None,
    force: bool = False,
) -> BuildSummary:
    """Build every matching file under ``src_dir`` into ``out_dir``."""
    return ArtifactBuilder(src_dir, out_dir, options).build(force=force)
