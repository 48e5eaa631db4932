"""
Statement Checker — runs OneStatementPerLine over files and workspaces.

Ties the pieces together:
  • reads the file (binary / size / missing guards)
  • parses it with tree-sitter and converts it (frontend)
  • walks the tree with a fresh StatementLineAnalyzer
  • for C, drops violations on compiled-out lines (PreprocessorEngine)
"""

import os
import logging
from typing import Dict, List, Optional, Tuple, Union

from .config import LintConfig
from .frontend import UnsupportedLanguageError, language_for_path, parse_source
from .preprocessor import PreprocessorEngine
from .report import StatementViolation, ViolationReport
from .statement_analyzer import StatementLineAnalyzer
from .tree_walker import TreeWalker

logger = logging.getLogger(__name__)


def _norm_path(p: str) -> str:
    return p.replace("\\", "/")


class StatementChecker:
    """Checks source files of a workspace for multiple statements per line."""

    def __init__(self, workspace_root: str, config: Optional[LintConfig] = None,
                 preprocessor: Optional[PreprocessorEngine] = None):
        self.workspace_root = workspace_root
        self.config = config if config is not None else LintConfig()
        self.preprocessor = preprocessor
        if self.preprocessor is None and self.config.honor_preprocessor:
            self.preprocessor = PreprocessorEngine(workspace_root)
            for name, value in self.config.defines.items():
                self.preprocessor.add_define(name, value)
        # path -> (mtime, violations)
        self._cache: Dict[str, Tuple[float, List[StatementViolation]]] = {}

    def _resolve(self, file_path: str) -> str:
        """Resolve a (possibly POSIX-style) relative path to an absolute path."""
        native = file_path.replace("/", os.sep).replace("\\", os.sep)
        if os.path.isabs(native):
            return native
        return os.path.join(self.workspace_root, native)

    def relative_path(self, file_path: str) -> str:
        """The workspace-relative, '/'-separated path recorded on violations."""
        return _norm_path(os.path.relpath(self._resolve(file_path), self.workspace_root))

    # ────────────────────────────────────────────────────────────────
    #  Source
    # ────────────────────────────────────────────────────────────────

    def check_source(self, source: Union[str, bytes], language: str,
                     file_path: Optional[str] = None) -> List[StatementViolation]:
        """Check in-memory source.  Raises UnsupportedLanguageError."""
        if not self.config.enabled:
            return []

        root, has_error = parse_source(source, language)
        if has_error:
            logger.warning("Syntax errors in %s; results may be incomplete",
                           file_path or "<source>")

        analyzer = StatementLineAnalyzer()
        TreeWalker([analyzer]).walk(root, file_path)
        violations = analyzer.violations

        if language == "c" and self.preprocessor is not None and violations:
            violations = self._drop_inactive(source, file_path or "<source>.c", violations)

        return sorted(violations, key=lambda v: (v.line_number, v.column))

    def _drop_inactive(self, source: Union[str, bytes], file_path: str,
                       violations: List[StatementViolation]) -> List[StatementViolation]:
        text = source.decode("utf-8", errors="replace") if isinstance(source, bytes) else source
        active = self.preprocessor.active_lines(text, file_path, self.config.include_dirs)
        if active is None:
            return violations
        kept = [v for v in violations if v.line_number in active]
        if len(kept) != len(violations):
            logger.info("Dropped %d violations on inactive lines of %s",
                        len(violations) - len(kept), file_path)
        return kept

    # ────────────────────────────────────────────────────────────────
    #  Files
    # ────────────────────────────────────────────────────────────────

    def check_file(self, file_path: str) -> List[StatementViolation]:
        full = self._resolve(file_path)
        rel = self.relative_path(file_path)

        if not os.path.isfile(full):
            logger.warning("File not found: %s", full)
            return []

        language = language_for_path(full, self.config.extensions)
        if language is None:
            logger.warning("No language registered for %s; skipping", rel)
            return []

        try:
            mtime = os.path.getmtime(full)
            cached = self._cache.get(full)
            if cached is not None and cached[0] == mtime:
                return cached[1]

            size = os.path.getsize(full)
            if size > self.config.max_file_bytes:
                logger.warning("Skipping %s: %d bytes exceeds limit of %d",
                               rel, size, self.config.max_file_bytes)
                return []

            with open(full, "rb") as f:
                source = f.read()
            # Skip binary files
            if b"\x00" in source[:8192]:
                logger.warning("Skipping binary file: %s", full)
                return []

            violations = self.check_source(source, language, rel)
        except UnsupportedLanguageError as e:
            logger.warning("Skipping %s: %s", rel, e)
            return []
        except OSError as e:
            logger.error("Cannot read %s: %s", full, e)
            return []
        except RecursionError:
            logger.error("Syntax tree of %s is too deep to convert", rel)
            return []

        self._cache[full] = (mtime, violations)
        return violations

    # ────────────────────────────────────────────────────────────────
    #  Workspace
    # ────────────────────────────────────────────────────────────────

    def discover_files(self) -> List[str]:
        """Find all files with a registered extension in the workspace."""
        skip = set(self.config.skip_dirs)
        files = []
        for root, dirs, filenames in os.walk(self.workspace_root):
            dirs[:] = [d for d in dirs if d not in skip]
            for fname in filenames:
                if language_for_path(fname, self.config.extensions) is not None:
                    rel = _norm_path(os.path.relpath(os.path.join(root, fname), self.workspace_root))
                    files.append(rel)
        return sorted(files)

    def check_workspace(self) -> ViolationReport:
        report = ViolationReport()
        if not self.config.enabled:
            logger.info("OneStatementPerLine disabled; nothing checked")
            return report

        files = self.discover_files()
        logger.info("Checking %d files under %s", len(files), self.workspace_root)
        for rel in files:
            report.extend(self.check_file(rel))
        logger.info("Found %d violations in %d files",
                    len(report.get_all_violations()), report.get_summary()["files_affected"])
        return report
