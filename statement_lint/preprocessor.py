import os
import io
import re
import hashlib
import logging
from typing import Dict, List, Optional, Set, Tuple
from pcpp import Preprocessor, OutputDirective, Action

logger = logging.getLogger(__name__)

_LINE_DIRECTIVE_RE = re.compile(r'^#line\s+(\d+)\s+"([^"]+)"')


class _QuietPreprocessor(Preprocessor):
    """A pcpp Preprocessor that silences 'Include file not found' stderr noise.

    Missing includes are passed through untouched and pcpp errors go to
    Python's ``logging`` at DEBUG level, so preprocessing can continue on
    partial workspaces.
    """

    def on_include_not_found(self, is_malformed, is_system_include, curdir, includepath):
        logger.debug("pcpp: include not found: %s (system=%s)", includepath, is_system_include)
        raise OutputDirective(Action.IgnoreAndPassThrough)

    def on_error(self, file, line, msg):
        logger.debug("pcpp: %s:%s: %s", file, line, msg)


class PreprocessorEngine:
    """
    Finds the lines of a C file that survive conditional compilation.

    tree-sitter parses ``#if 0`` bodies and inactive ``#ifdef`` branches
    like any other code, so statements in them would be reported.  Running
    pcpp and following the ``#line`` directives it emits tells which
    original lines still produce output.
    """

    def __init__(self, workspace_root: str):
        self.workspace_root = workspace_root
        # Cache: (file_path, content digest) -> active original lines
        self._cache: Dict[Tuple[str, str], Set[int]] = {}
        self.defines: Dict[str, str] = {}

    def add_define(self, name: str, value: str = "1"):
        """Add a global macro definition (e.g. -DDEBUG=1)."""
        self.defines[name] = value
        self._cache.clear()

    def active_lines(self, source_text: str, file_path: str,
                     include_dirs: Optional[List[str]] = None) -> Optional[Set[int]]:
        """
        Return the 1-indexed lines of *file_path* that produce non-blank
        preprocessed output, or None if preprocessing failed (callers should
        then keep every line).
        """
        digest = hashlib.sha1(source_text.encode("utf-8", errors="replace")).hexdigest()
        key = (_norm_path(file_path), digest)
        if key in self._cache:
            return self._cache[key]

        pp = _QuietPreprocessor()
        for d in include_dirs or []:
            pp.add_path(os.path.join(self.workspace_root, d))
        for k, v in self.defines.items():
            pp.define(f"{k} {v}")

        output_buffer = io.StringIO()
        try:
            pp.parse(source_text, source=file_path)
            pp.write(output_buffer)
        except Exception as e:
            logger.error("Preprocessing failed for %s: %s", file_path, e)
            return None

        lines = _map_active_lines(output_buffer.getvalue(), file_path)
        self._cache[key] = lines
        logger.info("Preprocessed %s: %d active lines", file_path, len(lines))
        return lines


def _map_active_lines(expanded_text: str, file_path: str) -> Set[int]:
    """Original line numbers of *file_path* that carry expanded content."""
    target = _norm_path(file_path)
    active: Set[int] = set()
    current_line = 1
    current_file = file_path

    for line in expanded_text.splitlines():
        m = _LINE_DIRECTIVE_RE.match(line)
        if m:
            # '#line N "file"': the next line is line N of that file
            current_line = int(m.group(1))
            current_file = m.group(2)
            continue
        if line.strip() and _norm_path(current_file).endswith(target):
            active.add(current_line)
        current_line += 1
    return active


def _norm_path(p: str) -> str:
    """Normalize for comparison."""
    if not p: return ""
    return p.replace("\\", "/").strip("/")
