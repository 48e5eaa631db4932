"""
Context Provider

Retrieves source lines around a reported violation so tool output can
show the offending code.

Guards:
  • Skips binary files (null-byte check)
  • Caps reads at MAX_LINES to prevent memory issues
  • Handles encoding errors gracefully
"""

import os
import logging
from typing import List, Optional

logger = logging.getLogger(__name__)

MAX_LINES = 100_000  # safety cap for very large files


class ContextProvider:
    def __init__(self, workspace_root: str):
        self.workspace_root = workspace_root

    def _resolve(self, file_path: str) -> str:
        # Normalise separators so 'src/Main.java' works on Windows too
        native = file_path.replace("/", os.sep).replace("\\", os.sep)
        if os.path.isabs(native):
            return native
        return os.path.join(self.workspace_root, native)

    @staticmethod
    def _read_lines(full_path: str) -> Optional[List[str]]:
        """Read file lines with binary-file guard and size cap."""
        if not os.path.isfile(full_path):
            return None
        try:
            with open(full_path, "rb") as fb:
                head = fb.read(8192)
                if b"\x00" in head:
                    logger.warning("Skipping binary file: %s", full_path)
                    return None
            with open(full_path, "r", encoding="utf-8", errors="replace") as f:
                lines = []
                for i, line in enumerate(f):
                    if i >= MAX_LINES:
                        logger.warning(
                            "File %s exceeds %d lines — truncated", full_path, MAX_LINES
                        )
                        break
                    lines.append(line)
                return lines
        except OSError as e:
            logger.error("Error reading %s: %s", full_path, e)
            return None

    def get_code_context(
        self, file_path: str, line_number: int, context_lines: int = 3
    ) -> str:
        """Numbered lines around *line_number*, the line itself marked with '>'."""
        lines = self._read_lines(self._resolve(file_path))
        if lines is None:
            return f"Error: Cannot read {file_path}"

        start = max(1, line_number - context_lines)
        end = min(len(lines), line_number + context_lines)
        out = []
        for n in range(start, end + 1):
            marker = ">" if n == line_number else " "
            text = lines[n - 1].rstrip("\r\n")
            out.append(f"{marker}{n:>4} | {text}")
        return "\n".join(out)

    def get_line(self, file_path: str, line_number: int) -> str:
        """Return a single line from a file (1-indexed)."""
        lines = self._read_lines(self._resolve(file_path))
        if lines is None:
            return ""
        if 1 <= line_number <= len(lines):
            return lines[line_number - 1]
        return ""

    def format_excerpt(self, file_path: str, line_number: int, column: int = 0) -> str:
        """The offending line, with a caret under *column* when known."""
        text = self.get_line(file_path, line_number).rstrip("\r\n")
        if not text:
            return ""
        excerpt = f"{line_number:>5} | {text}"
        if column > 0:
            excerpt += "\n      | " + " " * (column - 1) + "^"
        return excerpt
