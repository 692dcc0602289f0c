"""In-memory, line-oriented snapshot of the file currently being fixed."""

from __future__ import annotations

import logging
import re
import stat
from pathlib import Path

logger = logging.getLogger(__name__)

UTF8_BOM = b"\xef\xbb\xbf"

_LINE_BREAK_RE = re.compile(r"(\r\n|\r|\n)")


def is_read_only(path: Path) -> bool:
    """True if the file's owner-write permission bit is cleared."""
    return not path.stat().st_mode & stat.S_IWUSR


class FileBuffer:
    """Lines of exactly one file, with enough detail to write it back unchanged.

    Each line keeps its own terminator, so files with mixed line endings,
    a UTF-8 byte order mark or no trailing newline round-trip byte-for-byte.
    Undecodable bytes are carried through with ``surrogateescape``.
    """

    def __init__(
        self,
        path: Path,
        lines: list[str],
        endings: list[str],
        bom: bool = False,
    ):
        if len(lines) != len(endings):
            raise ValueError("lines and endings must have the same length")
        self.path = path
        self.lines = lines
        self.endings = endings
        self.bom = bom
        self.dirty = False

    @classmethod
    def load(cls, path: Path) -> FileBuffer:
        """Read a file from disk."""
        data = path.read_bytes()
        bom = data.startswith(UTF8_BOM)
        if bom:
            data = data[len(UTF8_BOM):]
        text = data.decode("utf-8", errors="surrogateescape")

        parts = _LINE_BREAK_RE.split(text)
        lines = parts[0::2]
        endings = parts[1::2] + [""]
        if lines and lines[-1] == "" and len(lines) > 1:
            # Text ended with a line break; there is no final partial line.
            lines.pop()
            endings.pop()
        elif lines == [""]:
            lines, endings = [], []

        logger.debug("Loaded %s (%d lines)", path, len(lines))
        return cls(path, lines, endings, bom)

    def __len__(self) -> int:
        return len(self.lines)

    def get_line(self, index: int) -> str | None:
        """Return the line at index, or None if out of range."""
        if 0 <= index < len(self.lines):
            return self.lines[index]
        return None

    def set_line(self, index: int, text: str) -> None:
        if not 0 <= index < len(self.lines):
            raise IndexError(f"Line {index} is outside {self.path}")
        if self.lines[index] != text:
            self.lines[index] = text
            self.dirty = True

    def render(self) -> bytes:
        """Encode the buffer back to file bytes."""
        text = "".join(line + ending for line, ending in zip(self.lines, self.endings))
        data = text.encode("utf-8", errors="surrogateescape")
        return UTF8_BOM + data if self.bom else data

    def flush(self) -> None:
        """Write the buffer back to its file."""
        self.path.write_bytes(self.render())
        self.dirty = False
        logger.debug("Wrote %s", self.path)
