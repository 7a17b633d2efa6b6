"""Raw JSON and properties file access, with no knowledge of schemas."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Union

from dmconfig.models.errors import ConfigIOError, ConfigParseError, NotFoundError

PathLike = Union[str, Path]

_KEY_SEPARATORS = "=: \t\f"
_UNESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_ESCAPES = {"\t": "\\t", "\n": "\\n", "\r": "\\r", "\f": "\\f"}


class FileStore:
    """Reads and writes JSON documents and key=value property sets."""

    def __init__(self):
        """Initialize file store."""
        self.logger = logging.getLogger("dmconfig.file_store")

    def read_json(self, path: PathLike) -> Any:
        """Read a JSON document.

        Args:
            path: File to read

        Returns:
            Decoded document, dict key order as in the file

        Raises:
            NotFoundError: If the file does not exist
            ConfigParseError: If the content is not valid JSON
            ConfigIOError: If the file cannot be read
        """
        path = Path(path)
        if not path.exists():
            raise NotFoundError(f"File not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigParseError(f"Invalid JSON in {path}: {e}") from e
        except OSError as e:
            raise ConfigIOError(f"Failed to read {path}: {e}", path=str(path)) from e

    def write_json(self, path: PathLike, document: Any) -> None:
        """Write a document as pretty-printed JSON, keeping its key order.

        Raises:
            NotFoundError: If the parent directory does not exist
            ConfigIOError: If the write fails
        """
        path = Path(path)
        self._require_parent(path)

        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2, ensure_ascii=False)
                f.write("\n")
        except OSError as e:
            raise ConfigIOError(f"Failed to write {path}: {e}", path=str(path)) from e

        self.logger.debug(f"Wrote JSON document to {path}")

    def read_properties(self, path: PathLike) -> dict[str, str]:
        """Read a key=value properties file.

        Raises:
            NotFoundError: If the file does not exist
            ConfigIOError: If the file cannot be read
        """
        path = Path(path)
        if not path.exists():
            raise NotFoundError(f"File not found: {path}")

        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigIOError(f"Failed to read {path}: {e}", path=str(path)) from e

        return parse_properties(content)

    def write_properties(self, path: PathLike, properties: dict[str, str]) -> None:
        """Replace the properties file with exactly the given keys.

        Callers merge with the existing set first if other keys must survive.

        Raises:
            NotFoundError: If the parent directory does not exist
            ConfigIOError: If the write fails
        """
        path = Path(path)
        self._require_parent(path)

        try:
            path.write_text(format_properties(properties), encoding="utf-8")
        except OSError as e:
            raise ConfigIOError(f"Failed to write {path}: {e}", path=str(path)) from e

        self.logger.debug(f"Wrote {len(properties)} properties to {path}")

    @staticmethod
    def _require_parent(path: Path) -> None:
        if not path.parent.is_dir():
            raise NotFoundError(f"Parent directory does not exist: {path.parent.resolve()}")


def parse_properties(content: str) -> dict[str, str]:
    """Parse properties text into an ordered dict.

    Comment lines start with # or !. A line ending in an odd number of
    backslashes continues on the next line. The key ends at the first
    unescaped '=', ':' or whitespace. \\uXXXX escapes are decoded.

    Raises:
        ConfigParseError: On a malformed \\uXXXX escape
    """
    properties: dict[str, str] = {}
    for line in _logical_lines(content):
        key_end = len(line)
        i = 0
        while i < len(line):
            if line[i] == "\\":
                i += 2
                continue
            if line[i] in _KEY_SEPARATORS:
                key_end = i
                break
            i += 1

        rest = line[key_end:].lstrip(" \t\f")
        if rest[:1] in ("=", ":"):
            rest = rest[1:].lstrip(" \t\f")

        properties[_unescape(line[:key_end])] = _unescape(rest)
    return properties


def format_properties(properties: dict[str, str]) -> str:
    """Render properties as a timestamp header and one key=value per line.

    Non-ASCII characters are written as \\uXXXX so JVM readers decode them.
    """
    lines = [f"#{datetime.now().strftime('%a %b %d %H:%M:%S %Y')}"]
    for key, value in properties.items():
        lines.append(f"{_escape(str(key), is_key=True)}={_escape(str(value))}")
    return "\n".join(lines) + "\n"


def _logical_lines(content: str):
    pending = None
    for raw_line in content.splitlines():
        line = raw_line.lstrip(" \t\f")
        if pending is None:
            if not line or line[0] in "#!":
                continue
        else:
            line = pending + line
            pending = None

        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2 == 1:
            pending = line[:-1]
            continue
        yield line

    if pending is not None:
        yield pending


def _unescape(text: str) -> str:
    if "\\" not in text:
        return text
    out = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "\\" and i + 1 < len(text):
            nxt = text[i + 1]
            if nxt == "u":
                digits = text[i + 2:i + 6]
                try:
                    if len(digits) != 4:
                        raise ValueError(digits)
                    out.append(chr(int(digits, 16)))
                except ValueError as e:
                    raise ConfigParseError(f"Malformed \\uXXXX escape: \\u{digits}") from e
                i += 6
                continue
            out.append(_UNESCAPES.get(nxt, nxt))
            i += 2
            continue
        out.append(ch)
        i += 1
    decoded = "".join(out)
    # Rejoin surrogate pairs written for characters outside the BMP
    try:
        return decoded.encode("utf-16", "surrogatepass").decode("utf-16")
    except UnicodeDecodeError:
        return decoded


def _escape(text: str, is_key: bool = False) -> str:
    out = []
    for index, ch in enumerate(text):
        if ch == "\\":
            out.append("\\\\")
        elif ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif ch == " " and (is_key or index == 0):
            out.append("\\ ")
        elif is_key and ch in "=:#!":
            out.append("\\" + ch)
        elif ord(ch) < 0x20 or ord(ch) > 0x7E:
            for unit in _utf16_units(ch):
                out.append(f"\\u{unit:04X}")
        else:
            out.append(ch)
    return "".join(out)


def _utf16_units(ch: str) -> list[int]:
    encoded = ch.encode("utf-16-be", "surrogatepass")
    return [int.from_bytes(encoded[i:i + 2], "big") for i in range(0, len(encoded), 2)]
