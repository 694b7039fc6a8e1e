"""
Hardcoded secret detection in source text.

A keyword search over source files, in the spirit of `grep -r -i`: any line
mentioning password, secret, key, token or api_key is a candidate, unless
its record (path plus line) mentions a placeholder marker such as "example"
or "template". Matches point a reviewer at lines to read.

CWE References:
- CWE-798: Use of Hard-coded Credentials
- CWE-259: Use of Hard-coded Password
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path

from stackaudit.logging_config import get_logger

logger = get_logger("secrets")


@dataclass(frozen=True)
class SecretMatch:
    """A source line that looks like it holds a credential."""

    path: str  # Relative to the scanned root, POSIX separators
    line_number: int
    line: str

    @property
    def record(self) -> str:
        """grep-style 'path:line' record the placeholder markers are tested on."""
        return f"{self.path}:{self.line}"

    def to_string(self) -> str:
        return f"{self.path}:{self.line_number}: {self.line.strip()}"


class SecretScanner:
    """
    Keyword scanner for source trees.

    Example:
        scanner = SecretScanner(["password", "token"], exclusions=["example"])
        for match in scanner.scan(Path("backend"), excluded_dirs=["venv"]):
            print(match.to_string())
    """

    def __init__(
        self,
        keywords: Sequence[str],
        exclusions: Sequence[str] = (),
        extensions: Sequence[str] = (".py",),
        excluded_suffixes: Sequence[str] = (".json", ".log"),
    ) -> None:
        if not keywords:
            raise ValueError("At least one keyword is required")
        self._pattern = re.compile(
            "(" + "|".join(re.escape(kw) for kw in keywords) + ")",
            re.IGNORECASE,
        )
        self.exclusions = tuple(exclusions)
        self.extensions = tuple(ext.lower() for ext in extensions)
        self.excluded_suffixes = tuple(s.lower() for s in excluded_suffixes)

    def is_candidate(self, line: str) -> bool:
        """True if the line mentions any keyword (case-insensitive)."""
        return self._pattern.search(line) is not None

    def is_placeholder(self, record: str) -> bool:
        """True if the record contains a placeholder marker (case-sensitive)."""
        return any(marker in record for marker in self.exclusions)

    def matches_line(self, line: str, path: str = "") -> bool:
        """
        Decide whether one source line is reported.

        Args:
            line: Source line
            path: Relative path of the file the line came from
        """
        if not self.is_candidate(line):
            return False
        record = f"{path}:{line}" if path else line
        return not self.is_placeholder(record)

    def wants_file(self, path: Path) -> bool:
        name = path.name.lower()
        if name.endswith(self.excluded_suffixes):
            return False
        if self.extensions and not name.endswith(self.extensions):
            return False
        return True

    def iter_files(self, root: Path, excluded_dirs: Sequence[str] = ()) -> Iterator[Path]:
        """Walk root in sorted order, pruning excluded directory names at any depth."""
        skip = set(excluded_dirs)
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(d for d in dirnames if d not in skip)
            for filename in sorted(filenames):
                path = Path(dirpath) / filename
                if self.wants_file(path):
                    yield path

    def scan_file(self, path: Path, root: Path) -> list[SecretMatch]:
        relative = path.relative_to(root).as_posix()
        try:
            content = path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.debug(f"Skipping unreadable file {relative}: {e}")
            return []

        matches = []
        for number, line in enumerate(content.splitlines(), 1):
            if self.matches_line(line, relative):
                matches.append(SecretMatch(relative, number, line))
        return matches

    def scan(self, root: Path, excluded_dirs: Sequence[str] = ()) -> list[SecretMatch]:
        """
        Scan every wanted file under root.

        Args:
            root: Directory to scan
            excluded_dirs: Directory names never descended into

        Returns:
            Matches in path, then line order
        """
        matches: list[SecretMatch] = []
        for path in self.iter_files(root, excluded_dirs):
            matches.extend(self.scan_file(path, root))
        logger.debug(f"Secret scan of {root.name}: {len(matches)} match(es)")
        return matches
