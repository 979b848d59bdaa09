"""Textual security anti-pattern scan over workspace sources."""

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Pattern, Sequence, Tuple

from ..logging_config import get_logger

logger = get_logger(__name__)

SECURITY_PATTERNS: Tuple[Tuple[Pattern[str], str], ...] = (
    (re.compile(r"eval\s*\("), "eval() usage detected"),
    (re.compile(r"innerHTML\s*="), "Direct innerHTML assignment detected"),
    (re.compile(r"document\.write"), "document.write usage detected"),
    (re.compile(r"password.*=.*['\"]\w+['\"]"), "Hardcoded password detected"),
    (re.compile(r"api[_-]?key.*=.*['\"]\w+['\"]"), "Hardcoded API key detected"),
)

COMMENT_DEBT_PATTERN = re.compile(r"TODO|FIXME|XXX|HACK", re.IGNORECASE)


@dataclass(frozen=True)
class SecurityFinding:
    file: str
    message: str


def iter_source_files(
    directory: Path,
    extensions: Sequence[str],
    skip_dirs: Sequence[str],
    limit: Optional[int] = None,
) -> Iterator[Path]:
    """Yield source files under ``directory`` in a stable order."""
    suffixes = tuple(extensions)
    skip = set(skip_dirs)
    count = 0
    for dirpath, dirnames, filenames in os.walk(directory):
        dirnames[:] = sorted(d for d in dirnames if d not in skip and not d.startswith("."))
        for filename in sorted(filenames):
            if not filename.endswith(suffixes):
                continue
            yield Path(dirpath) / filename
            count += 1
            if limit is not None and count >= limit:
                return


def scan_file(path: Path, root: Path) -> List[SecurityFinding]:
    try:
        content = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.debug(f"Skipping unreadable file {path}: {e}")
        return []

    rel = os.path.relpath(path, root)
    return [
        SecurityFinding(file=rel, message=message)
        for pattern, message in SECURITY_PATTERNS
        if pattern.search(content)
    ]


def scan_security(files: Sequence[Path], root: Path) -> List[SecurityFinding]:
    """One finding per (file, matching pattern); each is logged."""
    findings: List[SecurityFinding] = []
    for path in files:
        for finding in scan_file(path, root):
            logger.warning(f"{finding.file}: {finding.message}")
            findings.append(finding)
    return findings


def count_comment_debt(files: Sequence[Path]) -> int:
    """Number of lines carrying a deferred-work marker."""
    total = 0
    for path in files:
        try:
            with open(path, encoding="utf-8", errors="replace") as f:
                total += sum(1 for line in f if COMMENT_DEBT_PATTERN.search(line))
        except OSError as e:
            logger.debug(f"Skipping unreadable file {path}: {e}")
    return total
