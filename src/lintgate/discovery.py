"""Package discovery.

Walks the workspace packages directory and records every sub-project whose
manifest declares a lint script. A directory holding a manifest is a leaf:
discovery never descends into it, nor into vendor/build directories.
"""

import json
from pathlib import Path
from typing import Dict, List, Optional, Set

from .cache import PackageCache
from .config import OrchestratorConfig
from .exceptions import ManifestError
from .logging_config import get_logger
from .models import Package

logger = get_logger(__name__)


def read_manifest(path: Path) -> Dict:
    """Parse a JSON manifest.

    Raises:
        ManifestError: If the file can't be read, isn't JSON, or isn't an object
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestError(path, str(e))
    except json.JSONDecodeError as e:
        raise ManifestError(path, f"invalid JSON: {e.msg} (line {e.lineno})")

    if not isinstance(data, dict):
        raise ManifestError(path, "manifest is not a JSON object")
    return data


def immediate_size(directory: Path) -> int:
    """Sum of sizes of the non-hidden regular files directly inside ``directory``."""
    size = 0
    try:
        entries = list(directory.iterdir())
    except OSError:
        return 0
    for entry in entries:
        if entry.name.startswith("."):
            continue
        try:
            if entry.is_file() and not entry.is_symlink():
                size += entry.stat().st_size
        except OSError:
            continue
    return size


class PackageScanner:
    """Filesystem walk producing Package records."""

    def __init__(self, root: Path, config: OrchestratorConfig):
        self.root = Path(root)
        self.config = config
        self._skip = set(config.skip_dirs)

    def scan_root(self) -> Path:
        candidate = self.root / self.config.packages_dir
        return candidate if candidate.is_dir() else self.root

    def scan(self) -> List[Package]:
        packages: List[Package] = []
        seen: Set[str] = set()
        self._scan_directory(self.scan_root(), packages, seen)
        logger.info(f"Discovered {len(packages)} lintable packages under {self.root}")
        return packages

    def _should_skip(self, directory: Path) -> bool:
        return directory.name in self._skip or directory.name.startswith(".")

    def _scan_directory(self, directory: Path, packages: List[Package], seen: Set[str]) -> None:
        try:
            entries = sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as e:
            logger.warning(f"Cannot read directory {directory}: {e}")
            return

        for entry in entries:
            if not entry.is_dir() or entry.is_symlink() or self._should_skip(entry):
                continue

            manifest_path = entry / self.config.manifest_name
            if not manifest_path.is_file():
                self._scan_directory(entry, packages, seen)
                continue

            try:
                package = self._load_package(entry, manifest_path)
            except ManifestError as e:
                logger.warning(f"Skipping {entry}: {e}")
                continue

            if package is None:
                continue
            if package.name in seen:
                logger.warning(f"Duplicate package name '{package.name}' at {entry}, skipping")
                continue
            seen.add(package.name)
            packages.append(package)

    def _load_package(self, directory: Path, manifest_path: Path) -> Optional[Package]:
        manifest = read_manifest(manifest_path)
        scripts = manifest.get("scripts") or {}
        if not isinstance(scripts, dict):
            raise ManifestError(manifest_path, "'scripts' is not an object")
        if not scripts.get(self.config.lint_script):
            return None

        try:
            last_modified = directory.stat().st_mtime
        except OSError as e:
            raise ManifestError(manifest_path, f"cannot stat package directory: {e}")

        return Package(
            name=str(manifest.get("name") or directory.name),
            path=str(directory),
            last_modified=last_modified,
            has_type_checking=(directory / self.config.typecheck_config).is_file(),
            has_tests=any(scripts.get(s) for s in self.config.test_scripts),
            is_private=bool(manifest.get("private", False)),
            size_bytes=immediate_size(directory),
        )


def discover_packages(
    root: Path,
    config: OrchestratorConfig,
    cache: Optional[PackageCache] = None,
) -> List[Package]:
    """Discover lintable packages, using the cache when it is fresh.

    Args:
        root: Workspace root
        config: Orchestrator configuration
        cache: Optional discovery cache; a fresh entry skips the walk entirely

    Returns:
        Packages in discovery order
    """
    root = Path(root)
    if cache is not None:
        cached = cache.load(root)
        if cached is not None:
            logger.info(f"Using cached discovery ({len(cached)} packages)")
            return cached

    packages = PackageScanner(root, config).scan()

    if cache is not None:
        cache.store(root, packages)

    return packages
