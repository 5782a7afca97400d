"""Install catalog items into the local config directory.

Presence of ``<kind dir>/<ident>.<ext>`` is the only signal that an item is
installed. Existing files are never overwritten or inspected, so re-running an
install is a no-op for everything already on disk.
"""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from forge_installer.catalog import CatalogItem, ItemKind
from forge_installer.errors import FetchError, InstallError
from forge_installer.fetch import Fetcher

logger = logging.getLogger(__name__)


class Outcome(str, Enum):
    INSTALLED = "installed"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class InstallResult:
    item: CatalogItem
    outcome: Outcome
    path: Path
    error: str = ""
    hint: str = ""


@dataclass(slots=True)
class InstallSummary:
    results: list[InstallResult] = field(default_factory=list)

    def _count(self, outcome: Outcome) -> int:
        return sum(1 for r in self.results if r.outcome is outcome)

    @property
    def installed(self) -> int:
        return self._count(Outcome.INSTALLED)

    @property
    def skipped(self) -> int:
        return self._count(Outcome.SKIPPED)

    @property
    def failed(self) -> int:
        return self._count(Outcome.FAILED)

    @property
    def ok(self) -> bool:
        return self.failed == 0

    def line(self) -> str:
        return f"{self.installed} installed, {self.skipped} skipped, {self.failed} failed"


def create_directories(base_dir: Path) -> None:
    for kind in ItemKind:
        (base_dir / kind.subdir).mkdir(parents=True, exist_ok=True)


def destination_for(base_dir: Path, item: CatalogItem) -> Path:
    return base_dir / item.kind.subdir / item.filename


def is_installed(base_dir: Path, item: CatalogItem) -> bool:
    return destination_for(base_dir, item).exists()


def write_atomic(path: Path, content: bytes) -> None:
    """Write via a sibling temp file and rename, so ``path`` is all-or-nothing.

    Raises InstallError if anything on disk fails; no temp file is left behind.
    """
    tmp_path: Path | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.tmp.", dir=str(path.parent))
        tmp_path = Path(tmp_name)
        with os.fdopen(fd, "wb") as f:
            # mkstemp creates 0600; installed files should be readable like curl's output.
            os.fchmod(f.fileno(), 0o644)
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except OSError as exc:
        raise InstallError(f"cannot write {path}: {exc}") from exc
    finally:
        if tmp_path is not None:
            tmp_path.unlink(missing_ok=True)


def install_item(item: CatalogItem, base_dir: Path, fetcher: Fetcher) -> InstallResult:
    dest = destination_for(base_dir, item)
    if dest.exists():
        logger.info("skipping %s: already present", item)
        return InstallResult(item=item, outcome=Outcome.SKIPPED, path=dest)

    try:
        content = fetcher.fetch(item)
        write_atomic(dest, content)
    except FetchError as exc:
        logger.warning("failed to fetch %s: %s", item, exc)
        return InstallResult(
            item=item, outcome=Outcome.FAILED, path=dest, error=str(exc), hint=exc.hint
        )
    except InstallError as exc:
        logger.warning("failed to write %s: %s", dest, exc)
        return InstallResult(
            item=item,
            outcome=Outcome.FAILED,
            path=dest,
            error=str(exc),
            hint=f"Check permissions on {dest.parent}.",
        )

    logger.info("installed %s (%d bytes)", dest, len(content))
    return InstallResult(item=item, outcome=Outcome.INSTALLED, path=dest)


def install_items(
    items: Iterable[CatalogItem],
    base_dir: Path,
    fetcher: Fetcher,
    *,
    on_result: Callable[[InstallResult], None] | None = None,
) -> InstallSummary:
    """Install items one at a time in order; a failure never stops the run."""
    summary = InstallSummary()
    for item in items:
        result = install_item(item, base_dir, fetcher)
        summary.results.append(result)
        if on_result is not None:
            on_result(result)
    logger.info("install finished: %s", summary.line())
    return summary
