"""Tests for install_item / install_items semantics."""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest

from forge_installer.catalog import STARTER, CatalogItem, ItemKind, get_bundle
from forge_installer.errors import InstallError
from forge_installer.fetch import Fetcher
from forge_installer.installer import (
    InstallResult,
    Outcome,
    create_directories,
    destination_for,
    install_item,
    install_items,
    is_installed,
    write_atomic,
)


class _Catalog:
    """MockTransport handler serving a dict of relative path -> body."""

    def __init__(self, files: dict[str, bytes] | None = None, *, default: bytes | None = None):
        self.files = files or {}
        self.default = default
        self.requests: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        rel = request.url.path.removeprefix("/main/")
        self.requests.append(rel)
        if rel in self.files:
            return httpx.Response(200, content=self.files[rel])
        if self.default is not None:
            return httpx.Response(200, content=self.default)
        return httpx.Response(404)


@pytest.fixture
def catalog() -> _Catalog:
    return _Catalog(default=b"# content\n")


@pytest.fixture
def fetcher(catalog: _Catalog):
    with Fetcher("https://forge.test/main", transport=httpx.MockTransport(catalog)) as f:
        yield f


def _listing(root: Path) -> list[str]:
    return sorted(str(p.relative_to(root)) for p in root.rglob("*") if p.is_file())


def test_create_directories(claude_dir: Path) -> None:
    create_directories(claude_dir)
    assert (claude_dir / "agents").is_dir()
    assert (claude_dir / "commands").is_dir()
    assert (claude_dir / "templates" / "themes").is_dir()


def test_destination_for(claude_dir: Path) -> None:
    item = CatalogItem(ItemKind.THEME, "minimal-light")
    assert destination_for(claude_dir, item) == claude_dir / "templates/themes/minimal-light.css"


def test_install_creates_file(claude_dir: Path, fetcher: Fetcher) -> None:
    item = CatalogItem(ItemKind.AGENT, "debugger")
    result = install_item(item, claude_dir, fetcher)
    assert result.outcome is Outcome.INSTALLED
    assert result.path.read_bytes() == b"# content\n"
    assert is_installed(claude_dir, item)


def test_existing_file_is_skipped_and_untouched(
    claude_dir: Path, fetcher: Fetcher, catalog: _Catalog
) -> None:
    item = CatalogItem(ItemKind.COMMAND, "verify")
    dest = destination_for(claude_dir, item)
    dest.parent.mkdir(parents=True)
    dest.write_text("local edits")

    result = install_item(item, claude_dir, fetcher)

    assert result.outcome is Outcome.SKIPPED
    assert dest.read_text() == "local edits"
    assert catalog.requests == []


def test_failed_fetch_leaves_nothing_behind(claude_dir: Path) -> None:
    create_directories(claude_dir)
    item = CatalogItem(ItemKind.AGENT, "missing")
    with Fetcher("https://forge.test/main", transport=httpx.MockTransport(_Catalog())) as f:
        result = install_item(item, claude_dir, f)
    assert result.outcome is Outcome.FAILED
    assert "404" in result.error
    assert result.hint
    assert _listing(claude_dir) == []


def test_failed_fetch_is_retried_on_next_run(claude_dir: Path) -> None:
    item = CatalogItem(ItemKind.AGENT, "flaky")
    with Fetcher("https://forge.test/main", transport=httpx.MockTransport(_Catalog())) as f:
        assert install_item(item, claude_dir, f).outcome is Outcome.FAILED
    with Fetcher(
        "https://forge.test/main", transport=httpx.MockTransport(_Catalog(default=b"ok"))
    ) as f:
        assert install_item(item, claude_dir, f).outcome is Outcome.INSTALLED


def test_write_error_is_reported_as_failure(claude_dir: Path, fetcher: Fetcher) -> None:
    item = CatalogItem(ItemKind.AGENT, "debugger")
    # A regular file where the agents directory should be makes the write fail.
    claude_dir.mkdir(parents=True)
    (claude_dir / "agents").write_text("not a directory")
    result = install_item(item, claude_dir, fetcher)
    assert result.outcome is Outcome.FAILED
    assert "permissions" in result.hint
    assert "cannot write" in result.error


def test_write_atomic_replaces_and_cleans_up(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "file.md"
    write_atomic(target, b"one")
    assert target.read_bytes() == b"one"
    assert _listing(tmp_path) == ["nested/file.md"]


def test_starter_bundle_on_empty_dir(claude_dir: Path, fetcher: Fetcher) -> None:
    create_directories(claude_dir)
    summary = install_items(STARTER.items(), claude_dir, fetcher)
    assert (summary.installed, summary.skipped, summary.failed) == (4, 0, 0)
    assert summary.ok is True
    assert summary.line().startswith("4 installed, 0 skipped")
    assert _listing(claude_dir) == [
        "agents/code-reviewer.md",
        "agents/debugger.md",
        "agents/typescript-pro.md",
        "commands/verify.md",
    ]


def test_second_run_is_idempotent(claude_dir: Path, fetcher: Fetcher, catalog: _Catalog) -> None:
    items = get_bundle("forge").items()
    first = install_items(items, claude_dir, fetcher)
    assert first.installed == len(items)
    fetched = len(catalog.requests)

    second = install_items(items, claude_dir, fetcher)
    assert second.installed == 0
    assert second.skipped == len(items)
    assert len(catalog.requests) == fetched


def test_failures_do_not_abort_and_order_is_kept(claude_dir: Path) -> None:
    catalog = _Catalog({"agents/debugger.md": b"a", "commands/verify.md": b"c"})
    seen: list[InstallResult] = []
    with Fetcher("https://forge.test/main", transport=httpx.MockTransport(catalog)) as f:
        summary = install_items(STARTER.items(), claude_dir, f, on_result=seen.append)

    assert catalog.requests == [
        "agents/code-reviewer.md",
        "agents/debugger.md",
        "agents/typescript-pro.md",
        "commands/verify.md",
    ]
    assert [r.outcome for r in seen] == [
        Outcome.FAILED,
        Outcome.INSTALLED,
        Outcome.FAILED,
        Outcome.INSTALLED,
    ]
    assert summary.results == seen
    assert summary.line() == "2 installed, 0 skipped, 2 failed"
    assert summary.ok is False


def _refuse_replace(src, dst) -> None:
    raise OSError("rename refused")


def test_write_atomic_cleans_temp_file_when_rename_fails(tmp_path: Path, monkeypatch) -> None:
    target = tmp_path / "agents" / "debugger.md"
    monkeypatch.setattr("forge_installer.installer.os.replace", _refuse_replace)
    with pytest.raises(InstallError, match="rename refused"):
        write_atomic(target, b"content")
    assert list((tmp_path / "agents").iterdir()) == []


def test_rename_failure_is_a_failed_result_with_empty_kind_dir(
    claude_dir: Path, fetcher: Fetcher, monkeypatch
) -> None:
    create_directories(claude_dir)
    monkeypatch.setattr("forge_installer.installer.os.replace", _refuse_replace)
    result = install_item(CatalogItem(ItemKind.AGENT, "debugger"), claude_dir, fetcher)
    assert result.outcome is Outcome.FAILED
    assert "rename refused" in result.error
    assert list((claude_dir / "agents").iterdir()) == []


def test_write_atomic_makes_file_world_readable(tmp_path: Path) -> None:
    target = tmp_path / "file.md"
    write_atomic(target, b"x")
    assert target.stat().st_mode & 0o777 == 0o644
