"""Static catalog: item kinds, preset bundles, and the install menu."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from forge_installer.errors import CatalogError


class ItemKind(str, Enum):
    AGENT = "agent"
    COMMAND = "command"
    THEME = "theme"

    @property
    def subdir(self) -> str:
        return _SUBDIRS[self]

    @property
    def suffix(self) -> str:
        return ".css" if self is ItemKind.THEME else ".md"


_SUBDIRS: dict[ItemKind, str] = {
    ItemKind.AGENT: "agents",
    ItemKind.COMMAND: "commands",
    ItemKind.THEME: "templates/themes",
}


@dataclass(frozen=True, slots=True)
class CatalogItem:
    kind: ItemKind
    ident: str

    @property
    def filename(self) -> str:
        return f"{self.ident}{self.kind.suffix}"

    @property
    def relative_path(self) -> str:
        """Path relative to both the config dir and the remote base URL."""
        return f"{self.kind.subdir}/{self.filename}"

    def __str__(self) -> str:
        return self.relative_path


@dataclass(frozen=True, slots=True)
class Bundle:
    key: str
    title: str
    description: str
    agents: tuple[str, ...] = ()
    commands: tuple[str, ...] = ()
    themes: tuple[str, ...] = ()

    def items(self) -> list[CatalogItem]:
        """Expand to an ordered item list: agents, then commands, then themes."""
        return [
            *(CatalogItem(ItemKind.AGENT, ident) for ident in self.agents),
            *(CatalogItem(ItemKind.COMMAND, ident) for ident in self.commands),
            *(CatalogItem(ItemKind.THEME, ident) for ident in self.themes),
        ]

    @property
    def size(self) -> int:
        return len(self.agents) + len(self.commands) + len(self.themes)


THEMES: tuple[str, ...] = ("minimal-light", "dark-techy", "vibrant-purple")

# Agents FORGE hands work off to when they are already installed.
COMPANIONS: dict[str, str] = {
    "ralph": "Ralph - FORGE will create @fix_plan.md for autonomous dev",
    "maniac": "MANIAC - FORGE will create USER-STORIES.md for testing",
    "sentinel": "Sentinel - FORGE will set up .sentinel/ directory",
}


def _dedupe(values: list[str]) -> tuple[str, ...]:
    seen: set[str] = set()
    ordered: list[str] = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        ordered.append(value)
    return tuple(ordered)


STARTER = Bundle(
    key="starter",
    title="Starter",
    description="Everyday review, debugging and TypeScript helpers",
    agents=("code-reviewer", "debugger", "typescript-pro"),
    commands=("verify",),
)
FORGE = Bundle(
    key="forge",
    title="FORGE",
    description="Product companion: idea to scaffolded project, plus theme presets",
    agents=("forge",),
    commands=("forge",),
    themes=THEMES,
)
QUALITY = Bundle(
    key="quality",
    title="Quality",
    description="Deep and continuous testing (MANIAC, Sentinel)",
    agents=("maniac", "sentinel", "test-engineer"),
    commands=("maniac", "sentinel"),
)
AUTONOMOUS = Bundle(
    key="autonomous",
    title="Autonomous",
    description="Autonomous development and agile workflows (Ralph, BMAD)",
    agents=("ralph", "bmad"),
    commands=("ralph", "bmad"),
)
COMPLETE = Bundle(
    key="complete",
    title="Complete",
    description="Everything above",
    agents=_dedupe([a for b in (STARTER, FORGE, QUALITY, AUTONOMOUS) for a in b.agents]),
    commands=_dedupe([c for b in (STARTER, FORGE, QUALITY, AUTONOMOUS) for c in b.commands]),
    themes=THEMES,
)

PRESETS: tuple[Bundle, ...] = (STARTER, FORGE, QUALITY, AUTONOMOUS, COMPLETE)

CUSTOM_CHOICE = len(PRESETS) + 1
SKIP_CHOICE = len(PRESETS) + 2


def get_bundle(key: str | int) -> Bundle:
    """Look up a preset by key ("starter") or menu number (1-5)."""
    text = str(key).strip().lower()
    if text.isdigit():
        index = int(text)
        if 1 <= index <= len(PRESETS):
            return PRESETS[index - 1]
        raise CatalogError(f"no preset bundle numbered {index}")
    for bundle in PRESETS:
        if bundle.key == text:
            return bundle
    known = ", ".join(b.key for b in PRESETS)
    raise CatalogError(f"unknown bundle {key!r} (known: {known})")


_FORBIDDEN_CHARS = ("/", "\\", "#", "?")


def parse_identifiers(text: str) -> list[str]:
    """Split whitespace-separated identifiers, keeping order and dropping repeats.

    Identifiers are not checked against the remote catalog; a typo simply
    fails to download later.
    """
    idents: list[str] = []
    for token in text.split():
        if token.endswith(".md"):
            token = token[: -len(".md")]
        if not token or token in {".", ".."} or any(c in token for c in _FORBIDDEN_CHARS):
            raise CatalogError(f"invalid identifier: {token!r}")
        idents.append(token)
    return list(_dedupe(idents))


def custom_bundle(agents_text: str = "", commands_text: str = "") -> Bundle:
    return Bundle(
        key="custom",
        title="Custom",
        description="Hand-picked agents and commands",
        agents=tuple(parse_identifiers(agents_text)),
        commands=tuple(parse_identifiers(commands_text)),
    )
