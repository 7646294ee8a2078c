"""ContextLog: bounded, ordered memory replayed to the resolver each turn."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Literal, get_args

from loguru import logger

EntryKind = Literal["user_input", "tool_call", "tool_response", "error"]
ENTRY_KINDS: frozenset[str] = frozenset(get_args(EntryKind))

DEFAULT_MAX_ENTRIES = 20
DEFAULT_RETAIN_ENTRIES = 15


@dataclass(frozen=True)
class ContextEntry:
    """One tagged record. ``payload`` is free text or a JSON string."""

    kind: EntryKind
    payload: str

    def __post_init__(self) -> None:
        if self.kind not in ENTRY_KINDS:
            raise ValueError(f"Unknown context entry kind: {self.kind!r}")

    def render(self) -> str:
        return f"<{self.kind}>\n{self.payload}\n</{self.kind}>"

    def to_dict(self) -> dict[str, str]:
        return {"kind": self.kind, "payload": self.payload}


class ContextLog:
    """
    Append-only log trimmed from the front.

    Once an append pushes the length past ``max_entries`` the oldest entries
    are dropped until exactly ``retain_entries`` remain.

    Parameters
    ----------
    max_entries : int
        Soft cap checked after every append.
    retain_entries : int
        Number of most recent entries kept when the cap is exceeded.
    """

    def __init__(
        self,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        retain_entries: int = DEFAULT_RETAIN_ENTRIES,
    ):
        if max_entries < 1 or retain_entries < 1:
            raise ValueError("max_entries and retain_entries must be positive")
        if retain_entries > max_entries:
            raise ValueError("retain_entries must not exceed max_entries")
        self.max_entries = max_entries
        self.retain_entries = retain_entries
        self._entries: list[ContextEntry] = []

    def append(self, kind: EntryKind, payload: str) -> ContextEntry:
        entry = ContextEntry(kind, payload)
        self._entries.append(entry)
        if len(self._entries) > self.max_entries:
            dropped = len(self._entries) - self.retain_entries
            self._entries = self._entries[-self.retain_entries:]
            logger.debug(f"Context trimmed: dropped {dropped} oldest entries")
        return entry

    def render(self) -> str:
        """Transcript for the resolver: one ``<kind>`` block per entry."""
        return "\n\n".join(entry.render() for entry in self._entries)

    @property
    def entries(self) -> tuple[ContextEntry, ...]:
        return tuple(self._entries)

    def kinds(self) -> list[str]:
        return [entry.kind for entry in self._entries]

    def to_list(self) -> list[dict[str, str]]:
        return [entry.to_dict() for entry in self._entries]

    def clear(self) -> None:
        self._entries = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ContextEntry]:
        return iter(list(self._entries))
