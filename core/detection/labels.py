"""
core/detection/labels.py — Class index → display label resolution.

Two label sources are supported:

    Indexed text (Teachable Machine export, custom models):
        one ``"<index> <name...>"`` per line; the leading token is dropped
        and the table index is the line position, not the embedded number.

    Class-map CSV (AudioSet / YAMNet):
        header row, then ``index,mid,display_name``; the last column is the
        English class name. Names pass through a closed English → Turkish
        vocabulary; unknown names get a readable fallback.

For the general-purpose model, the translated labels are filtered against
an instrument whitelist while the top-K list is built, so ambient sounds and
speech never occupy a result slot.

This module is pure — parsers take text, not paths.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable

# ---------------------------------------------------------------------------
# Closed vocabulary
# ---------------------------------------------------------------------------

TURKISH_LABELS: dict[str, str] = {
    "Guitar": "Gitar",
    "Acoustic guitar": "Akustik gitar",
    "Electric guitar": "Elektro gitar",
    "Bass guitar": "Bas gitar",
    "Piano": "Piyano",
    "Organ": "Org",
    "Synthesizer": "Synthesizer",
    "Saxophone": "Saksafon",
    "Trumpet": "Trompet",
    "Trombone": "Trombon",
    "French horn": "Korno",
    "Tuba": "Tuba",
    "Flute": "Flüt",
    "Recorder": "Blok flüt",
    "Clarinet": "Klarnet",
    "Harp": "Arp",
    "Violin, fiddle": "Keman",
    "Violin": "Keman",
    "Viola": "Viyola",
    "Cello": "Çello",
    "Double bass": "Kontrbas",
    "Drum kit": "Bateri",
    "Drum": "Davul",
    "Snare drum": "Trampet",
    "Bass drum": "Bas davul",
    "Cymbal": "Zil",
    "Hi-hat": "Hi-hat",
    "Tambourine": "Tef",
    "Maraca": "Marakas",
    "Harmonica": "Mızıka",
    "Accordion": "Akordeon",
    "Voice": "Vokal",
    "Female singing": "Kadın vokal",
    "Male singing": "Erkek vokal",
    "Choir": "Koro",
    "Choir, vocal ensemble": "Koro",
    "Singing": "Vokal",
    "Rapping": "Rap",
    "Beatboxing": "Beatbox",
}
"""AudioSet display name → Turkish label."""

# Vocal labels are translated but are not instruments.
INSTRUMENT_WHITELIST: frozenset[str] = frozenset(
    {
        "Gitar",
        "Akustik gitar",
        "Elektro gitar",
        "Bas gitar",
        "Piyano",
        "Org",
        "Synthesizer",
        "Saksafon",
        "Trompet",
        "Trombon",
        "Korno",
        "Tuba",
        "Flüt",
        "Blok flüt",
        "Klarnet",
        "Arp",
        "Keman",
        "Viyola",
        "Çello",
        "Kontrbas",
        "Bateri",
        "Davul",
        "Trampet",
        "Bas davul",
        "Zil",
        "Hi-hat",
        "Tef",
        "Marakas",
        "Mızıka",
        "Akordeon",
    }
)
"""Translated labels that count as instruments."""


def translate_label(name: str, table: dict[str, str] | None = None) -> str:
    """Translate an English class name through the closed vocabulary.

    Unknown names fall back to underscores → spaces with the first letter
    upper-cased (the rest is left as-is).

    Examples:
        >>> translate_label("Acoustic guitar")
        'Akustik gitar'
        >>> translate_label("xylophone_bar")
        'Xylophone bar'
    """
    key = name.strip()
    vocabulary = TURKISH_LABELS if table is None else table
    if key in vocabulary:
        return vocabulary[key]
    cleaned = key.replace("_", " ")
    if not cleaned:
        return key
    return cleaned[0].upper() + cleaned[1:]


# ---------------------------------------------------------------------------
# Label file parsers
# ---------------------------------------------------------------------------


def parse_indexed_label_line(line: str) -> str:
    """``"3 Electric Guitar Solo"`` → ``"Electric Guitar Solo"``.

    A line with a single token is returned stripped.
    """
    stripped = line.strip()
    parts = stripped.split(" ")
    if len(parts) >= 2:
        return " ".join(parts[1:])
    return stripped


def parse_indexed_labels(text: str) -> tuple[str, ...]:
    """Parse a Teachable-Machine style label file, skipping blank lines."""
    return tuple(parse_indexed_label_line(line) for line in text.splitlines() if line.strip())


def parse_class_map_csv(text: str, *, translate: bool = True) -> tuple[str, ...]:
    """Parse a header-skipped class-map CSV, keeping the last column.

    Args:
        text: CSV contents, e.g. ``yamnet_class_map.csv``.
        translate: Pass each name through ``translate_label()``.

    Returns:
        Labels in file order (row position = class index).
    """
    rows = csv.reader(io.StringIO(text))
    next(rows, None)  # header
    labels: list[str] = []
    for row in rows:
        if not row or not any(cell.strip() for cell in row):
            continue
        name = row[-1].strip()
        labels.append(translate_label(name) if translate else name)
    return tuple(labels)


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------


class LabelResolver:
    """Maps class indices to display labels, optionally whitelisted.

    The table may be shorter than the model's score vector; indices past
    its end resolve to None rather than raising.
    """

    def __init__(self, labels: Iterable[str], whitelist: frozenset[str] | None = None) -> None:
        self._labels: tuple[str, ...] = tuple(labels)
        self._whitelist = whitelist

    @property
    def labels(self) -> tuple[str, ...]:
        return self._labels

    def __len__(self) -> int:
        return len(self._labels)

    def resolve(self, index: int) -> str | None:
        """Label for ``index``, or None if out of range or not whitelisted."""
        if index < 0 or index >= len(self._labels):
            return None
        label = self._labels[index]
        if self._whitelist is not None and label not in self._whitelist:
            return None
        return label
