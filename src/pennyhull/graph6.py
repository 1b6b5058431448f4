"""Loading penny graphs from graph6 codes.

graph6 packs the upper triangle of the adjacency matrix into printable
characters (six bits each, offset by 63).  Only the two size encodings
used by small contact graphs are supported: one byte for ``n <= 62`` and
the ``~`` marker followed by three bytes for ``n < 2**18``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

_HEADER = ">>graph6<<"
_OFFSET = 63
_LONG_MARKER = 126 - _OFFSET

DEFAULT_CONTACT_NUMBERS = (3, 4, 5, 6, 7, 8, 9, 10)


@dataclass(frozen=True)
class PennyGraph:
    nodes: tuple[int, ...]
    edges: tuple[tuple[int, int], ...]

    @property
    def order(self) -> int:
        return len(self.nodes)

    def degree(self, node: int) -> int:
        return sum(1 for a, b in self.edges if node in (a, b))


def parse_graph6(code: str) -> PennyGraph:
    """Decode a single graph6 string into nodes ``0..n-1`` and edges ``(i, j)``, ``i < j``."""
    code = code.strip()
    if code.startswith(_HEADER):
        code = code[len(_HEADER):]
    if not code:
        raise ValueError("Empty graph6 code")

    values = []
    for ch in code:
        value = ord(ch) - _OFFSET
        if not 0 <= value <= 63:
            raise ValueError(f"Invalid graph6 character {ch!r} in {code!r}")
        values.append(value)

    if values[0] <= 62:
        n = values[0]
        index = 1
    elif values[0] == _LONG_MARKER and len(values) >= 4:
        n = (values[1] << 12) | (values[2] << 6) | values[3]
        index = 4
    else:
        raise ValueError(f"Unsupported graph6 size header in {code!r}")

    bits: List[int] = []
    for value in values[index:]:
        for shift in range(5, -1, -1):
            bits.append((value >> shift) & 1)

    needed = n * (n - 1) // 2
    if len(bits) < needed:
        raise ValueError(f"graph6 code {code!r} too short for {n} nodes")

    edges: List[Tuple[int, int]] = []
    pos = 0
    for j in range(1, n):
        for i in range(j):
            if bits[pos]:
                edges.append((i, j))
            pos += 1

    return PennyGraph(nodes=tuple(range(n)), edges=tuple(edges))


def parse_graph6_codes(codes: Iterable[str]) -> List[PennyGraph]:
    return [parse_graph6(code) for code in codes if code.strip()]


def load_graph6_file(path: PathLike) -> List[PennyGraph]:
    """Load all whitespace-separated graph6 codes from *path*."""
    text = Path(path).read_text(encoding="utf-8")
    return parse_graph6_codes(text.split())


def load_graph_sets(
    directory: PathLike,
    contact_numbers: Sequence[int] = DEFAULT_CONTACT_NUMBERS,
) -> List[Tuple[str, List[PennyGraph]]]:
    """Load ``graphs{n}.txt`` for each *n* plus ``graphs8_extra.txt`` if present.

    Missing files are skipped with a warning.
    """
    directory = Path(directory)
    sets: List[Tuple[str, List[PennyGraph]]] = []
    for n in contact_numbers:
        path = directory / f"graphs{n}.txt"
        if not path.exists():
            logger.warning("Graph file %s not found, skipping", path)
            continue
        sets.append((f"{n} disks", load_graph6_file(path)))

    extra = directory / "graphs8_extra.txt"
    if extra.exists():
        sets.append(("8 disks (extra)", load_graph6_file(extra)))
    return sets
