"""Genome records and the strict library loader.

A library file alternates name lines (``>name``) with one or more sequence
lines of at most 80 bases drawn from ``ACTGN`` in either case. The loader is
all-or-nothing: a single malformed line rejects the whole file.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, TextIO

from Bio.Seq import Seq
from Bio.SeqRecord import SeqRecord

logger = logging.getLogger(__name__)

VALID_BASES = frozenset("ACTGN")
MAX_LINE_LENGTH = 80


class GenomeFormatError(ValueError):
    """Raised when a genome library does not follow the ingestion format."""

    def __init__(self, line_number: int, reason: str) -> None:
        super().__init__(f"line {line_number}: {reason}")
        self.line_number = line_number
        self.reason = reason


class Genome:
    """A named DNA sequence, stored upper-case. Immutable once constructed."""

    __slots__ = ("_name", "_sequence")

    def __init__(self, name: str, sequence: str) -> None:
        self._name = name
        self._sequence = sequence.upper()

    @property
    def name(self) -> str:
        return self._name

    @property
    def sequence(self) -> str:
        return self._sequence

    def length(self) -> int:
        return len(self._sequence)

    def __len__(self) -> int:
        return len(self._sequence)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Genome):
            return NotImplemented
        return self._name == other._name and self._sequence == other._sequence

    def __hash__(self) -> int:
        return hash((self._name, self._sequence))

    def __repr__(self) -> str:
        return f"Genome(name={self._name!r}, length={len(self._sequence)})"

    def extract(self, position: int, length: int) -> str | None:
        """Return ``length`` bases starting at ``position``.

        The window must lie entirely inside the sequence; otherwise ``None`` is
        returned and no partial fragment is produced.
        """

        if not self._sequence:
            return None
        if position < 0 or length < 0:
            return None
        if position + length > len(self._sequence):
            return None
        return self._sequence[position : position + length]

    def to_record(self) -> SeqRecord:
        """Wrap the genome as a Biopython record for FASTA output."""

        return SeqRecord(Seq(self._sequence), id=self._name, description="")


def _parse_name(line: str) -> str | None:
    if len(line) <= 1 or not line.startswith(">"):
        return None
    return line[1:]


def _parse_bases(line: str) -> str | None:
    if not line or len(line) > MAX_LINE_LENGTH:
        return None
    bases = line.upper()
    if not VALID_BASES.issuperset(bases):
        return None
    return bases


def load_genomes(handle: Iterable[str]) -> List[Genome]:
    """Parse every genome from ``handle``.

    Parameters
    ----------
    handle
        Any iterable of text lines, typically an open file. Trailing ``\\n`` or
        ``\\r\\n`` terminators are ignored.

    Raises
    ------
    GenomeFormatError
        On the first line that breaks the format. Nothing parsed before the
        error is returned.
    """

    genomes: List[Genome] = []
    name: str | None = None
    chunks: List[str] = []
    line_number = 0

    for line_number, raw in enumerate(handle, start=1):
        line = raw.rstrip("\r\n")
        if line.startswith(">"):
            header = _parse_name(line)
            if header is None:
                raise GenomeFormatError(line_number, "empty genome name")
            if name is not None:
                if not chunks:
                    raise GenomeFormatError(
                        line_number, f"genome {name!r} has no sequence lines"
                    )
                genomes.append(Genome(name, "".join(chunks)))
            name = header
            chunks = []
            continue

        if name is None:
            raise GenomeFormatError(line_number, "expected a '>' name line")
        bases = _parse_bases(line)
        if bases is None:
            raise GenomeFormatError(
                line_number,
                f"sequence lines must be 1-{MAX_LINE_LENGTH} characters of ACTGN",
            )
        chunks.append(bases)

    if name is None:
        raise GenomeFormatError(max(line_number, 1), "no genomes found")
    if not chunks:
        raise GenomeFormatError(line_number, f"genome {name!r} has no sequence lines")
    genomes.append(Genome(name, "".join(chunks)))

    logger.debug("loaded %d genomes over %d lines", len(genomes), line_number)
    return genomes


def read_genomes(path: str | Path) -> List[Genome]:
    """Load a genome library from ``path``."""

    p = Path(path)
    with p.open("r", encoding="utf-8") as handle:
        return load_genomes(handle)


def write_genomes(handle: TextIO, genomes: Iterable[Genome]) -> None:
    """Write genomes in the library format, wrapping sequences at 80 bases."""

    for genome in genomes:
        handle.write(f">{genome.name}\n")
        seq = genome.sequence
        for i in range(0, len(seq), MAX_LINE_LENGTH):
            handle.write(seq[i : i + MAX_LINE_LENGTH] + "\n")
