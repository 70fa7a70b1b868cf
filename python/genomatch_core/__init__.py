"""Core utilities for the genomatch fragment search index."""

from .genome import (
    Genome,
    GenomeFormatError,
    load_genomes,
    read_genomes,
    write_genomes,
)
from .trie import Trie
from .matcher import (
    DNAMatch,
    GenomeMatch,
    GenomeMatcher,
)

__all__ = [
    "Genome",
    "GenomeFormatError",
    "load_genomes",
    "read_genomes",
    "write_genomes",
    "Trie",
    "DNAMatch",
    "GenomeMatch",
    "GenomeMatcher",
]
