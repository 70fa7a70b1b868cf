"""Fragment search and relatedness scoring over an indexed genome collection."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, NamedTuple, Tuple

from .genome import Genome
from .trie import Trie

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DNAMatch:
    genome_name: str
    position: int
    length: int


@dataclass(frozen=True)
class GenomeMatch:
    genome_name: str
    percent_match: float


class _Anchor(NamedTuple):
    genome_index: int
    position: int


class GenomeMatcher:
    """Index genomes by every ``window_size`` k-mer and answer fragment queries.

    Query methods report failure through their boolean result both for invalid
    arguments and for searches that found nothing; callers cannot tell the two
    apart.
    """

    def __init__(self, window_size: int) -> None:
        if isinstance(window_size, bool) or not isinstance(window_size, int):
            raise ValueError("window_size must be an integer")
        if window_size <= 0:
            raise ValueError("window_size must be positive")
        self._window_size = window_size
        self._genomes: List[Genome] = []
        self._trie: Trie[_Anchor] = Trie()

    @property
    def minimum_search_length(self) -> int:
        return self._window_size

    @property
    def genomes(self) -> Tuple[Genome, ...]:
        return tuple(self._genomes)

    def __len__(self) -> int:
        return len(self._genomes)

    def reset(self) -> None:
        self._genomes.clear()
        self._trie.reset()

    def add_genome(self, genome: Genome) -> None:
        """Record ``genome`` and index each of its k-mers.

        Genomes shorter than the window are kept in the collection but add
        nothing to the index.
        """

        index = len(self._genomes)
        self._genomes.append(genome)
        k = self._window_size
        for position in range(genome.length() - k + 1):
            kmer = genome.extract(position, k)
            self._trie.insert(kmer, _Anchor(index, position))
        logger.debug(
            "indexed %s (%d bases, %d k-mers); trie holds %d anchors",
            genome.name,
            genome.length(),
            max(genome.length() - k + 1, 0),
            len(self._trie),
        )

    def find_genomes_with_this_dna(
        self,
        fragment: str,
        minimum_length: int,
        exact_match_only: bool,
        matches: List[DNAMatch] | None = None,
    ) -> Tuple[bool, List[DNAMatch]]:
        """Find the longest match of ``fragment`` in each indexed genome.

        Parameters
        ----------
        fragment
            Bases to search for; the first ``minimum_search_length`` of them
            select the candidate anchors.
        minimum_length
            Shortest match that is reported. Must be at least the window size
            and no longer than ``fragment``.
        exact_match_only
            When false a single substitution is tolerated anywhere except the
            first base.
        matches
            Optional list to extend. Existing entries are left in place.

        Returns
        -------
        ``(found, matches)`` where ``found`` is true iff this call added at
        least one match.
        """

        if matches is None:
            matches = []
        if len(fragment) < minimum_length or minimum_length < self._window_size:
            return False, matches

        fragment = fragment.upper()
        anchors = self._trie.find(fragment[: self._window_size], exact_match_only)
        logger.debug(
            "probe %s returned %d anchors", fragment[: self._window_size], len(anchors)
        )

        best: List[DNAMatch] = []
        for anchor in anchors:
            candidate = self._extend(fragment, anchor, exact_match_only)
            existing = next(
                (i for i, m in enumerate(best) if m.genome_name == candidate.genome_name),
                None,
            )
            if existing is not None:
                if candidate.length > best[existing].length:
                    best[existing] = candidate
            elif candidate.length >= minimum_length:
                best.append(candidate)

        matches.extend(best)
        return bool(best), matches

    def find_related_genomes(
        self,
        query: Genome,
        fragment_match_length: int,
        exact_match_only: bool,
        match_percent_threshold: float,
        results: List[GenomeMatch] | None = None,
    ) -> Tuple[bool, List[GenomeMatch]]:
        """Rank indexed genomes by how many of ``query``'s windows they contain.

        ``query`` is cut into non-overlapping windows of
        ``fragment_match_length`` bases (any shorter tail is dropped). A genome
        qualifies when the share of windows it matches, as a percentage, is
        strictly above ``match_percent_threshold``. Results are ordered by
        descending percentage, then by name.
        """

        if results is None:
            results = []
        if fragment_match_length < self._window_size:
            return False, results

        window_count = query.length() // fragment_match_length
        if window_count == 0:
            return False, results

        pooled: List[DNAMatch] = []
        for i in range(window_count):
            window = query.extract(i * fragment_match_length, fragment_match_length)
            self.find_genomes_with_this_dna(
                window, fragment_match_length, exact_match_only, pooled
            )

        ranked: List[GenomeMatch] = []
        for genome in self._genomes:
            hits = sum(1 for m in pooled if m.genome_name == genome.name)
            percentage = hits / window_count * 100
            if percentage > match_percent_threshold:
                _insert_ranked(ranked, GenomeMatch(genome.name, percentage))

        results.extend(ranked)
        return bool(ranked), results

    def _extend(self, fragment: str, anchor: _Anchor, exact_match_only: bool) -> DNAMatch:
        genome = self._genomes[anchor.genome_index]
        span = min(len(fragment), genome.length() - anchor.position)
        target = genome.extract(anchor.position, span)

        mismatch_spent = exact_match_only
        length = 0
        for query_base, genome_base in zip(fragment, target):
            if query_base != genome_base:
                if mismatch_spent:
                    break
                mismatch_spent = True
            length += 1

        return DNAMatch(genome.name, anchor.position, length)


def _insert_ranked(ranked: List[GenomeMatch], match: GenomeMatch) -> None:
    """Insert keeping descending percentage order, ties by ascending name."""

    for i, existing in enumerate(ranked):
        if match.percent_match > existing.percent_match or (
            match.percent_match == existing.percent_match
            and match.genome_name < existing.genome_name
        ):
            ranked.insert(i, match)
            return
    ranked.append(match)
