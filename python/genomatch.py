"""Command line entrypoint for the genomatch fragment search index."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import List, Sequence

from Bio import SeqIO
from Bio.Seq import Seq
from Bio.SeqRecord import SeqRecord

from genomatch_core import (
    DNAMatch,
    Genome,
    GenomeFormatError,
    GenomeMatcher,
    read_genomes,
)

EXIT_FOUND = 0
EXIT_NOT_FOUND = 1
EXIT_BAD_INPUT = 2


def positive_int(text: str) -> int:
    value = int(text)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"{text} is not a positive integer")
    return value


def add_library_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "libraries",
        type=Path,
        nargs="+",
        help="Genome library files ('>' name lines followed by sequence lines)",
    )


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Search a genome library for DNA fragments")
    parser.add_argument(
        "--min-search-length",
        type=positive_int,
        default=10,
        help="k-mer length used to index the libraries (default: 10)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose logging",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    find = commands.add_parser("find", help="Find genomes containing a fragment")
    find.add_argument("fragment", help="DNA fragment to search for")
    add_library_args(find)
    find.add_argument(
        "--min-length",
        type=int,
        help="Shortest match to report (default: the minimum search length)",
    )
    find.add_argument(
        "--exact",
        action="store_true",
        help="Disallow the single tolerated substitution",
    )
    find.add_argument(
        "--output-fasta",
        type=Path,
        help="Optional output FASTA path for the matched regions",
    )

    related = commands.add_parser("related", help="Rank genomes related to query genomes")
    related.add_argument("query", type=Path, help="Genome library holding the query genomes")
    add_library_args(related)
    related.add_argument(
        "--fragment-length",
        type=int,
        default=20,
        help="Length of the non-overlapping query windows (default: 20)",
    )
    related.add_argument(
        "--exact",
        action="store_true",
        help="Disallow the single tolerated substitution",
    )
    related.add_argument(
        "--threshold",
        type=float,
        default=20.0,
        help="Report genomes matching more than this percentage of windows (default: 20)",
    )
    return parser.parse_args(argv)


def build_matcher(libraries: Sequence[Path], min_search_length: int) -> GenomeMatcher:
    matcher = GenomeMatcher(min_search_length)
    for path in libraries:
        genomes = read_genomes(path)
        print(f"Loading {len(genomes)} genomes from {path}...", file=sys.stderr)
        for genome in genomes:
            matcher.add_genome(genome)
    return matcher


def matched_region(matcher: GenomeMatcher, fragment: str, match: DNAMatch) -> str:
    """Return the bases ``match`` covers.

    Names may repeat across libraries, so every genome carrying the name is
    tried and the first window that agrees with ``fragment`` is used.
    """

    expected = fragment.upper()[: match.length]
    for genome in matcher.genomes:
        if genome.name != match.genome_name:
            continue
        region = genome.extract(match.position, match.length)
        if region is None:
            continue
        if sum(a != b for a, b in zip(region, expected)) <= 1:
            return region
    raise LookupError(f"no genome named {match.genome_name!r} holds {match}")


def matched_regions(
    matcher: GenomeMatcher, fragment: str, matches: Sequence[DNAMatch]
) -> List[SeqRecord]:
    return [
        SeqRecord(
            Seq(matched_region(matcher, fragment, match)),
            id=f"{match.genome_name}:{match.position}-{match.position + match.length}",
            description="",
        )
        for match in matches
    ]


def run_find(matcher: GenomeMatcher, args: argparse.Namespace) -> int:
    min_length = args.min_length if args.min_length is not None else matcher.minimum_search_length
    found, matches = matcher.find_genomes_with_this_dna(args.fragment, min_length, args.exact)
    if not found:
        print(f"No {'exact ' if args.exact else ''}matches found for {args.fragment}")
        return EXIT_NOT_FOUND

    print(f"{len(matches)} matches of {args.fragment} found:")
    for match in matches:
        print(f"  {match.genome_name} of length {match.length} at position {match.position}")

    if args.output_fasta:
        SeqIO.write(matched_regions(matcher, args.fragment, matches), args.output_fasta, "fasta")
    return EXIT_FOUND


def run_related(matcher: GenomeMatcher, args: argparse.Namespace) -> int:
    queries: List[Genome] = read_genomes(args.query)
    status = EXIT_NOT_FOUND
    for query in queries:
        found, results = matcher.find_related_genomes(
            query, args.fragment_length, args.exact, args.threshold
        )
        if not found:
            print(f"{query.name}: no related genomes above {args.threshold:g}%")
            continue
        status = EXIT_FOUND
        print(f"{query.name}: {len(results)} related genomes")
        for result in results:
            print(f"  {result.percent_match:.2f}% {result.genome_name}")
    return status


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        start = time.time()
        matcher = build_matcher(args.libraries, args.min_search_length)
        index_time = time.time() - start
        print(f"Index built in {index_time:.3f}s ({len(matcher)} genomes)", file=sys.stderr)

        if args.command == "find":
            return run_find(matcher, args)
        return run_related(matcher, args)
    except GenomeFormatError as exc:
        print(f"Error: malformed genome library: {exc}", file=sys.stderr)
        return EXIT_BAD_INPUT


if __name__ == "__main__":
    sys.exit(main())
