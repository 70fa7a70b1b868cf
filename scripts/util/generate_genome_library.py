'''
DESCRIPTION
    Utility that writes a random genome library: a set of random genomes plus optional mutated
    copies, in the '>' name / 80 column sequence format read by genomatch
INPUT
    count      | how many random genomes to create
    length     | the length of each genome
    mutations  | number of single base substitutions applied to each mutated copy
    copies     | how many mutated copies to derive from every genome
    seed       | random seed for the random function for reproducibility
OUTPUT
    The library on stdout (or the path given with --output)
'''
import argparse
import random
import sys

from genomatch_core import Genome, write_genomes

NUCLEOTIDES = 'ACGT'


def generate_genome_sequence(n, rng):
    return ''.join(rng.choice(NUCLEOTIDES) for _ in range(n))


def mutate(sequence, mutations, rng):
    bases = list(sequence)
    for position in rng.sample(range(len(bases)), min(mutations, len(bases))):
        bases[position] = rng.choice([b for b in NUCLEOTIDES if b != bases[position]])
    return ''.join(bases)


def generate_library(count, length, mutations=0, copies=0, seed=None):
    rng = random.Random(seed)
    genomes = []
    for i in range(count):
        sequence = generate_genome_sequence(length, rng)
        genomes.append(Genome(f'genome_{i}', sequence))
        for c in range(copies):
            genomes.append(Genome(f'genome_{i}_variant_{c}', mutate(sequence, mutations, rng)))
    return genomes


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Generate a random genome library')
    parser.add_argument('--count', type=int, default=5)
    parser.add_argument('--length', type=int, default=1000)
    parser.add_argument('--mutations', type=int, default=10)
    parser.add_argument('--copies', type=int, default=1)
    parser.add_argument('--seed', type=int)
    parser.add_argument('--output', help='Output path (default: stdout)')
    args = parser.parse_args()

    genomes = generate_library(args.count, args.length, args.mutations, args.copies, args.seed)
    if args.output:
        with open(args.output, 'w', encoding='utf-8') as handle:
            write_genomes(handle, genomes)
    else:
        write_genomes(sys.stdout, genomes)
