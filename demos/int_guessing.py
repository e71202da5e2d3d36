"""
Integer Guessing Demo (genalg)

Summary:
- Evolves an integer array until every cell holds its own index
- Prints the best genome of every generation, colour-coded per cell:
  green = correct and unchanged, cyan = newly correct, red = wrong
- Optionally runs on a thread pool and logs per-generation statistics to CSV

Use --quiet to print only the final summary.
"""

from __future__ import annotations

import argparse
import csv
import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

from genalg.evolution.builder import GeneticAlgorithmBuilder
from genalg.examples.int_guessing import IntGuessingDefinition, WeightedIntGuessingDefinition

ANSI_RESET = "\u001B[0m"
ANSI_RED = "\u001B[31m"
ANSI_GREEN = "\u001B[32m"
ANSI_CYAN = "\u001B[36m"


class GenomePrinter:
    """Renders the best genome per generation against the previous one."""

    def __init__(self) -> None:
        self.generation = 0
        self._previous: Optional[List[int]] = None

    def __call__(self, genome: List[int]) -> None:
        cells = []
        for index, value in enumerate(genome):
            previous = self._previous[index] if self._previous is not None else -1
            if value != index:
                color = ANSI_RED
            elif value == previous:
                color = ANSI_GREEN
            else:
                color = ANSI_CYAN
            cells.append(f"{color}[{value}]{ANSI_RESET}")
        print(f"{self.generation:03d}: " + "".join(cells))
        self.generation += 1
        self._previous = list(genome)


def main():
    ap = argparse.ArgumentParser(description="Guess an integer array with a genetic algorithm")
    ap.add_argument('-x', '--crossover', type=float, default=0.5, help='cross over rate (0..1)')
    ap.add_argument('-m', '--mutation', type=float, default=0.02, help='mutation rate (0..1)')
    ap.add_argument('-p', '--population', type=int, default=150, help='individuals per generation')
    ap.add_argument('-s', '--genome', type=int, default=9, help='size of the array to guess')
    ap.add_argument('-t', '--threads', type=int, default=os.cpu_count() or 1, help='worker threads; 1 runs serially')
    ap.add_argument('--seed', type=int, default=None, help='seed for reproducible serial runs')
    ap.add_argument('--weighted', action='store_true', help='reward near misses (exponential scoring)')
    ap.add_argument('--max-generations', type=int, default=None, help='stop after this many generations')
    ap.add_argument('--csv', default=None, help='write per-generation statistics to this CSV file')
    ap.add_argument('-q', '--quiet', action='store_true', help='no per-generation output')
    ap.add_argument('-v', '--verbose', action='store_true', help='debug logging')
    args = ap.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(asctime)s %(levelname)s %(message)s')

    printer = None if args.quiet else GenomePrinter()
    definition_cls = WeightedIntGuessingDefinition if args.weighted else IntGuessingDefinition
    definition = definition_cls(args.genome, max_generations=args.max_generations, on_generation=printer)

    builder = (GeneticAlgorithmBuilder(definition)
               .with_cross_over_rate(args.crossover)
               .with_mutation_rate(args.mutation)
               .with_generation_size(args.population))
    if args.seed is not None:
        builder.with_seed(args.seed)

    start = time.perf_counter()
    if args.threads > 1:
        with ThreadPoolExecutor(max_workers=args.threads) as pool:
            algorithm = builder.with_executor(pool).build()
            best = algorithm.find_maximum()
    else:
        algorithm = builder.build()
        best = algorithm.find_maximum()
    duration = time.perf_counter() - start

    print()
    if best is None:
        print('no result')
        return
    print(f"Maximum is {best.hypothesis} with fitness={best.fitness:.2f}, "
          f"generations={algorithm.generation_number}, "
          f"speed={algorithm.generation_number / max(duration, 1e-9):.2f} gen/s")

    if args.csv:
        rows = algorithm.history.to_rows()
        with open(args.csv, 'w', newline='') as f:
            w = csv.DictWriter(f, fieldnames=list(rows[0].keys()))
            w.writeheader()
            w.writerows(rows)
        print('csv_log:', args.csv)


if __name__ == '__main__':
    main()
