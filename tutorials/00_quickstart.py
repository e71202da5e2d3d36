"""
Quickstart Tutorial

Goals:
- Build a genetic algorithm for the bundled integer-guessing problem
- Run it to completion with a fixed seed
- Inspect the best handle and the generation count
"""

from genalg.evolution.builder import GeneticAlgorithmBuilder
from genalg.examples.int_guessing import IntGuessingDefinition


def main():
    # The definition supplies random creation, mutation, crossover, fitness
    # and the continuation predicate; here it stops once [0, 1, 2, 3] is found.
    definition = IntGuessingDefinition(4)

    # Defaults are crossover 0.3, mutation 0.05, population 100.
    algorithm = (GeneticAlgorithmBuilder(definition)
                 .with_mutation_rate(0.1)
                 .with_seed(0)
                 .build())

    best = algorithm.find_maximum()
    print('best:', best.hypothesis, 'fitness:', best.fitness)
    print('generations:', algorithm.generation_number)


if __name__ == '__main__':
    main()
