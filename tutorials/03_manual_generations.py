"""
Manual Generations Tutorial

Goals:
- Drive the search loop yourself with calculate_next_generation()
- Keep your own stopping rule and bookkeeping
"""

from genalg.evolution.genetic_algorithm import GeneticAlgorithm
from genalg.examples.int_guessing import IntGuessingDefinition


def main():
    definition = IntGuessingDefinition(5)
    algorithm = GeneticAlgorithm(0.3, 0.1, 50, definition, rng=3)

    population = [definition.new_random_hypothesis() for _ in range(algorithm.generation_size)]
    for generation in range(300):
        best = max(population, key=definition.calculate_fitness)
        if best == definition.target:
            break
        population = algorithm.calculate_next_generation(population)
    print('generation:', generation, 'best:', best)


if __name__ == '__main__':
    main()
