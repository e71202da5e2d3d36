"""
Custom Definition Tutorial

Goals:
- Write a collaborator from scratch (no base class needed)
- Maximise the number of ones in a bit string
- Stop with a predicate passed to find_maximum() instead of definition.loop()
"""

import random

from genalg.evolution.genetic_algorithm import GeneticAlgorithm


class OneMax:
    def __init__(self, bits):
        self.bits = bits
        self.rng = None

    def initialize(self, rng):
        self.rng = rng

    def new_random_hypothesis(self):
        return [self.rng.randrange(2) for _ in range(self.bits)]

    def mutate_hypothesis(self, h):
        # The engine hands over a private copy, so flipping in place is fine.
        i = self.rng.randrange(self.bits)
        h[i] = 1 - h[i]
        return None

    def cross_over_hypothesis(self, a, b):
        point = self.rng.randrange(self.bits)
        return [a[:point] + b[point:], b[:point] + a[point:]]

    def calculate_fitness(self, h):
        return float(sum(h))

    def loop(self, h):
        return True


def main():
    definition = OneMax(32)
    algorithm = GeneticAlgorithm(0.4, 0.05, 60, definition, rng=random.Random(7))
    generations = {'n': 0}

    def until_solved_or_200(best):
        generations['n'] += 1
        return sum(best) < 32 and generations['n'] < 200

    best = algorithm.find_maximum(loop=until_solved_or_200)
    print('ones:', int(best.fitness), 'of', definition.bits, 'after', algorithm.generation_number, 'generations')


if __name__ == '__main__':
    main()
