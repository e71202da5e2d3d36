"""
Parallel Engine Tutorial

Goals:
- Run the same problem on a thread pool instead of the calling thread
- Compare engine metrics of a serial and a parallel run
  (parallel runs are not reproducible for a seed; both reach the target)
"""

from concurrent.futures import ThreadPoolExecutor

from genalg.evolution.builder import build_algorithm
from genalg.examples.int_guessing import IntGuessingDefinition


def main():
    config = {'cross_over_rate': 0.3, 'mutation_rate': 0.1, 'generation_size': 100}

    serial = build_algorithm(IntGuessingDefinition(6, max_generations=500), config, rng=11)
    s_best = serial.find_maximum()

    with ThreadPoolExecutor(max_workers=4) as pool:
        parallel = build_algorithm(IntGuessingDefinition(6, max_generations=500), config, rng=11, executor=pool)
        p_best = parallel.find_maximum()

    print('serial:', s_best.hypothesis, 'generations:', serial.generation_number, serial.engine.metrics.as_dict())
    print('parallel:', p_best.hypothesis, 'generations:', parallel.generation_number, parallel.engine.metrics.as_dict())


if __name__ == '__main__':
    main()
