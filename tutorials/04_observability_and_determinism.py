"""
Observability & Determinism Tutorial

Goals:
- Build a run report from a finished search
- Compute the determinism signature and show that equal seeds reproduce it
"""

from genalg.evolution.builder import build_algorithm
from genalg.examples.int_guessing import IntGuessingDefinition
from genalg.utils.observability import assert_determinism_equivalence, run_report


def run(seed):
    algorithm = build_algorithm(IntGuessingDefinition(4), {'mutation_rate': 0.1}, rng=seed)
    algorithm.find_maximum()
    return run_report(algorithm)


def main():
    rep1 = run(0)
    rep2 = run(0)
    print('schema_version:', rep1['schema_version'])
    print('generations:', rep1['generations'], 'evaluations:', rep1['metrics']['fitness_evaluations'])
    print('determinism_sig:', assert_determinism_equivalence([rep1, rep2]))


if __name__ == '__main__':
    main()
