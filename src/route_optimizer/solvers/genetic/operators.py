"""
Genetic algorithm operators for permutation-based representation.

Provides selection, crossover and mutation operators for evolving visiting
orders, and a generic elitist GA loop with convergence and deadline checks.
Every operator draws from an explicit random.Random so runs are
reproducible from a seed.
"""

import random
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

Genotype = List[int]


def tournament_selection(
    population: List[Genotype],
    fitnesses: List[float],
    tournament_size: int,
    n_select: int,
    rng: random.Random,
) -> List[Genotype]:
    """
    Select individuals using tournament selection.

    Args:
        population: List of genotypes
        fitnesses: Fitness values (higher is better)
        tournament_size: Number of individuals per tournament
        n_select: Number of individuals to select
        rng: Random number generator

    Returns:
        Selected individuals
    """
    parents = []
    k = min(tournament_size, len(population))
    for _ in range(n_select):
        idxs = rng.sample(range(len(population)), k)
        best_i = max(idxs, key=lambda i: fitnesses[i])
        parents.append(list(population[best_i]))
    return parents


def order_crossover(p1: Genotype, p2: Genotype, rng: random.Random) -> Genotype:
    """
    Order crossover (OX) for permutations.

    Copies a random segment of p1 and fills the remaining positions with
    the missing elements in the order they appear in p2.
    """
    n = len(p1)
    if n <= 1:
        return list(p1)

    a, b = sorted(rng.sample(range(n), 2))
    child: List[Optional[int]] = [None] * n
    child[a:b] = p1[a:b]

    kept = set(p1[a:b])
    remaining = [x for x in p2 if x not in kept]
    j = 0
    for i in range(n):
        if child[i] is None:
            child[i] = remaining[j]
            j += 1

    return child  # type: ignore[return-value]


def swap_mutation(genotype: Genotype, prob: float, rng: random.Random) -> Genotype:
    """Swap mutation: exchange two random positions with probability prob."""
    g = list(genotype)
    if rng.random() >= prob or len(g) < 2:
        return g

    i, j = rng.sample(range(len(g)), 2)
    g[i], g[j] = g[j], g[i]
    return g


def inversion_mutation(genotype: Genotype, prob: float, rng: random.Random) -> Genotype:
    """Segment-reverse mutation with probability prob."""
    g = list(genotype)
    if rng.random() >= prob or len(g) < 2:
        return g

    i, j = sorted(rng.sample(range(len(g)), 2))
    g[i : j + 1] = reversed(g[i : j + 1])
    return g


def mutate(
    genotype: Genotype,
    swap_prob: float,
    inversion_prob: float,
    rng: random.Random,
) -> Genotype:
    """Apply swap then inversion mutation."""
    g = swap_mutation(genotype, swap_prob, rng)
    return inversion_mutation(g, inversion_prob, rng)


@dataclass
class EvolutionResult:
    """
    Outcome of a GA run.

    Attributes:
        best: Best genotype found
        fitness: Its fitness
        generations: Generations completed
        stop_reason: "generations", "converged" or "deadline"
    """

    best: Genotype
    fitness: float
    generations: int
    stop_reason: str


def run_genetic_algorithm(
    fitness_fn: Callable[[Genotype], float],
    initial_population: List[Genotype],
    rng: random.Random,
    *,
    max_generations: int = 150,
    stall_generations: int = 30,
    tournament_size: int = 3,
    crossover_prob: float = 0.8,
    swap_prob: float = 0.2,
    inversion_prob: float = 0.3,
    deadline: Optional[float] = None,
) -> EvolutionResult:
    """
    Run an elitist genetic algorithm over permutations.

    Parents and offspring compete for the next generation, so the best
    individual always survives. Stops on the generation cap, after
    stall_generations without improvement, or once time.perf_counter()
    passes deadline; the deadline is checked between generations and the
    best individual so far is returned.

    Args:
        fitness_fn: Function to evaluate fitness (higher is better)
        initial_population: Starting genotypes (at least one)
        rng: Random number generator
        max_generations: Generation cap
        stall_generations: Generations without improvement before stopping
        tournament_size: Tournament size for selection
        crossover_prob: Crossover probability
        swap_prob: Swap mutation probability
        inversion_prob: Inversion mutation probability
        deadline: Wall-clock limit as a time.perf_counter() value

    Returns:
        EvolutionResult with the best genotype found
    """
    pop = [list(g) for g in initial_population]
    population_size = len(pop)
    fitnesses = [fitness_fn(g) for g in pop]

    best_i = max(range(population_size), key=lambda i: fitnesses[i])
    best_genotype = list(pop[best_i])
    best_fitness = fitnesses[best_i]

    stall = 0
    generation = 0
    stop_reason = "generations"
    while generation < max_generations:
        if deadline is not None and time.perf_counter() >= deadline:
            stop_reason = "deadline"
            break

        parents = tournament_selection(pop, fitnesses, tournament_size, population_size, rng)

        offspring = []
        for i in range(0, population_size, 2):
            p1 = parents[i]
            p2 = parents[i + 1] if i + 1 < population_size else parents[0]

            if rng.random() < crossover_prob:
                c1 = order_crossover(p1, p2, rng)
                c2 = order_crossover(p2, p1, rng)
            else:
                c1, c2 = list(p1), list(p2)

            offspring.append(mutate(c1, swap_prob, inversion_prob, rng))
            if len(offspring) < population_size:
                offspring.append(mutate(c2, swap_prob, inversion_prob, rng))

        off_fitnesses = [fitness_fn(g) for g in offspring]

        # Elitist (mu + lambda) replacement; stable sort keeps parents first on ties.
        combined = list(zip(pop + offspring, fitnesses + off_fitnesses))
        combined.sort(key=lambda x: x[1], reverse=True)
        pop = [list(x[0]) for x in combined[:population_size]]
        fitnesses = [x[1] for x in combined[:population_size]]
        generation += 1

        if fitnesses[0] > best_fitness:
            best_fitness = fitnesses[0]
            best_genotype = list(pop[0])
            stall = 0
        else:
            stall += 1
            if stall >= stall_generations:
                stop_reason = "converged"
                break

    return EvolutionResult(
        best=best_genotype,
        fitness=best_fitness,
        generations=generation,
        stop_reason=stop_reason,
    )
