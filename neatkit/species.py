"""Species: groups of similar organisms that reproduce among themselves."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import IO, Any, Protocol


class SpeciesError(ValueError):
    """Raised when an operation on a species cannot be carried out."""


class _Genome(Protocol):
    id: int

    def write(self, stream: IO[str]) -> None: ...


class _Organism(Protocol):
    fitness: float
    original_fitness: float
    error: float
    expected_offspring: float
    is_winner: bool
    is_champion: bool
    to_eliminate: bool
    genotype: _Genome


@dataclass(eq=False)
class Species:
    """A group of similar organisms.

    Reproduction mostly takes place within a single species, so that
    compatible organisms can mate. A novel species does not age during
    its first generation.
    """

    id: int
    age: int = 1
    max_fitness_ever: float = 0.0
    expected_offspring: int = 0
    is_novel: bool = False
    organisms: list[Any] = field(default_factory=list)
    age_of_last_improvement: int = 0
    is_checked: bool = False

    def write(self, stream: IO[str]) -> None:
        """Write the species summary and its organisms' genomes, best first."""
        _, avg = self.compute_max_and_avg_fitness()
        stream.write(
            f"/* Species #{self.id} : (Size {len(self.organisms)}) "
            f"(AF {avg:.3f}) (Age {self.age})  */\n"
        )
        for org in sorted(self.organisms, key=lambda o: o.fitness, reverse=True):
            stream.write(
                f"/* Organism #{org.genotype.id} Fitness: {org.fitness:.3f} "
                f"Error: {org.error:.3f} */\n"
            )
            if org.is_winner:
                stream.write(f"/* ## $ WINNER ORGANISM FOR SPECIES #{self.id} $ ## */\n")
            org.genotype.write(stream)

    def add_organism(self, organism: _Organism) -> None:
        """Add an organism to this species."""
        self.organisms.append(organism)

    def remove_organism(self, organism: _Organism) -> None:
        """Remove the given organism; raise SpeciesError if it is not a member."""
        remaining = [o for o in self.organisms if o is not organism]
        if len(remaining) != len(self.organisms) - 1:
            raise SpeciesError(
                "attempt to remove nonexistent Organism from Species with #of organisms: "
                f"{len(self.organisms)}"
            )
        self.organisms = remaining

    def adjust_fitness(self, options: Any) -> None:
        """Adjust and share the fitness of members, then mark the weak for elimination.

        Young species get a boost, stagnant ones a heavy penalty, and the
        fitness is divided by the species size. Afterwards the organisms are
        sorted with the most fit first.
        """
        if not self.organisms:
            raise SpeciesError("attempt to adjust fitness of empty species")

        age_debt = (self.age - self.age_of_last_improvement + 1) - options.dropoff_age
        if age_debt == 0:
            age_debt = 1

        size = len(self.organisms)
        for org in self.organisms:
            org.original_fitness = org.fitness
            if age_debt >= 1:
                # extreme penalty for a long period of stagnation
                org.fitness *= 0.01
            if self.age <= 10:
                org.fitness *= options.age_significance
            if org.fitness < 0.0:
                org.fitness = 0.0001
            org.fitness /= size

        self.organisms.sort(key=lambda o: o.fitness, reverse=True)

        champion = self.organisms[0]
        if champion.original_fitness > self.max_fitness_ever:
            self.age_of_last_improvement = self.age
            self.max_fitness_ever = champion.original_fitness

        # adding 1.0 ensures that at least one will survive
        num_parents = int(math.floor(options.survival_thresh * size + 1.0))
        champion.is_champion = True
        for org in self.organisms[num_parents:]:
            org.to_eliminate = True

    def compute_max_and_avg_fitness(self) -> tuple[float, float]:
        """Return the maximal and the average fitness of the members."""
        total = 0.0
        max_fitness = 0.0
        for org in self.organisms:
            total += org.fitness
            if org.fitness > max_fitness:
                max_fitness = org.fitness
        avg = total / len(self.organisms) if self.organisms else 0.0
        return max_fitness, avg

    def find_champion(self) -> Any:
        """Return the most fit organism, or None if there is none."""
        champion = None
        champion_fitness = -1.0
        for org in self.organisms:
            if org.fitness > champion_fitness:
                champion_fitness = org.fitness
                champion = org
        return champion

    def first_organism(self) -> Any:
        """Return the first organism, or None if the species is empty."""
        return self.organisms[0] if self.organisms else None

    def count_offspring(self, skim: float) -> tuple[int, float]:
        """Sum the members' expected offspring.

        ``skim`` carries fractional offspring from previously counted species;
        fractions are accumulated until they add up to a whole baby. Returns
        the whole offspring count and the fraction left over.
        """
        expected = 0
        for org in self.organisms:
            expected += int(math.floor(org.expected_offspring))
            skim += math.fmod(org.expected_offspring, 1.0)
            if skim >= 1.0:
                whole = math.floor(skim)
                expected += int(whole)
                skim -= whole
        return expected, skim

    def last_improved(self) -> int:
        """Return the number of generations since the last improvement."""
        return self.age - self.age_of_last_improvement

    def size(self) -> int:
        """Return the number of organisms in this species."""
        return len(self.organisms)

    def __str__(self) -> str:
        max_fitness, avg_fitness = self.compute_max_and_avg_fitness()
        lines = [
            f"Species #{self.id}, age={self.age}, avg_fitness={avg_fitness:.3f}, "
            f"max_fitness={max_fitness:.3f}, max_fitness_ever={self.max_fitness_ever:.3f}, "
            f"expected_offspring={self.expected_offspring}, "
            f"age_of_last_improvement={self.age_of_last_improvement}\n",
            f"Has {len(self.organisms)} Organisms:\n",
        ]
        lines.extend(f"\t{org}\n" for org in self.organisms)
        return "".join(lines)


def sort_by_original_fitness(species_list: list[Species]) -> list[Species]:
    """Return species ordered by their first organism's original fitness, best first.

    Among equally fit species the younger one goes first.
    """
    return sorted(
        species_list,
        key=lambda sp: (sp.organisms[0].original_fitness, -sp.age),
        reverse=True,
    )


def sort_by_max_fitness(species_list: list[Species]) -> list[Species]:
    """Return species ordered by the maximal fitness of their members, best first."""
    return sorted(
        species_list,
        key=lambda sp: sp.compute_max_and_avg_fitness()[0],
        reverse=True,
    )