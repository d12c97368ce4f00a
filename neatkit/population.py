"""Population: all organisms of a run together with their species."""

from __future__ import annotations

import math
import random
import threading
from dataclasses import dataclass, field
from typing import IO, Any

from neatkit.log import debug_log
from neatkit.species import Species


class PopulationError(ValueError):
    """Raised when a population operation cannot be carried out."""


@dataclass(eq=False)
class Population:
    """A group of organisms together with the species they belong to.

    ``last_node_id`` and ``last_innovation_number`` hold the most recently
    issued node ID and innovation number; the next ones are issued by
    :meth:`next_node_id` and :meth:`next_innovation_number`.
    """

    species: list[Species] = field(default_factory=list)
    organisms: list[Any] = field(default_factory=list)
    # the highest species number issued so far
    last_species: int = 0
    # above zero tells the generation in which the first winner appeared
    winner_gen: int = 0
    # the last generation played
    final_gen: int = 0

    # stagnation detection
    highest_fitness: float = 0.0
    epochs_highest_last_changed: int = 0

    # fitness statistics
    mean_fitness: float = 0.0
    variance: float = 0.0
    standard_dev: float = 0.0

    # genetic innovations of the newest generation
    innovations: list[Any] = field(default_factory=list)
    last_node_id: int = 0
    last_innovation_number: int = 0

    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def next_node_id(self) -> int:
        """Issue and return the next node ID."""
        with self._lock:
            self.last_node_id += 1
            return self.last_node_id

    def next_innovation_number(self) -> int:
        """Issue and return the next innovation number."""
        with self._lock:
            self.last_innovation_number += 1
            return self.last_innovation_number

    def store_innovation(self, innovation: Any) -> None:
        """Record an innovation of the current generation."""
        with self._lock:
            self.innovations.append(innovation)

    def verify(self) -> bool:
        """Verify every organism's genome; the last genome's verdict is returned."""
        result = True
        for org in self.organisms:
            result = org.genotype.verify()
        return result

    def speciate(self, organisms: list[Any], options: Any) -> None:
        """Place the given organisms into species by compatibility.

        An organism joins the most compatible species whose first member is
        closer than the compatibility threshold; otherwise it founds a new one.
        """
        if not organisms:
            raise PopulationError("no organisms to speciate from")

        for org in organisms:
            if not self.species:
                create_first_species(self, org)
                continue
            if options.compat_threshold == 0:
                raise PopulationError(
                    "compatibility threshold is set to ZERO - will not find any compatible species"
                )
            best_compatible: Species | None = None
            best_value = math.inf
            for sp in self.species:
                first = sp.first_organism()
                if first is None:
                    continue
                compat = org.genotype.compatibility(first.genotype, options)
                if compat < options.compat_threshold and compat < best_value:
                    best_compatible = sp
                    best_value = compat
            if best_compatible is not None:
                debug_log(
                    f"POPULATION: Compatible species [{best_compatible.id}] found "
                    f"for baby organism [{org.genotype.id}]"
                )
                best_compatible.add_organism(org)
                org.species = best_compatible
            else:
                create_first_species(self, org)

    def purge_zero_offspring_species(self, generation: int) -> None:
        """Assign expected offspring to species and drop those that get none."""
        total_organisms = len(self.organisms)
        total = sum(org.fitness for org in self.organisms)
        overall_average = total / total_organisms if total_organisms else 0.0
        debug_log(
            f"POPULATION: Generation {generation}: overall average fitness = "
            f"{overall_average:.3f}, # of organisms: {total_organisms}, "
            f"# of species: {len(self.species)}"
        )

        if overall_average != 0:
            for org in self.organisms:
                org.expected_offspring = org.fitness / overall_average

        skim = 0.0
        total_expected = 0
        for sp in self.species:
            sp.expected_offspring, skim = sp.count_offspring(skim)
            total_expected += sp.expected_offspring
        debug_log(f"POPULATION: Total expected offspring count: {total_expected}")

        # make up for floating point precision lost in offspring assignment
        if total_expected < total_organisms:
            best_species: Species | None = None
            max_expected = 0
            final_expected = 0
            for sp in self.species:
                if sp.expected_offspring >= max_expected:
                    max_expected = sp.expected_offspring
                    best_species = sp
                final_expected += sp.expected_offspring
            if best_species is not None:
                best_species.expected_offspring += 1
            final_expected += 1

            # a stagnant dominant species died off: hand everything to the best
            if final_expected < total_organisms:
                debug_log(
                    "POPULATION: Population died !!! (expected/total) "
                    f"{final_expected}/{total_organisms}"
                )
                for sp in self.species:
                    sp.expected_offspring = 0
                if best_species is not None:
                    best_species.expected_offspring = total_organisms

        self.species = [sp for sp in self.species if sp.expected_offspring > 0]

    def delta_coding(self, sorted_species: list[Species], options: Any) -> None:
        """Give the whole next generation to the top one or two species to escape stagnation."""
        debug_log("POPULATION: PERFORMING DELTA CODING TO FIX STAGNATION")
        self.epochs_highest_last_changed = 0
        half_pop = options.pop_size // 2

        if len(sorted_species) > 1:
            allotments = ((sorted_species[0], half_pop), (sorted_species[1], options.pop_size - half_pop))
            for sp, babies in allotments:
                sp.organisms[0].super_champ_offspring = babies
                sp.expected_offspring = babies
                sp.age_of_last_improvement = sp.age
            for sp in sorted_species[2:]:
                sp.expected_offspring = 0
        else:
            sp = sorted_species[0]
            sp.organisms[0].super_champ_offspring = options.pop_size
            sp.expected_offspring = options.pop_size
            sp.age_of_last_improvement = sp.age

    def give_babies_to_the_best(self, sorted_species: list[Species], options: Any) -> None:
        """Take expected offspring from the worst species and give them to the champions."""
        stolen = 0
        for sp in reversed(sorted_species):
            if stolen >= options.babies_stolen:
                break
            if sp.age > 5 and sp.expected_offspring > 2:
                if sp.expected_offspring - 1 >= options.babies_stolen - stolen:
                    sp.expected_offspring -= options.babies_stolen - stolen
                    stolen = options.babies_stolen
                else:
                    stolen += sp.expected_offspring - 1
                    sp.expected_offspring = 1
        debug_log(f"POPULATION: STOLEN BABIES: {stolen}")

        # the top three get 1/5, 1/5 and 1/10 of the stolen babies
        blocks = (options.babies_stolen // 5, options.babies_stolen // 5, options.babies_stolen // 10)
        block_index = 0
        for sp in sorted_species:
            if sp.last_improved() > options.dropoff_age:
                continue
            champion = sp.organisms[0]
            if block_index < 3 and stolen >= blocks[block_index]:
                champion.super_champ_offspring = blocks[block_index]
                sp.expected_offspring += blocks[block_index]
                stolen -= blocks[block_index]
            elif block_index >= 3 and random.random() > 0.1:
                given = 3 if stolen > 3 else stolen
                champion.super_champ_offspring = given
                sp.expected_offspring += given
                stolen -= given
            if stolen <= 0:
                break
            block_index += 1

        if stolen > 0:
            sp = sorted_species[0]
            sp.organisms[0].super_champ_offspring += stolen
            sp.expected_offspring += stolen

    def purge_organisms(self) -> None:
        """Remove organisms marked for elimination from the population and their species."""
        kept = []
        for org in self.organisms:
            if org.to_eliminate:
                org.species.remove_organism(org)
            else:
                kept.append(org)
        self.organisms = kept

    def purge_old_generation(self, best_species_id: int) -> None:
        """Remove the whole old generation from the population and its species."""
        for org in self.organisms:
            org.species.remove_organism(org)
            if org.species.id == best_species_id:
                debug_log(
                    f"POPULATION: Removed organism [{org.genotype.id}] from best species "
                    f"[{best_species_id}] - {len(org.species.organisms)} organisms remained"
                )
        self.organisms = []

    def purge_or_age_species(self) -> None:
        """Drop empty species, age the survivors and rebuild the organism list."""
        survivors = []
        count = 0
        for sp in self.species:
            if not sp.organisms:
                debug_log(f"POPULATION: >> Species [{sp.id}] have not survived reproduction!")
                continue
            if sp.is_novel:
                sp.is_novel = False
            else:
                sp.age += 1
            for org in sp.organisms:
                org.genotype.id = count
                self.organisms.append(org)
                count += 1
            survivors.append(sp)
        self.species = survivors
        debug_log(
            f"POPULATION: # of species survived: {len(self.species)}, "
            f"# of organisms survived: {len(self.organisms)}"
        )

    def check_best_species_alive(self, best_species_id: int, best_species_reproduced: bool) -> bool:
        """Tell whether the best species survived; raise if it died without offspring."""
        best = next((sp for sp in self.species if sp.id == best_species_id), None)
        if best is None and not best_species_reproduced:
            raise PopulationError("best species died without offspring")
        if best is not None:
            debug_log(
                f"POPULATION: The best survived species Id: {best_species_id}, "
                f"max fitness ever: {best.max_fitness_ever:f}"
            )
        return best is not None

    def write(self, stream: IO[str]) -> None:
        """Write the genomes of all organisms to ``stream``."""
        for org in self.organisms:
            org.genotype.write(stream)

    def write_by_species(self, stream: IO[str]) -> None:
        """Write the population species by species to ``stream``."""
        for sp in self.species:
            sp.write(stream)


def create_first_species(population: Population, organism: Any) -> Species:
    """Found a new novel species in ``population`` holding ``organism``."""
    population.last_species += 1
    species = Species(id=population.last_species, is_novel=True)
    population.species.append(species)
    species.add_organism(organism)
    organism.species = species
    debug_log(
        f"SPECIES: # of species in population: {len(population.species)}, "
        f"new species id: {species.id}"
    )
    return species