"""Settings of a genetic-algorithm run and the choices they select between."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum, IntEnum
from typing import TypeVar


class GenotypeDataProvider(IntEnum):
    """Where the case and control genotypes come from."""

    HAPMAP = 0
    SYNTHETIC = 1
    YANG_DATA = 2
    CROHN_DATA = 3


class SelectionAlgorithm(IntEnum):
    """How parents are chosen for the next generation."""

    ROULETTE_WHEEL = 0


class PostProcessingAlgorithm(IntEnum):
    """How the elite chromosomes of each run are analysed.

    ``ALL`` runs every analysis in turn.
    """

    CLUSTERING_FITNESS = 0
    CLUSTERING_POSITION = 1
    CLUSTERING_SUM = 2
    CONTINUITY = 3
    ALL = 4


class Algorithm(IntEnum):
    """Which fitness function the chromosomes use."""

    YANG = 0
    MOONEY = 1


_E = TypeVar("_E", bound=IntEnum)


def _coerce(enum_type: type[_E], value: object) -> _E:
    if isinstance(value, enum_type):
        return value
    if isinstance(value, str):
        key = value.strip().upper()
        if key.isdigit():
            return enum_type(int(key))
        try:
            return enum_type[key]
        except KeyError:
            raise ValueError(f"{value!r} is not a valid {enum_type.__name__}") from None
    if isinstance(value, int) and not isinstance(value, bool):
        return enum_type(value)
    raise ValueError(f"{value!r} is not a valid {enum_type.__name__}")


@dataclass
class GAConfig:
    """Every configurable parameter of the genetic algorithm.

    Enumerated settings may be given as members, their integer values or their names.
    """

    directory_name: str = ""
    case_file_name: str = ""
    control_file_name: str = ""
    chromosome_length: int = 0
    num_of_iterations: int = 0
    population_size: int = 0
    elitism_rate: float = 0.0
    crossover_rate: float = 0.0
    mutation_rate: float = 0.0
    trap_ratio: float = 0.0
    vibration_rate: float = 0.0
    provider: GenotypeDataProvider = GenotypeDataProvider.HAPMAP
    display_ratio: float = 0.0
    selected_barcode: list[str] = field(default_factory=list)
    homogeneous_ratio: float = 1.0
    ignore_genotype2: bool = False
    selection_algorithm: SelectionAlgorithm = SelectionAlgorithm.ROULETTE_WHEEL
    algorithm: Algorithm = Algorithm.YANG
    number_of_executions: int = 1
    execution_is_stuck: int = 0
    number_of_orders: int = 0
    post_processing_alg: PostProcessingAlgorithm = PostProcessingAlgorithm.CLUSTERING_FITNESS
    halt_criteria: int = 0

    def __post_init__(self) -> None:
        for item in fields(self):
            if isinstance(item.type, str):
                enum_type = _ENUM_FIELDS.get(item.name)
            else:
                enum_type = item.type if isinstance(item.type, type) and issubclass(item.type, Enum) else None
            if enum_type is not None:
                setattr(self, item.name, _coerce(enum_type, getattr(self, item.name)))
        if isinstance(self.selected_barcode, str):
            self.selected_barcode = [
                name for name in (part.strip() for part in self.selected_barcode.split(",")) if name
            ]
        else:
            self.selected_barcode = list(self.selected_barcode)


_ENUM_FIELDS: dict[str, type[IntEnum]] = {
    "provider": GenotypeDataProvider,
    "selection_algorithm": SelectionAlgorithm,
    "algorithm": Algorithm,
    "post_processing_alg": PostProcessingAlgorithm,
}