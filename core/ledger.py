"""Disease ledger: the shared cube pools and cure status per color."""

from __future__ import annotations

from dataclasses import dataclass, field

from .constants import Color, GameOverReason, CUBES_PER_COLOR
from .errors import GameOver


@dataclass
class DiseaseState:
    """Status of a single disease.

    Attributes:
        cubes: Cubes left in the supply (not on the board).
        cured: Whether a cure has been discovered.
        eradicated: Whether the disease is cured and off the board.
    """

    cubes: int = CUBES_PER_COLOR
    cured: bool = False
    eradicated: bool = False


def _fresh_diseases() -> dict[Color, DiseaseState]:
    return {color: DiseaseState() for color in Color}


@dataclass
class DiseaseLedger:
    """Per-color cube supply and cure bookkeeping.

    Cubes only move between this supply and the cities; the total
    per color is always CUBES_PER_COLOR.
    """

    diseases: dict[Color, DiseaseState] = field(default_factory=_fresh_diseases)

    def __getitem__(self, color: Color) -> DiseaseState:
        return self.diseases[color]

    def pool(self, color: Color) -> int:
        """Cubes of a color still in the supply."""
        return self.diseases[color].cubes

    def is_cured(self, color: Color) -> bool:
        return self.diseases[color].cured

    def is_eradicated(self, color: Color) -> bool:
        return self.diseases[color].eradicated

    def all_cured(self) -> bool:
        """Check if every disease has been cured."""
        return all(d.cured for d in self.diseases.values())

    def take_cubes(self, color: Color, amount: int) -> None:
        """Take cubes from the supply to place on the board.

        Raises:
            GameOver: If the supply does not hold enough cubes.
        """
        disease = self.diseases[color]
        if amount > disease.cubes:
            raise GameOver(
                GameOverReason.CUBES_EXHAUSTED,
                f"Ran out of {color.value} disease cubes",
            )
        disease.cubes -= amount

    def return_cubes(self, color: Color, amount: int) -> None:
        """Put cubes removed from the board back into the supply.

        Raises:
            ValueError: If the supply would exceed its capacity.
        """
        disease = self.diseases[color]
        if disease.cubes + amount > CUBES_PER_COLOR:
            raise ValueError(
                f"Cannot return {amount} {color.value} cubes: supply would exceed "
                f"{CUBES_PER_COLOR}"
            )
        disease.cubes += amount

    def cure(self, color: Color) -> None:
        """Mark a disease as cured.

        Raises:
            ValueError: If the disease is already cured.
        """
        disease = self.diseases[color]
        if disease.cured:
            raise ValueError(f"The {color.value} disease is already cured")
        disease.cured = True

    def check_eradication(self, color: Color) -> bool:
        """Eradicate a cured disease whose cubes are all back in the supply.

        Returns:
            True if the disease became eradicated by this call.
        """
        disease = self.diseases[color]
        if disease.cured and not disease.eradicated and disease.cubes == CUBES_PER_COLOR:
            disease.eradicated = True
            return True
        return False
