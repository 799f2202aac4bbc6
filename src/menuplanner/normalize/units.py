"""Unit normalization and conversion utilities."""

from dataclasses import dataclass
from enum import Enum
from fractions import Fraction

from menuplanner.logging_config import get_logger
from menuplanner.models import BaseUnit

logger = get_logger(__name__)


class Dimension(str, Enum):
    """Physical dimension of a unit."""

    VOLUME = "volume"
    MASS = "mass"
    COUNT = "count"
    UNKNOWN = "unknown"


# =============================================================================
# Unit Conversion Tables
# =============================================================================

# Volume conversions (base unit: ml)
VOLUME_UNITS: dict[str, Fraction] = {
    "ml": Fraction(1),
    "milliliter": Fraction(1),
    "cl": Fraction(10),
    "centiliter": Fraction(10),
    "dl": Fraction(100),
    "deciliter": Fraction(100),
    "l": Fraction(1000),
    "liter": Fraction(1000),
    "litre": Fraction(1000),
    # Spoon measures
    "msk": Fraction(15),
    "matsked": Fraction(15),
    "matskedar": Fraction(15),
    "tbsp": Fraction(15),
    "tablespoon": Fraction(15),
    "tablespoons": Fraction(15),
    "tsk": Fraction(5),
    "tesked": Fraction(5),
    "teskedar": Fraction(5),
    "tsp": Fraction(5),
    "teaspoon": Fraction(5),
    "teaspoons": Fraction(5),
    "krm": Fraction(1),
    "kryddmått": Fraction(1),
    "kryddmatt": Fraction(1),
}

# Mass conversions (base unit: g)
MASS_UNITS: dict[str, Fraction] = {
    "mg": Fraction(1, 1000),
    "g": Fraction(1),
    "gr": Fraction(1),
    "gram": Fraction(1),
    "hg": Fraction(100),
    "hekto": Fraction(100),
    "hektogram": Fraction(100),
    "kg": Fraction(1000),
    "kilo": Fraction(1000),
    "kilogram": Fraction(1000),
}

# Count-based units (no conversion, base unit: piece)
COUNT_UNITS: frozenset[str] = frozenset(
    {
        "st",
        "styck",
        "stycken",
        "piece",
        "pieces",
        "pc",
        "pcs",
        "klyfta",
        "klyftor",
        "förp",
        "forp",
        "förpackning",
        "forpackning",
        "paket",
        "pkt",
        "burk",
        "burkar",
        "påse",
        "pase",
        "knippe",
        "kruka",
        "ask",
        "skiva",
        "skivor",
        "port",
        "portion",
        "portioner",
    }
)

# Spoon sizes used when formatting small volumes
SMALL_SPOON = "tsk"
LARGE_SPOON = "msk"
SMALL_SPOONS_PER_LARGE = 3

BASE_UNITS: dict[Dimension, BaseUnit] = {
    Dimension.VOLUME: BaseUnit.MILLILITER,
    Dimension.MASS: BaseUnit.GRAM,
    Dimension.COUNT: BaseUnit.PIECE,
    Dimension.UNKNOWN: BaseUnit.PIECE,
}


@dataclass(frozen=True)
class BaseQuantity:
    """An amount expressed in a base unit."""

    amount: float
    unit: BaseUnit


@dataclass(frozen=True)
class DisplayQuantity:
    """An amount promoted to a human-friendly unit."""

    amount: float
    unit: str

    def __str__(self) -> str:
        return format_quantity(self.amount, self.unit)


# =============================================================================
# Lookup
# =============================================================================


def _unit_key(unit: str) -> str:
    return unit.strip().lower().rstrip(".")


def identify_unit(unit: str | None) -> tuple[Dimension, Fraction]:
    """
    Identify the dimension of a unit and its factor to the base unit.

    Returns:
        Tuple of (dimension, conversion_factor). Unknown units report a factor of 1.
    """
    key = _unit_key(unit or "")

    if not key:
        return Dimension.COUNT, Fraction(1)
    if key in VOLUME_UNITS:
        return Dimension.VOLUME, VOLUME_UNITS[key]
    if key in MASS_UNITS:
        return Dimension.MASS, MASS_UNITS[key]
    if key in COUNT_UNITS:
        return Dimension.COUNT, Fraction(1)

    return Dimension.UNKNOWN, Fraction(1)


def is_unit(token: str) -> bool:
    """Check whether a token is a recognized unit alias."""
    key = _unit_key(token)
    return bool(key) and identify_unit(key)[0] is not Dimension.UNKNOWN


def can_aggregate(unit1: str | None, unit2: str | None) -> bool:
    """
    Check if two units can be aggregated together.

    Returns True if both units share a dimension (volume, mass or count).
    """
    dim1, _ = identify_unit(unit1)
    dim2, _ = identify_unit(unit2)
    return dim1 == dim2


# =============================================================================
# Conversion
# =============================================================================


def as_fraction(value: int | float | str | Fraction) -> Fraction:
    """Convert a number to an exact fraction using its decimal representation."""
    if isinstance(value, Fraction):
        return value
    if isinstance(value, int):
        return Fraction(value)
    return Fraction(str(value))


def round_amount(value: Fraction | float) -> float:
    """Round an amount to two decimals."""
    return float(round(as_fraction(value), 2))


def to_base_unit(amount: int | float | Fraction, unit: str | None) -> BaseQuantity:
    """
    Convert an amount to the base unit of its dimension.

    Unknown units are kept as pieces with the amount unchanged.
    """
    dimension, factor = identify_unit(unit)
    if dimension is Dimension.UNKNOWN:
        logger.debug(f"Unknown unit '{unit}', treating amount as pieces")

    return BaseQuantity(
        amount=round_amount(as_fraction(amount) * factor),
        unit=BASE_UNITS[dimension],
    )


def from_base_unit(amount: int | float | Fraction, base_unit: str, target_unit: str) -> float:
    """
    Convert an amount in a base unit back to another unit of the same dimension.

    Raises:
        ValueError: If the units belong to different dimensions.
    """
    base_dimension, base_factor = identify_unit(base_unit)
    target_dimension, target_factor = identify_unit(target_unit)
    if base_dimension != target_dimension or base_dimension is Dimension.UNKNOWN:
        raise ValueError(f"Cannot convert {base_unit} to {target_unit}")

    return round_amount(as_fraction(amount) * base_factor / target_factor)


def prettify(amount: int | float | Fraction, unit: str, spoons: bool = False) -> DisplayQuantity:
    """
    Promote an amount to the unit a person would write on a shopping list.

    - ml becomes dl from 100 and l from 1000
    - g becomes kg from 1000
    - tsk becomes msk from 3
    - with ``spoons``, volumes under 100 ml are written as tsk/msk
    """
    value = as_fraction(amount)
    key = _unit_key(unit)

    if key == SMALL_SPOON:
        return _promote_spoons(value)

    dimension, factor = identify_unit(key)
    if dimension is Dimension.VOLUME:
        ml = value * factor
        if ml >= 1000:
            return DisplayQuantity(round_amount(ml / 1000), "l")
        if ml >= 100:
            return DisplayQuantity(round_amount(ml / 100), "dl")
        if spoons and ml > 0:
            return _promote_spoons(ml / VOLUME_UNITS[SMALL_SPOON])
        return DisplayQuantity(round_amount(ml), BaseUnit.MILLILITER.value)

    if dimension is Dimension.MASS:
        grams = value * factor
        if grams >= 1000:
            return DisplayQuantity(round_amount(grams / 1000), "kg")
        return DisplayQuantity(round_amount(grams), BaseUnit.GRAM.value)

    return DisplayQuantity(round_amount(value), key or BaseUnit.PIECE.value)


def _promote_spoons(small_spoons: Fraction) -> DisplayQuantity:
    if small_spoons >= SMALL_SPOONS_PER_LARGE:
        return DisplayQuantity(round_amount(small_spoons / SMALL_SPOONS_PER_LARGE), LARGE_SPOON)
    return DisplayQuantity(round_amount(small_spoons), SMALL_SPOON)


def format_quantity(amount: float, unit: str) -> str:
    """Format an amount and unit for display, e.g. ``1.5 dl`` or ``2 st``."""
    text = f"{amount:.2f}".rstrip("0").rstrip(".")
    if unit == BaseUnit.PIECE.value:
        unit = "st"
    return f"{text} {unit}" if unit else text
