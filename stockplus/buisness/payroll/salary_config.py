"""
Salary table per division: a fixed monthly base plus a bonus for every
unit the employee produced that month. Amounts are in Rupiah.
"""

from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from stockplus.buisness.core.exceptions import ValidationError
from stockplus.data.staff.employee import DIVISION_ACCESSORY, DIVISION_CYLINDER, DIVISION_PACKING, DIVISIONS


@dataclass(frozen=True)
class DivisionRate:
    base: int
    bonus_per_unit: int


DEFAULT_SALARY_CONFIG: Dict[str, DivisionRate] = {
    DIVISION_CYLINDER: DivisionRate(base=3_500_000, bonus_per_unit=1_500),
    DIVISION_ACCESSORY: DivisionRate(base=3_200_000, bonus_per_unit=1_200),
    DIVISION_PACKING: DivisionRate(base=3_000_000, bonus_per_unit=1_000),
}


def load_salary_config(overrides: Optional[Mapping] = None) -> Dict[str, DivisionRate]:
    """
    Merge app config overrides into the default table.

    Overrides look like {"packing": {"base": 3100000, "bonus_per_unit": 1100}};
    divisions or fields left out keep their defaults.
    """
    config = dict(DEFAULT_SALARY_CONFIG)
    for division, values in (overrides or {}).items():
        if division not in DIVISIONS:
            raise ValidationError(f"Unknown division in salary config: {division}")
        current = config[division]
        try:
            config[division] = DivisionRate(
                base=int(values.get('base', current.base)),
                bonus_per_unit=int(values.get('bonus_per_unit', current.bonus_per_unit)),
            )
        except (TypeError, ValueError, AttributeError):
            raise ValidationError(f"Invalid salary config for division {division}")
    return config
