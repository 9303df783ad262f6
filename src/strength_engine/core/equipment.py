"""
Bar and plate loading.

Given a target weight and the plates on hand, work out what goes on each
side of the bar:

  per_side = (target − bar_weight) / 2

Plates are taken greedily, heaviest first, never using more of a size than
the inventory holds per side.  Whatever cannot be loaded is rounded to the
nearest 0.25; the load is exact when nothing is left over.

The default inventories are a typical commercial gym in each unit system.
A user file ~/.strength-engine/plates.yaml overrides them per unit:

    lbs:
      bar_weight: 35
      plates: {45: 2, 25: 2, 10: 2, 5: 2, 2.5: 2}
"""

from __future__ import annotations

import logging
import warnings
from pathlib import Path

from .config import (
    BAR_WEIGHT,
    DEFAULT_PLATES,
    PLATE_EXACT_TOLERANCE,
    PLATE_REMAINDER_STEP,
    UNIT_SYSTEMS,
)
from .engine.config_loader import merge_overrides, read_yaml_mapping, user_config_dir
from .metrics import round_to_increment
from .models import PlateInventory, PlateLoad

logger = logging.getLogger(__name__)


def default_inventory(units: str = "lbs") -> PlateInventory:
    """Standard bar and plate set for ``units``."""
    return PlateInventory(bar_weight=BAR_WEIGHT[units], plates=dict(DEFAULT_PLATES[units]))


def _inventory_from_dict(d: dict, units: str) -> PlateInventory:
    bar_weight = float(d.get("bar_weight", BAR_WEIGHT[units]))
    if bar_weight <= 0:
        raise ValueError(f"bar_weight must be positive, got {bar_weight}")
    plates: dict[float, int] = {}
    for size, count in (d.get("plates") or {}).items():
        size, count = float(size), int(count)
        if size <= 0 or count < 0:
            raise ValueError(f"invalid plate entry {size}: {count}")
        if count:
            plates[size] = count
    return PlateInventory(bar_weight=bar_weight, plates=plates)


def load_plate_inventory(units: str = "lbs", path: Path | None = None) -> PlateInventory:
    """
    Plate inventory for ``units``, with the user's plates.yaml merged over the defaults.

    Args:
        units: "lbs" or "kg"
        path: Override file (default: ~/.strength-engine/plates.yaml)

    An override that fails validation is ignored with a warning.
    """
    if units not in UNIT_SYSTEMS:
        raise ValueError(f"Invalid units: {units!r}. Must be 'lbs' or 'kg'.")

    base = {"bar_weight": BAR_WEIGHT[units], "plates": dict(DEFAULT_PLATES[units])}
    path = path if path is not None else user_config_dir() / "plates.yaml"
    if not path.is_file():
        return default_inventory(units)

    override = read_yaml_mapping(path).get(units)
    if not isinstance(override, dict):
        return default_inventory(units)
    try:
        return _inventory_from_dict(merge_overrides(base, override), units)
    except (TypeError, ValueError) as exc:
        warnings.warn(f"strength-engine: ignoring {path} [{units}] ({exc})", stacklevel=2)
        return default_inventory(units)


def calculate_plates(target: float, inventory: PlateInventory) -> PlateLoad:
    """
    Greedy per-side plate breakdown for ``target``.

    A target at or below the bar loads no plates; ``total`` is then the bar
    alone.
    """
    bar = inventory.bar_weight
    per_side = (target - bar) / 2
    if per_side <= 0:
        return PlateLoad(
            target=target,
            bar_weight=bar,
            plates=[],
            per_side=0.0,
            total=bar,
            exact=abs(target - bar) < PLATE_EXACT_TOLERANCE,
        )

    used: list[float] = []
    remaining = per_side
    for size in sorted(inventory.plates, reverse=True):
        available = inventory.plates[size]
        count = 0
        while remaining >= size and count < available:
            used.append(size)
            remaining -= size
            count += 1

    remaining = round_to_increment(remaining, PLATE_REMAINDER_STEP)
    load = PlateLoad(
        target=target,
        bar_weight=bar,
        plates=used,
        per_side=per_side,
        total=bar + 2 * sum(used),
        exact=remaining < PLATE_EXACT_TOLERANCE,
    )
    if not load.exact:
        logger.debug("Cannot load %g exactly; closest is %g", target, load.total)
    return load
