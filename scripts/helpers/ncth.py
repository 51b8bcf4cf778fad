"""
Join the weapon, item and ammo tables and derive the NCTH weapon stats.

A weapon is exported only when its item row and caliber row both exist and
every field the AP formulas need is present; anything else (placeholder
slots, melee weapons, unused indices) is dropped without comment.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple, TypeVar

from helpers.records import AmmoRecord, ItemRecord, NcthRow, WeaponRecord, WeaponType

# 80 AP per turn, 8 turns reference window, AP values scaled by 100
AP_PER_TURN = 80
BASIC_ATTACK_NUMERATOR = 8 * AP_PER_TURN * 100
BASIC_ATTACK_SCALE = 100 + AP_PER_TURN
AUTOFIRE_NUMERATOR = 20 * 3 * AP_PER_TURN

R = TypeVar("R")


def index_by_id(records: Iterable[R]) -> Dict[int, R]:
    """Key records on their index; a later duplicate replaces an earlier one."""
    return {record.index: record for record in records}


def assemble(
    weapon: WeaponRecord,
    items: Dict[int, ItemRecord],
    ammo_types: Dict[int, AmmoRecord],
) -> Optional[Tuple[WeaponRecord, ItemRecord, AmmoRecord]]:
    if weapon.caliber is None:
        return None
    item = items.get(weapon.index)
    ammo = ammo_types.get(weapon.caliber)
    if item is None or ammo is None:
        return None
    if weapon.index != item.index or weapon.caliber != ammo.index:
        return None
    return weapon, item, ammo


@dataclass(frozen=True)
class ValidatedWeapon:
    """A joined weapon/item/ammo triple with every formula input present."""

    weapon: WeaponRecord
    item: ItemRecord
    ammo: AmmoRecord
    weapon_type: WeaponType
    accuracy: int
    damage: int
    range: int
    handling: int
    aiming_levels: int
    loudness: int
    aps_to_ready: int
    shots_per_4_turns: float
    mag_size: int
    aps_to_reload: int
    weight: float
    coolness: int


WEAPON_REQUIRED = (
    ("accuracy", "n_accuracy"),
    ("damage", "impact"),
    ("range", "range"),
    ("handling", "handling"),
    ("aiming_levels", "aiming_levels"),
    ("loudness", "attack_volume"),
    ("aps_to_ready", "ready_time"),
    ("shots_per_4_turns", "shots_per_4_turns"),
    ("mag_size", "mag_size"),
    ("aps_to_reload", "aps_to_reload"),
)

ITEM_REQUIRED = (
    ("weight", "weight"),
    ("coolness", "coolness"),
)


def validate(
    weapon: WeaponRecord, item: ItemRecord, ammo: AmmoRecord
) -> Optional[ValidatedWeapon]:
    """Return the validated triple, or None if any required field is missing."""
    values = {}
    for name, attr in WEAPON_REQUIRED:
        value = getattr(weapon, attr)
        if value is None:
            return None
        values[name] = value
    for name, attr in ITEM_REQUIRED:
        value = getattr(item, attr)
        if value is None:
            return None
        values[name] = value
    # basic attack cost divides by the rounded fire rate
    rate = values["shots_per_4_turns"]
    if not math.isfinite(rate) or basic_attack_denominator(rate) < 1:
        return None
    if weapon.weapon_type is None:
        return None
    try:
        weapon_type = WeaponType.from_code(weapon.weapon_type)
    except ValueError:
        return None
    return ValidatedWeapon(weapon, item, ammo, weapon_type, **values)


def _flag(value: Optional[int]) -> bool:
    return value == 1


def _ceil_div(numerator: int, denominator: int) -> int:
    return (numerator + denominator - 1) // denominator


def basic_attack_denominator(shots_per_4_turns: float) -> int:
    return math.floor(BASIC_ATTACK_SCALE * shots_per_4_turns + 0.5)


def basic_attack_aps(shots_per_4_turns: float) -> int:
    bottom = basic_attack_denominator(shots_per_4_turns)
    return (BASIC_ATTACK_NUMERATOR + bottom // 2) // bottom


def burst_aps(
    basic_attack: int, shots_per_burst: Optional[int], burst_ap: Optional[int]
) -> Optional[int]:
    if shots_per_burst is None or burst_ap is None or shots_per_burst <= 0:
        return None
    calc = _ceil_div(burst_ap * 80, 100)
    half = _ceil_div(burst_ap, 2)
    return basic_attack + max(calc, half)


def auto_aps(basic_attack: int, autofire_shots_per_five_ap: Optional[int]) -> Optional[int]:
    if autofire_shots_per_five_ap is None or autofire_shots_per_five_ap <= 0:
        return None
    aps = _ceil_div(AUTOFIRE_NUMERATOR // autofire_shots_per_five_ap, 100)
    # no-op for aps >= 1; kept so the numbers match the game's own formula
    aps = max(aps, _ceil_div(aps, 2))
    return basic_attack + aps


def recoil_magnitude(recoil_x: Optional[float], recoil_y: Optional[float]) -> Optional[float]:
    if recoil_x is None or recoil_y is None:
        return None
    return math.floor(math.hypot(recoil_x, recoil_y) * 10.0 + 0.5) / 10.0


def build_row(valid: ValidatedWeapon) -> NcthRow:
    weapon, item, ammo = valid.weapon, valid.item, valid.ammo
    basic_attack = basic_attack_aps(valid.shots_per_4_turns)
    single_shot = not _flag(weapon.no_semi_auto)
    return NcthRow(
        index=weapon.index,
        name=item.name,
        long_name=item.long_name,
        weapon_type=valid.weapon_type,
        caliber=ammo.caliber_name,
        mag_size=valid.mag_size,
        range=valid.range / 10.0,
        accuracy=valid.accuracy,
        aiming_levels=valid.aiming_levels,
        damage=valid.damage,
        handling=valid.handling,
        aps_to_ready=valid.aps_to_ready,
        aps_to_attack=basic_attack if single_shot else None,
        aps_to_burst=burst_aps(basic_attack, weapon.shots_per_burst, weapon.burst_ap),
        aps_to_auto=auto_aps(basic_attack, weapon.autofire_shots_per_five_ap),
        aps_to_reload=valid.aps_to_reload,
        aps_to_reload_manually=weapon.aps_to_reload_manually,
        hands=2 if _flag(item.two_handed) else 1,
        loudness=valid.loudness,
        reliability=item.reliability if item.reliability is not None else 0,
        repair_ease=item.repair_ease if item.repair_ease is not None else 0,
        shots_per_burst=weapon.shots_per_burst,
        autofire_shots_per_five_ap=weapon.autofire_shots_per_five_ap,
        recoil_x=weapon.recoil_x,
        recoil_y=weapon.recoil_y,
        recoil_display=recoil_magnitude(weapon.recoil_x, weapon.recoil_y),
        weight=valid.weight,
        coolness=valid.coolness,
        buyable=not _flag(item.not_buyable),
        price=item.price,
    )


def sort_rows(rows: Iterable[NcthRow]) -> List[NcthRow]:
    """Group by weapon type in enum order, alphabetical by name inside a group."""
    return sorted(rows, key=lambda row: (row.weapon_type, row.name))


def build_ncth_rows(
    weapons: Iterable[WeaponRecord],
    items: Iterable[ItemRecord],
    ammo_types: Iterable[AmmoRecord],
) -> List[NcthRow]:
    item_index = index_by_id(items)
    ammo_index = index_by_id(ammo_types)
    rows: List[NcthRow] = []
    for weapon in index_by_id(weapons).values():
        joined = assemble(weapon, item_index, ammo_index)
        if joined is None:
            continue
        valid = validate(*joined)
        if valid is None:
            continue
        rows.append(build_row(valid))
    return sort_rows(rows)
