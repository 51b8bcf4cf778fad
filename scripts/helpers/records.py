from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional


class WeaponType(IntEnum):
    """Weapon category; the numeric order is also the output sort order."""

    PISTOL = 1
    MACHINE_PISTOL = 2
    SMG = 3
    RIFLE = 4
    SNIPER_RIFLE = 5
    ASSAULT_RIFLE = 6
    LMG = 7
    SHOTGUN = 8

    @classmethod
    def from_code(cls, code: int) -> "WeaponType":
        try:
            return cls(code)
        except ValueError:
            raise ValueError(f"unknown weapon type code {code}") from None

    @property
    def label(self) -> str:
        return TYPE_LABELS[self]


TYPE_LABELS = {
    WeaponType.PISTOL: "Pistol",
    WeaponType.MACHINE_PISTOL: "MP",
    WeaponType.SMG: "SMG",
    WeaponType.RIFLE: "Rifle",
    WeaponType.SNIPER_RIFLE: "SR",
    WeaponType.ASSAULT_RIFLE: "AR",
    WeaponType.LMG: "LMG",
    WeaponType.SHOTGUN: "Shotgun",
}


@dataclass
class ItemRecord:
    index: int
    name: str
    long_name: str
    description: str
    item_class: int
    attachment_class: Optional[int] = None
    available_attachment_points: Optional[List[int]] = None
    weight: Optional[float] = None
    size: Optional[int] = None
    price: Optional[int] = None
    coolness: Optional[int] = None
    reliability: Optional[int] = None
    repair_ease: Optional[int] = None
    damageable: Optional[int] = None
    repairable: Optional[int] = None
    water_damages: Optional[int] = None
    metal: Optional[int] = None
    sinks: Optional[int] = None
    show_status: Optional[int] = None
    br_new_inventory: Optional[int] = None
    br_used_inventory: Optional[int] = None
    default_attachments: Optional[List[int]] = None
    damage_chance: Optional[int] = None
    dirt_increase_factor: Optional[float] = None
    not_buyable: Optional[int] = None
    two_handed: Optional[int] = None


@dataclass
class AmmoRecord:
    index: int
    caliber_name: str


@dataclass
class WeaponRecord:
    index: int
    name: str
    b_accuracy: int
    burst_penalty: int
    auto_penalty: int
    max_dist_for_messy_death: int
    weapon_class: Optional[int] = None
    weapon_type: Optional[int] = None
    caliber: Optional[int] = None
    ready_time: Optional[int] = None
    shots_per_4_turns: Optional[float] = None
    burst_ap: Optional[int] = None
    bullet_speed: Optional[int] = None
    impact: Optional[int] = None
    deadliness: Optional[int] = None
    mag_size: Optional[int] = None
    range: Optional[int] = None
    reload_delay: Optional[int] = None
    attack_volume: Optional[int] = None
    hit_volume: Optional[int] = None
    sound: Optional[int] = None
    reload_sound: Optional[int] = None
    lock_n_load_sound: Optional[int] = None
    silenced_sound: Optional[int] = None
    aps_to_reload: Optional[int] = None
    aps_to_reload_manually: Optional[int] = None
    swap_clips: Optional[int] = None
    manual_reload_sound: Optional[int] = None
    n_accuracy: Optional[int] = None
    aiming_levels: Optional[int] = None
    handling: Optional[int] = None
    autofire_shots_per_five_ap: Optional[int] = None
    shots_per_burst: Optional[int] = None
    recoil_x: Optional[float] = None
    recoil_y: Optional[float] = None
    overheating_jam_threshold: Optional[int] = None
    overheating_damage_threshold: Optional[int] = None
    overheating_single_shot_temperature: Optional[int] = None
    no_semi_auto: Optional[int] = None


# (csv header, NcthRow attribute) in output order
OUTPUT_COLUMNS = [
    ("Index", "index"),
    ("Name", "name"),
    ("Long Name", "long_name"),
    ("Type", "weapon_type"),
    ("Ammo", "caliber"),
    ("Mag", "mag_size"),
    ("Rng", "range"),
    ("Acc", "accuracy"),
    ("Aim", "aiming_levels"),
    ("Dmg", "damage"),
    ("Handling", "handling"),
    ("rdy", "aps_to_ready"),
    ("att", "aps_to_attack"),
    ("bur", "aps_to_burst"),
    ("aut", "aps_to_auto"),
    ("lod", "aps_to_reload"),
    ("rrd", "aps_to_reload_manually"),
    ("Hands", "hands"),
    ("Loud", "loudness"),
    ("Rely", "reliability"),
    ("Rep", "repair_ease"),
    ("Burst shots", "shots_per_burst"),
    ("Autofire per 5 AP", "autofire_shots_per_five_ap"),
    ("Recoil X", "recoil_x"),
    ("Recoil Y", "recoil_y"),
    ("Recoil Total", "recoil_display"),
    ("Weight", "weight"),
    ("Coolness", "coolness"),
    ("Buyable", "buyable"),
    ("Price", "price"),
]


@dataclass(frozen=True)
class NcthRow:
    """One exported weapon line (new chance-to-hit stats)."""

    index: int
    name: str
    long_name: str
    weapon_type: WeaponType
    caliber: str
    mag_size: int
    range: float
    accuracy: int
    aiming_levels: int
    damage: int
    handling: int
    aps_to_ready: int
    aps_to_attack: Optional[int]
    aps_to_burst: Optional[int]
    aps_to_auto: Optional[int]
    aps_to_reload: int
    aps_to_reload_manually: Optional[int]
    hands: int
    loudness: int
    reliability: int
    repair_ease: int
    shots_per_burst: Optional[int]
    autofire_shots_per_five_ap: Optional[int]
    recoil_x: Optional[float]
    recoil_y: Optional[float]
    recoil_display: Optional[float]
    weight: float
    coolness: int
    buyable: bool
    price: Optional[int] = field(default=None)
