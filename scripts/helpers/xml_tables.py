"""
Decode the Weapons / Items / AmmoStrings XML tables into record objects.

Each table is a list element (WEAPONLIST, ITEMLIST, AMMOLIST) holding one
element per record (WEAPON, ITEM, AMMO); every field is a child element
named after the game's own field name.
Missing optional fields stay None, unknown child elements are ignored.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any, Callable, Dict, List, Sequence, Tuple, Type, TypeVar

from helpers.records import AmmoRecord, ItemRecord, WeaponRecord

WEAPONS_XML = "Weapons.xml"
ITEMS_XML = "Items.xml"
AMMO_XML = "AmmoStrings.xml"

T = TypeVar("T")


class TableError(Exception):
    """A source table could not be loaded; aborts the run."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"{path.name}: {message}")
        self.path = path
        self.message = message


class TableReadError(TableError):
    pass


class TableParseError(TableError):
    pass


def _uint(text: str) -> int:
    value = int(text)
    if value < 0:
        raise ValueError(f"expected unsigned integer, got {text!r}")
    return value


def _text(text: str) -> str:
    return text


# (xml tag, record attribute, converter, required, repeated)
FieldSpec = Tuple[str, str, Callable[[str], Any], bool, bool]


def _f(tag: str, attr: str, convert=_uint, required: bool = False, repeated: bool = False) -> FieldSpec:
    return (tag, attr, convert, required, repeated)


ITEM_FIELDS: List[FieldSpec] = [
    _f("uiIndex", "index", required=True),
    _f("szItemName", "name", _text, required=True),
    _f("szLongItemName", "long_name", _text, required=True),
    _f("szItemDesc", "description", _text, required=True),
    _f("usItemClass", "item_class", required=True),
    _f("AttachmentClass", "attachment_class"),
    _f("AvailableAttachmentPoint", "available_attachment_points", repeated=True),
    _f("ubWeight", "weight", float),
    _f("ItemSize", "size"),
    _f("usPrice", "price"),
    _f("ubCoolness", "coolness"),
    _f("bReliability", "reliability", int),
    _f("bRepairEase", "repair_ease", int),
    _f("Damageable", "damageable"),
    _f("Repairable", "repairable"),
    _f("WaterDamages", "water_damages"),
    _f("Metal", "metal"),
    _f("Sinks", "sinks"),
    _f("ShowStatus", "show_status"),
    _f("BR_NewInventory", "br_new_inventory"),
    _f("BR_UsedInventory", "br_used_inventory"),
    _f("DefaultAttachment", "default_attachments", repeated=True),
    _f("DamageChance", "damage_chance"),
    _f("DirtIncreaseFactor", "dirt_increase_factor", float),
    _f("NotBuyable", "not_buyable"),
    _f("TwoHanded", "two_handed"),
]

AMMO_FIELDS: List[FieldSpec] = [
    _f("uiIndex", "index", required=True),
    _f("AmmoCaliber", "caliber_name", _text, required=True),
]

WEAPON_FIELDS: List[FieldSpec] = [
    _f("uiIndex", "index", required=True),
    _f("szWeaponName", "name", _text, required=True),
    _f("bAccuracy", "b_accuracy", int, required=True),
    _f("ubBurstPenalty", "burst_penalty", required=True),
    _f("AutoPenalty", "auto_penalty", required=True),
    _f("MaxDistForMessyDeath", "max_dist_for_messy_death", required=True),
    _f("ubWeaponClass", "weapon_class"),
    _f("ubWeaponType", "weapon_type"),
    _f("ubCalibre", "caliber"),
    _f("ubReadyTime", "ready_time"),
    _f("ubShotsPer4Turns", "shots_per_4_turns", float),
    _f("bBurstAP", "burst_ap"),
    _f("ubBulletSpeed", "bullet_speed"),
    _f("ubImpact", "impact"),
    _f("ubDeadliness", "deadliness"),
    _f("ubMagSize", "mag_size"),
    _f("usRange", "range"),
    _f("usReloadDelay", "reload_delay"),
    _f("ubAttackVolume", "attack_volume"),
    _f("ubHitVolume", "hit_volume"),
    _f("sSound", "sound", int),
    _f("sReloadSound", "reload_sound", int),
    _f("sLocknLoadSound", "lock_n_load_sound", int),
    _f("SilencedSound", "silenced_sound"),
    _f("APsToReload", "aps_to_reload"),
    _f("APsToReloadManually", "aps_to_reload_manually"),
    _f("SwapClips", "swap_clips"),
    _f("ManualReloadSound", "manual_reload_sound"),
    _f("nAccuracy", "n_accuracy", int),
    _f("ubAimLevels", "aiming_levels"),
    _f("Handling", "handling"),
    _f("bAutofireShotsPerFiveAP", "autofire_shots_per_five_ap"),
    _f("ubShotsPerBurst", "shots_per_burst"),
    _f("bRecoilX", "recoil_x", float),
    _f("bRecoilY", "recoil_y", float),
    _f("usOverheatingJamThreshold", "overheating_jam_threshold"),
    _f("usOverheatingDamageThreshold", "overheating_damage_threshold"),
    _f("usOverheatingSingleShotTemperature", "overheating_single_shot_temperature"),
    _f("NoSemiAuto", "no_semi_auto"),
]


def parse_xml(path: Path) -> ET.Element:
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise TableReadError(path, f"cannot read table ({e.strerror or e})") from e
    # utf-8-sig drops a leading byte-order mark if the editor left one
    text = raw.decode("utf-8-sig", errors="replace")
    try:
        return ET.fromstring(text)
    except ET.ParseError as e:
        raise TableParseError(path, f"malformed XML ({e})") from e


def decode_record(
    path: Path,
    node: ET.Element,
    position: int,
    fields: Sequence[FieldSpec],
    record_type: Type[T],
) -> T:
    children: Dict[str, List[str]] = {}
    for child in node:
        children.setdefault(child.tag, []).append((child.text or "").strip())

    values: Dict[str, Any] = {}
    for tag, attr, convert, required, repeated in fields:
        texts = children.get(tag)
        if not texts:
            if required:
                raise TableParseError(
                    path, f"{node.tag} #{position}: missing required field {tag}"
                )
            continue
        if not repeated and len(texts) > 1:
            raise TableParseError(path, f"{node.tag} #{position}: duplicate field {tag}")
        try:
            if repeated:
                values[attr] = [convert(t) for t in texts if t]
            elif texts[0] or convert is _text:
                values[attr] = convert(texts[0])
            elif required:
                raise TableParseError(
                    path, f"{node.tag} #{position}: empty required field {tag}"
                )
        except ValueError as e:
            raise TableParseError(
                path, f"{node.tag} #{position}: bad value for {tag}: {e}"
            ) from e
    return record_type(**values)


def read_table(
    directory: Path,
    file_name: str,
    root_tag: str,
    element_tag: str,
    fields: Sequence[FieldSpec],
    record_type: Type[T],
) -> List[T]:
    path = Path(directory) / file_name
    root = parse_xml(path)
    if root.tag != root_tag:
        raise TableParseError(path, f"expected <{root_tag}> root element, found <{root.tag}>")
    return [
        decode_record(path, node, pos, fields, record_type)
        for pos, node in enumerate(root.findall(element_tag), start=1)
    ]


def load_weapons(directory: Path, file_name: str = WEAPONS_XML) -> List[WeaponRecord]:
    return read_table(directory, file_name, "WEAPONLIST", "WEAPON", WEAPON_FIELDS, WeaponRecord)


def load_items(directory: Path, file_name: str = ITEMS_XML) -> List[ItemRecord]:
    return read_table(directory, file_name, "ITEMLIST", "ITEM", ITEM_FIELDS, ItemRecord)


def load_ammo(directory: Path, file_name: str = AMMO_XML) -> List[AmmoRecord]:
    return read_table(directory, file_name, "AMMOLIST", "AMMO", AMMO_FIELDS, AmmoRecord)
