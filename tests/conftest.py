from pathlib import Path
from typing import Dict, List

import pytest

from helpers.records import AmmoRecord, ItemRecord, WeaponRecord


def _xml_table(root_tag: str, element_tag: str, records: List[Dict[str, object]]) -> str:
    lines = ['<?xml version="1.0" encoding="utf-8"?>', f"<{root_tag}>"]
    for record in records:
        lines.append(f"  <{element_tag}>")
        for tag, value in record.items():
            values = value if isinstance(value, list) else [value]
            for v in values:
                lines.append(f"    <{tag}>{v}</{tag}>")
        lines.append(f"  </{element_tag}>")
    lines.append(f"</{root_tag}>")
    return "\n".join(lines) + "\n"


def weapon_xml(index: int, name: str, **overrides) -> Dict[str, object]:
    record: Dict[str, object] = {
        "uiIndex": index,
        "szWeaponName": name,
        "bAccuracy": 0,
        "ubBurstPenalty": 0,
        "AutoPenalty": 0,
        "MaxDistForMessyDeath": 7,
        "ubWeaponClass": 1,
        "ubWeaponType": 1,
        "ubCalibre": 1,
        "ubReadyTime": 12,
        "ubShotsPer4Turns": 2.0,
        "ubImpact": 22,
        "ubMagSize": 15,
        "usRange": 130,
        "ubAttackVolume": 30,
        "APsToReload": 40,
        "nAccuracy": 5,
        "ubAimLevels": 4,
        "Handling": 8,
    }
    record.update(overrides)
    return {k: v for k, v in record.items() if v is not None}


def item_xml(index: int, name: str, **overrides) -> Dict[str, object]:
    record: Dict[str, object] = {
        "uiIndex": index,
        "szItemName": name,
        "szLongItemName": f"{name} long",
        "szItemDesc": f"{name} description",
        "usItemClass": 2,
        "ubWeight": 1.5,
        "usPrice": 300,
        "ubCoolness": 2,
        "bReliability": 1,
        "bRepairEase": -1,
    }
    record.update(overrides)
    return {k: v for k, v in record.items() if v is not None}


@pytest.fixture
def write_tables(tmp_path: Path):
    """Write Weapons.xml / Items.xml / AmmoStrings.xml into tmp_path/tables."""

    def _write(weapons, items, ammo) -> Path:
        directory = tmp_path / "tables"
        directory.mkdir(exist_ok=True)
        (directory / "Weapons.xml").write_text(
            _xml_table("WEAPONLIST", "WEAPON", weapons), encoding="utf-8"
        )
        (directory / "Items.xml").write_text(
            _xml_table("ITEMLIST", "ITEM", items), encoding="utf-8"
        )
        (directory / "AmmoStrings.xml").write_text(
            _xml_table("AMMOLIST", "AMMO", ammo), encoding="utf-8"
        )
        return directory

    return _write


def make_weapon(index: int = 1, **overrides) -> WeaponRecord:
    fields = dict(
        index=index,
        name=f"weapon {index}",
        b_accuracy=0,
        burst_penalty=0,
        auto_penalty=0,
        max_dist_for_messy_death=7,
        weapon_type=1,
        caliber=1,
        ready_time=12,
        shots_per_4_turns=2.0,
        impact=22,
        mag_size=15,
        range=130,
        attack_volume=30,
        aps_to_reload=40,
        n_accuracy=5,
        aiming_levels=4,
        handling=8,
    )
    fields.update(overrides)
    return WeaponRecord(**fields)


def make_item(index: int = 1, name: str = "Glock 17", **overrides) -> ItemRecord:
    fields = dict(
        index=index,
        name=name,
        long_name=f"{name} long",
        description="",
        item_class=2,
        weight=1.5,
        coolness=2,
        price=300,
    )
    fields.update(overrides)
    return ItemRecord(**fields)


def make_ammo(index: int = 1, caliber_name: str = "9x19mm") -> AmmoRecord:
    return AmmoRecord(index=index, caliber_name=caliber_name)
