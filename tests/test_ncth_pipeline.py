import pytest

from conftest import make_ammo, make_item, make_weapon
from helpers.ncth import assemble, build_ncth_rows, index_by_id, sort_rows, validate
from helpers.records import WeaponType


def test_index_by_id_last_duplicate_wins():
    first = make_ammo(1, "old")
    second = make_ammo(1, "new")
    index = index_by_id([first, make_ammo(2, "5.56"), second])
    assert index[1] is second
    assert set(index) == {1, 2}


def test_assemble_joins_on_index_and_caliber():
    weapon = make_weapon(4, caliber=2)
    item = make_item(4)
    ammo = make_ammo(2)
    assert assemble(weapon, {4: item}, {2: ammo}) == (weapon, item, ammo)


def test_assemble_drops_weapon_without_caliber():
    assert assemble(make_weapon(caliber=None), {1: make_item()}, {1: make_ammo()}) is None


def test_assemble_drops_missing_item_or_ammo():
    weapon = make_weapon(1, caliber=3)
    assert assemble(weapon, {}, {3: make_ammo(3)}) is None
    assert assemble(weapon, {1: make_item()}, {1: make_ammo()}) is None


def test_assemble_rechecks_join_keys():
    # index maps that disagree with the records they hold
    weapon = make_weapon(1, caliber=1)
    assert assemble(weapon, {1: make_item(2)}, {1: make_ammo()}) is None
    assert assemble(weapon, {1: make_item()}, {1: make_ammo(5)}) is None


@pytest.mark.parametrize(
    "attr",
    [
        "n_accuracy",
        "impact",
        "range",
        "handling",
        "aiming_levels",
        "attack_volume",
        "ready_time",
        "shots_per_4_turns",
        "mag_size",
        "aps_to_reload",
        "weapon_type",
    ],
)
def test_validate_requires_weapon_fields(attr):
    weapon = make_weapon(**{attr: None})
    assert validate(weapon, make_item(), make_ammo()) is None


@pytest.mark.parametrize("attr", ["weight", "coolness"])
def test_validate_requires_item_fields(attr):
    assert validate(make_weapon(), make_item(**{attr: None}), make_ammo()) is None


@pytest.mark.parametrize("code", [0, 9, 42])
def test_validate_rejects_unknown_weapon_type(code):
    assert validate(make_weapon(weapon_type=code), make_item(), make_ammo()) is None


def test_validate_rejects_zero_fire_rate():
    assert validate(make_weapon(shots_per_4_turns=0.0), make_item(), make_ammo()) is None


@pytest.mark.parametrize("rate", [0.002, -1.0, float("nan"), float("inf")])
def test_fire_rate_rounding_to_zero_is_dropped(rate):
    weapon = make_weapon(shots_per_4_turns=rate)
    assert validate(weapon, make_item(), make_ammo()) is None
    assert build_ncth_rows([weapon], [make_item()], [make_ammo()]) == []


def test_smallest_usable_fire_rate():
    # 180 * 0.003 rounds to a denominator of 1
    (row,) = build_ncth_rows([make_weapon(shots_per_4_turns=0.003)], [make_item()], [make_ammo()])
    assert row.aps_to_attack == 64000


def test_validate_passes_complete_triple():
    valid = validate(make_weapon(weapon_type=6), make_item(), make_ammo())
    assert valid is not None
    assert valid.weapon_type is WeaponType.ASSAULT_RIFLE


def _sample_tables():
    weapons = [
        make_weapon(1, weapon_type=4),
        make_weapon(2, weapon_type=1),
        make_weapon(3, weapon_type=4),
        make_weapon(4, weapon_type=1),
        make_weapon(5, weapon_type=8),
        make_weapon(6, weapon_type=2),
        make_weapon(7, caliber=None),  # knife
        make_weapon(8, caliber=99),  # caliber not in the ammo table
        make_weapon(9),  # no item row
        make_weapon(10, impact=None),  # placeholder slot
    ]
    items = [
        make_item(1, "Mini-14"),
        make_item(2, "Glock 18"),
        make_item(3, "M14"),
        make_item(4, "Beretta 92F"),
        make_item(5, "SPAS-15"),
        make_item(6, "MP5K"),
        make_item(7, "Combat Knife"),
        make_item(8, "Mystery Gun"),
        make_item(10, "Nothing"),
    ]
    ammo = [make_ammo(1, "9x19mm")]
    return weapons, items, ammo


def test_build_ncth_rows_filters_and_orders():
    rows = build_ncth_rows(*_sample_tables())
    assert [(r.weapon_type.label, r.name) for r in rows] == [
        ("Pistol", "Beretta 92F"),
        ("Pistol", "Glock 18"),
        ("MP", "MP5K"),
        ("Rifle", "M14"),
        ("Rifle", "Mini-14"),
        ("Shotgun", "SPAS-15"),
    ]


def test_build_ncth_rows_is_deterministic():
    assert build_ncth_rows(*_sample_tables()) == build_ncth_rows(*_sample_tables())


def test_sort_rows_is_case_sensitive():
    weapons = [make_weapon(1), make_weapon(2)]
    items = [make_item(1, "glock"), make_item(2, "Walther")]
    rows = sort_rows(build_ncth_rows(weapons, items, [make_ammo()]))
    assert [r.name for r in rows] == ["Walther", "glock"]
