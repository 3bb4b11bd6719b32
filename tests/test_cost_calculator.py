import pytest

from contract_wizard.wizard.cost_calculator import AllocationCostCalculator, parse_number


@pytest.fixture
def calc():
    return AllocationCostCalculator()


@pytest.mark.parametrize("quantity,total", [(30, 4500), (7, 100), (3, 10.5)])
def test_total_cost_edit_derives_cost_per_unit(calc, quantity, total):
    a = {"total_quantity": quantity, "total_cost": 0, "cost_per_unit": 0}
    calc.apply_cost_edit(a, "total_cost", total)
    assert a["total_cost"] == total
    assert a["cost_per_unit"] == pytest.approx(total / quantity)


def test_cost_per_unit_edit_derives_total(calc):
    a = {"total_quantity": 40, "total_cost": 0, "cost_per_unit": 0}
    calc.apply_cost_edit(a, "cost_per_unit", 1350)
    assert a["total_cost"] == 54000


@pytest.mark.parametrize("quantity", [0, None])
def test_zero_or_missing_quantity_leaves_derived_field(calc, quantity):
    a = {"total_quantity": quantity, "total_cost": 0, "cost_per_unit": 12}
    calc.apply_cost_edit(a, "total_cost", 500)
    assert a["total_cost"] == 500
    assert a["cost_per_unit"] == 12

    calc.apply_cost_edit(a, "cost_per_unit", 20)
    assert a["total_cost"] == 500


def test_round_trip_keeps_total(calc):
    a = {"total_quantity": 3, "total_cost": 0, "cost_per_unit": 0}
    calc.apply_cost_edit(a, "total_cost", 100)
    calc.apply_cost_edit(a, "cost_per_unit", a["cost_per_unit"])
    assert a["total_cost"] == pytest.approx(100)


def test_quantity_change_does_not_rederive(calc):
    a = {"total_quantity": 10, "total_cost": 0, "cost_per_unit": 0}
    calc.apply_cost_edit(a, "total_cost", 1000)
    a["total_quantity"] = 20
    assert a["cost_per_unit"] == 100


def test_rejects_non_cost_field(calc):
    with pytest.raises(ValueError):
        calc.apply_cost_edit({"total_quantity": 1}, "total_quantity", 5)


def test_display_cost_per_unit(calc):
    assert calc.display_cost_per_unit({"cost_per_unit": 45, "total_cost": 0, "total_quantity": 0}) == 45
    assert calc.display_cost_per_unit({"total_cost": 900, "total_quantity": 30}) == 30
    assert calc.display_cost_per_unit({"total_cost": 900, "total_quantity": 0}) == 0

    a = {"total_cost": 900, "total_quantity": 30, "cost_per_unit": 0}
    calc.display_cost_per_unit(a)
    assert a["cost_per_unit"] == 0


def test_parse_number_falls_back_to_zero():
    assert parse_number("12.5") == 12.5
    assert parse_number(" 7 ") == 7
    assert parse_number("abc") == 0
    assert parse_number("") == 0
    assert parse_number(None) == 0
