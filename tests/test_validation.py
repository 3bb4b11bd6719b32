import pytest

from contract_wizard.wizard.validation import (
    FormValidationError,
    allocation_warnings,
    contract_warnings,
    draft_warnings,
    validate_allocations,
    validate_contract_basics,
    validate_submission,
)


def _basics(**overrides):
    data = {
        "supplier_id": "sup-1",
        "contract_number": "HI-SGP-F1-2025",
        "contract_name": "F1 Singapore 2025",
        "valid_from": "2025-09-01",
        "valid_to": "2025-10-15",
    }
    data.update(overrides)
    return data


def test_contract_basics_pass():
    validate_contract_basics(_basics())


def test_contract_basics_missing_fields():
    with pytest.raises(FormValidationError) as exc:
        validate_contract_basics({"contract_name": "  "})
    err = exc.value.field_errors
    assert set(err) == {"supplier_id", "contract_number", "contract_name", "valid_from", "valid_to"}
    assert err["supplier_id"] == "Supplier is required"


def test_contract_basics_bad_date():
    with pytest.raises(FormValidationError) as exc:
        validate_contract_basics(_basics(valid_to="15/10/2025"))
    assert "valid_to" in exc.value.field_errors


def test_allocations_required():
    with pytest.raises(FormValidationError) as exc:
        validate_allocations([])
    assert exc.value.field_errors == {"allocations": "Please add at least one allocation"}
    validate_allocations([{"id": "a"}])


def test_submission_requires_contract_identity():
    with pytest.raises(FormValidationError) as exc:
        validate_submission({"contract": None})
    assert exc.value.message == "Missing required contract fields"
    validate_submission({"contract": _basics(valid_from="", valid_to="")})


def test_contract_dates_reversed_is_only_a_warning():
    # not blocking
    validate_contract_basics(_basics(valid_from="2025-10-15", valid_to="2025-09-01"))
    assert contract_warnings(_basics(valid_from="2025-10-15", valid_to="2025-09-01")) == [
        "Contract valid_to is before valid_from"
    ]
    assert contract_warnings(_basics()) == []
    assert contract_warnings(None) == []


def test_allocation_outside_contract_bounds():
    contract = _basics()
    allocation = {"allocation_name": "Deluxe", "valid_from": "2025-08-30", "valid_to": "2025-10-20"}
    warnings = allocation_warnings(allocation, contract)
    assert "Allocation 'Deluxe' starts before the contract is valid" in warnings
    assert "Allocation 'Deluxe' ends after the contract expires" in warnings


def test_draft_warnings_include_release_advisories():
    draft = {
        "contract": _basics(),
        "allocations": [
            {
                "id": "a1",
                "allocation_name": "Deluxe",
                "total_quantity": 10,
                "valid_from": "2025-09-10",
                "valid_to": "2025-09-20",
                "releases": [
                    {"id": "r1", "release_date": "2025-08-01", "release_type": "quantity", "release_quantity": 5}
                ],
            }
        ],
    }
    warnings = draft_warnings(draft)
    assert len(warnings) == 1
    assert warnings[0].startswith("Deluxe: No 'remaining' release")
