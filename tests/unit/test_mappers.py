"""Unit tests for row to record normalisation"""

import pytest
from finance_gateway.domain.exceptions import InvalidProfileDataError
from finance_gateway.domain.models import BenefitBalance, BenefitType, Frequency
from finance_gateway.infrastructure.database.mappers import parse_frequency, to_benefits


def test_to_benefits_reads_stored_json():
    balances = to_benefits([{"type": "VR", "value": 120.5}, {"type": "VT", "value": None}])

    assert balances == [BenefitBalance(BenefitType.VR, 120.5), BenefitBalance(BenefitType.VT, 0.0)]
    assert to_benefits(None) == []


@pytest.mark.parametrize(
    "entry",
    [{"type": "GIFT", "value": 10}, {"value": 10}, {"type": "VR", "value": "lots"}, "VR"],
)
def test_to_benefits_rejects_malformed_entries(entry):
    with pytest.raises(InvalidProfileDataError):
        to_benefits([{"type": "VR", "value": 50}, entry])


def test_parse_frequency_keeps_unknown_values():
    assert parse_frequency(" monthly ") == Frequency.MONTHLY
    assert parse_frequency("YEARLY") == "YEARLY"
