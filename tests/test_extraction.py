import math

import pytest

from health_report.pipelines.ldl import LDL_FIELD, extract_ldl
from health_report.services.extraction import FieldSpec, coerce_number, extract_value, first_present


@pytest.mark.parametrize("key", ["ldl", "ldl_c", "ldlCholesterol", "ldl_cholesterol", "LDL"])
@pytest.mark.parametrize("section", ["biomarkers", "clinical", None])
def test_ldl_synonyms_found_in_every_section(key, section):
    record = {key: 142} if section is None else {section: {key: 142}}
    assert extract_ldl(record) == 142


def test_biomarkers_section_wins_over_top_level():
    assert extract_ldl({"ldl": 180, "biomarkers": {"LDL": 140}}) == 140


def test_implausible_value_falls_through_to_next_location():
    record = {"biomarkers": {"ldl": 9999}, "clinical": {"ldl_c": 120}}
    assert extract_ldl(record) == 120


def test_non_mapping_section_is_ignored():
    assert extract_ldl({"biomarkers": "n/a", "ldl": 120}) == 120


def test_numeric_strings_are_accepted():
    assert extract_ldl({"biomarkers": {"ldl": " 131.5 "}}) == 131.5


@pytest.mark.parametrize("value", [True, False, "", "high", "131 mg/dL", "nan", "inf", float("nan"), [130], {"v": 130}])
def test_unusable_values_are_absent(value):
    assert extract_ldl({"biomarkers": {"ldl": value}}) is None


@pytest.mark.parametrize("record", [None, [], "ldl=130", 42, {}])
def test_malformed_records_never_raise(record):
    assert extract_ldl(record) is None


def test_coerce_number():
    assert coerce_number(7) == 7.0
    assert coerce_number("6.1") == 6.1
    assert coerce_number(None) is None
    assert coerce_number(True) is None
    assert coerce_number(math.inf) is None


def test_plausibility_bounds_are_inclusive():
    spec = FieldSpec(name="x", keys=("x",), minimum=1, maximum=2)
    assert extract_value({"x": 1}, spec) == 1
    assert extract_value({"x": 2}, spec) == 2
    assert extract_value({"x": 2.01}, spec) is None


def test_explicit_sections_override_field_defaults():
    assert extract_value({"clinical": {"ldl": 120}}, LDL_FIELD, sections=("biomarkers",)) is None


def test_first_present_keeps_zero():
    assert first_present(None, 0.0, 0.2) == 0.0
    assert first_present(None, None) is None


def test_integer_too_large_for_float_is_absent():
    assert coerce_number(10**400) is None
    assert extract_ldl({"biomarkers": {"ldl": 10**400}, "ldl": 140}) == 140
