import io

import pytest

from chitfund import validate
from chitfund.adapters import build_parameters
from chitfund.config import load_scheme_config, normalize_config
from chitfund.types import CommissionType, SchemeParameters


def test_grouped_yaml_is_flattened():
    cfg = load_scheme_config(io.StringIO(
        "scheme: { total_members: 12, monthly_contribution: 2500 }\n"
        "loans: { loan_utilization: 40 }\n"
        "total_members: 10\n"
    ))
    flat = normalize_config(cfg)
    # top-level keys win over grouped ones; aliases resolve
    assert flat["total_members"] == 10
    assert flat["monthly_contribution"] == 2500
    assert flat["loan_utilization_pct"] == 40


def test_json_config(tmp_path):
    f = tmp_path / "s.json"
    f.write_text('{"total_members": 3, "commission_type": "onetime"}', encoding="utf-8")
    p = build_parameters(load_scheme_config(f))
    assert p.total_members == 3
    assert p.commission_type is CommissionType.FIXED_TOTAL


def test_non_mapping_document_is_empty():
    assert load_scheme_config(io.StringIO("- 1\n- 2\n")) == {}


def test_build_parameters_defaults():
    assert build_parameters({}) == SchemeParameters()


def test_coercion():
    out = validate.validate_params_dict({"total_members": "20", "commission_rate": "2.5"})
    assert out == {"total_members": 20, "commission_rate": 2.5}


@pytest.mark.parametrize("data, needle", [
    ({"total_members": 2.5}, "total_members"),
    ({"monthly_contribution": "lots"}, "monthly_contribution"),
    ({"commission_type": "weekly"}, "commission_type"),
    ({"loan_utilization_pct": True}, "loan_utilization_pct"),
])
def test_bad_values_exit_with_key_name(data, needle):
    with pytest.raises(SystemExit) as ei:
        validate.validate_params_dict(data)
    assert needle in str(ei.value)


def test_strict_mode():
    with pytest.raises(SystemExit, match="total_members"):
        validate.validate_params_dict({"monthly_contribution": 1}, mode="strict")
    with pytest.raises(SystemExit, match="colour"):
        validate.validate_params_dict({"total_members": 1, "colour": "blue"}, mode="strict")
    # relaxed ignores unknown keys
    assert validate.validate_params_dict({"total_members": 1, "colour": "blue"}) == {"total_members": 1}


def test_business_values_are_not_checked():
    # negative amounts are passed through untouched
    p = build_parameters({"monthly_contribution": -5, "loan_utilization_pct": 150})
    assert p.monthly_contribution == -5
    assert p.loan_utilization_pct == 150


def test_validate_cli(tmp_path, capsys):
    good = tmp_path / "good.yaml"
    good.write_text("total_members: 5\n", encoding="utf-8")
    bad = tmp_path / "bad.yaml"
    bad.write_text("total_members: many\n", encoding="utf-8")
    assert validate._main([str(good)]) == 0
    assert validate._main([str(bad)]) == 1
    assert "total_members" in capsys.readouterr().err
    assert validate._main([str(tmp_path / "empty_dir_does_not_exist")]) == 1
