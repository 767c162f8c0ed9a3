"""Rollout definition codec tests."""

from pathlib import Path

import pytest
from split_admin.codec import DefinitionSpec, decode_definition, encode_definition, load_definition_spec
from split_admin.definition import SplitDefinition
from split_admin.exceptions import DefinitionValidationError, SplitAdminErrorCodes
from split_admin.matchers import BooleanMatcher, SetMatcher, StringMatcher


def make_spec(**overrides) -> dict:
    spec = {
        "default_treatment": "off",
        "traffic_allocation": 100,
        "treatment": [
            {"name": "on", "configurations": '{"color": "blue"}', "description": "enabled"},
            {"name": "off"},
        ],
        "default_rule": [{"treatment": "on", "size": 60}, {"treatment": "off", "size": 40}],
        "rule": [
            {
                "bucket": [{"treatment": "on", "size": 100}],
                "condition": [
                    {"matcher": [{"type": "IN_SEGMENT", "string": "beta_users"}]}
                ],
            },
            {
                "bucket": [{"treatment": "on", "size": 50}, {"treatment": "off", "size": 50}],
                "condition": [
                    {
                        "matcher": [
                            {"type": "EQUAL_SET", "attribute": "plan", "strings": ["pro"]},
                            {"type": "EQUAL_TO_BOOLEAN", "attribute": "beta", "bool": True},
                        ]
                    }
                ],
            },
        ],
    }
    spec.update(overrides)
    return spec


def test_encode_builds_request() -> None:
    """A valid spec becomes a complete request body."""
    request = encode_definition(make_spec(), comment="rollout")
    body = request.to_dict()
    assert body["defaultTreatment"] == "off"
    assert body["trafficAllocation"] == 100
    assert body["comment"] == "rollout"
    assert body["defaultRule"] == [{"treatment": "on", "size": 60}, {"treatment": "off", "size": 40}]
    assert body["treatments"][1] == {"name": "off"}
    assert body["rules"][0]["condition"] == {
        "combiner": "AND",
        "matchers": [{"type": "IN_SEGMENT", "string": "beta_users"}],
    }
    assert "killed" not in body


def test_rule_order_preserved() -> None:
    """Rules keep their declared order."""
    request = encode_definition(make_spec())
    first, second = request.rules
    assert isinstance(first.condition.matchers[0], StringMatcher)
    assert isinstance(second.condition.matchers[0], SetMatcher)
    assert isinstance(second.condition.matchers[1], BooleanMatcher)


def test_default_rule_must_sum_to_100() -> None:
    """A default rule of 60+30 fails before anything is sent."""
    spec = make_spec(default_rule=[{"treatment": "on", "size": 60}, {"treatment": "off", "size": 30}])
    with pytest.raises(DefinitionValidationError) as exc_info:
        encode_definition(spec)
    assert exc_info.value.code == SplitAdminErrorCodes.DEFAULT_RULE_SIZE_MISMATCH


def test_rule_buckets_must_sum_to_100() -> None:
    """Each targeting rule's buckets must also total 100."""
    spec = make_spec()
    spec["rule"][1]["bucket"] = [{"treatment": "on", "size": 50}, {"treatment": "off", "size": 40}]
    with pytest.raises(DefinitionValidationError) as exc_info:
        encode_definition(spec)
    assert exc_info.value.code == SplitAdminErrorCodes.RULE_SIZE_MISMATCH
    assert "rule 1" in str(exc_info.value)


def test_invalid_configurations() -> None:
    """Treatment configurations must be JSON."""
    spec = make_spec()
    spec["treatment"][0]["configurations"] = "{not json"
    with pytest.raises(DefinitionValidationError) as exc_info:
        encode_definition(spec)
    assert exc_info.value.code == SplitAdminErrorCodes.INVALID_CONFIGURATIONS


def test_duplicate_treatment() -> None:
    """Treatment names are unique."""
    spec = make_spec(treatment=[{"name": "on"}, {"name": "off"}, {"name": "on"}])
    with pytest.raises(DefinitionValidationError) as exc_info:
        encode_definition(spec)
    assert exc_info.value.code == SplitAdminErrorCodes.DUPLICATE_TREATMENT


def test_unknown_default_treatment() -> None:
    """The default treatment must be declared."""
    with pytest.raises(DefinitionValidationError) as exc_info:
        encode_definition(make_spec(default_treatment="maybe"))
    assert exc_info.value.code == SplitAdminErrorCodes.UNKNOWN_TREATMENT


def test_unknown_bucket_treatment() -> None:
    """Buckets may only reference declared treatments."""
    spec = make_spec(default_rule=[{"treatment": "maybe", "size": 100}])
    with pytest.raises(DefinitionValidationError) as exc_info:
        encode_definition(spec)
    assert exc_info.value.code == SplitAdminErrorCodes.UNKNOWN_TREATMENT


def test_matcher_field_isolation() -> None:
    """A matcher carrying a field its type does not use is rejected."""
    spec = make_spec()
    spec["rule"][0]["condition"][0]["matcher"][0]["number"] = 5
    with pytest.raises(DefinitionValidationError) as exc_info:
        encode_definition(spec)
    assert exc_info.value.code == SplitAdminErrorCodes.MATCHER_FIELD_MISMATCH


def test_two_conditions_in_a_rule_rejected() -> None:
    """A rule holds a single condition block."""
    spec = make_spec()
    spec["rule"][0]["condition"].append({"matcher": [{"type": "ALL_KEYS"}]})
    with pytest.raises(DefinitionValidationError) as exc_info:
        encode_definition(spec)
    assert exc_info.value.code == SplitAdminErrorCodes.VALIDATION


def test_unknown_key_rejected() -> None:
    """Misspelled keys in the flat spec are errors."""
    with pytest.raises(DefinitionValidationError):
        encode_definition(make_spec(treatments=[]))


def test_round_trip() -> None:
    """Decoding an encoded spec gives back the same spec."""
    spec = DefinitionSpec.model_validate(make_spec())
    decoded = decode_definition(encode_definition(spec))
    assert decoded.model_dump() == spec.model_dump()


def test_round_trip_keeps_absent_fields_absent() -> None:
    """Unset optional fields stay unset after a round trip."""
    spec = DefinitionSpec.model_validate(make_spec(rule=[]))
    decoded = decode_definition(encode_definition(spec))
    assert decoded.killed is None
    assert decoded.treatment[1].configurations is None
    assert decoded.treatment[1].keys is None
    assert decoded.rule == []


def test_decode_api_definition() -> None:
    """A definition read from the API flattens into a spec."""
    definition = SplitDefinition.from_dict(
        {
            "id": "def-1",
            "name": "checkout",
            "killed": False,
            "trafficAllocation": 100,
            "defaultTreatment": "off",
            "creationTIme": 1700000000000,
            "treatments": [{"name": "on", "keys": ["alice"]}, {"name": "off"}],
            "defaultRule": [{"treatment": "off", "size": 100}],
            "rules": [
                {
                    "condition": {
                        "combiner": "AND",
                        "matchers": [
                            {
                                "type": "BETWEEN_NUMBER",
                                "attribute": "age",
                                "between": {"from": 18, "to": 30},
                            }
                        ],
                    },
                    "buckets": [{"treatment": "on", "size": 100}],
                }
            ],
        }
    )
    assert definition.creation_time == 1700000000000
    spec = decode_definition(definition)
    assert spec.killed is False
    assert spec.treatment[0].keys == ["alice"]
    matcher = spec.rule[0].condition[0].matcher[0]
    assert matcher.type == "BETWEEN_NUMBER"
    assert (matcher.between.start, matcher.between.end) == (18, 30)
    assert matcher.string is None


def test_load_definition_spec(tmp_path: Path) -> None:
    """A flat definition can be read from YAML."""
    spec_file = tmp_path / "flag.yaml"
    spec_file.write_text(
        "default_treatment: 'off'\n"
        "treatment:\n"
        "  - name: 'on'\n"
        "  - name: 'off'\n"
        "default_rule:\n"
        "  - treatment: 'off'\n"
        "    size: 100\n"
        "rule:\n"
        "  - bucket:\n"
        "      - treatment: 'on'\n"
        "        size: 100\n"
        "    condition:\n"
        "      - matcher:\n"
        "          - type: BETWEEN_DATE\n"
        "            between: {from: 1, to: 2}\n"
    )
    spec = load_definition_spec(spec_file)
    assert spec.rule[0].condition[0].matcher[0].between.end == 2
    encode_definition(spec)
