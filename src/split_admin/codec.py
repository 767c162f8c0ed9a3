"""Conversion between the flat definition surface and the nested wire model.

The flat surface mirrors how a definition is written in configuration: lists
of ``treatment``, ``default_rule`` and ``rule`` blocks, each rule holding
``bucket`` blocks and a single ``condition`` block of ``matcher`` blocks.
``encode_definition`` validates it and builds a SplitDefinitionRequest;
``decode_definition`` turns a definition read from the API back into the
flat form. Decoding an encoded spec yields the same spec.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .config import read_yaml
from .definition import (
    AND_COMBINER,
    Bucket,
    Condition,
    Rule,
    SplitDefinition,
    SplitDefinitionRequest,
    Treatment,
)
from .exceptions import DefinitionValidationError, SplitAdminErrorCodes
from .matchers import Between, Dependency, Matcher, build_matcher, matcher_values

BUCKET_SIZE_TOTAL = 100


class _Block(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class TreatmentBlock(_Block):
    name: str = Field(min_length=1)
    configurations: str | None = None
    description: str | None = None
    keys: list[str] | None = None
    segments: list[str] | None = None


class BucketBlock(_Block):
    treatment: str
    size: int = Field(ge=0, le=100)


class BetweenBlock(_Block):
    start: int = Field(alias="from")
    end: int = Field(alias="to")


class DependsBlock(_Block):
    split_name: str
    treatments: list[str] = Field(default_factory=list)


class MatcherBlock(_Block):
    """One matcher. Only the value field its ``type`` uses may be set."""

    type: str
    attribute: str | None = None
    negate: bool | None = None
    string: str | None = None
    strings: list[str] | None = None
    number: int | None = None
    date: int | None = None
    boolean: bool | None = Field(default=None, alias="bool")
    between: BetweenBlock | None = None
    depends: DependsBlock | None = None


class ConditionBlock(_Block):
    combiner: Literal["AND"] = AND_COMBINER
    matcher: list[MatcherBlock] = Field(min_length=1)


class RuleBlock(_Block):
    bucket: list[BucketBlock] = Field(min_length=1)
    # one condition per rule
    condition: list[ConditionBlock] = Field(min_length=1, max_length=1)


class DefinitionSpec(_Block):
    """Flat configuration of a split in one environment."""

    default_treatment: str
    treatment: list[TreatmentBlock] = Field(min_length=1)
    default_rule: list[BucketBlock] = Field(min_length=1)
    rule: list[RuleBlock] = Field(default_factory=list)
    traffic_allocation: int | None = Field(default=None, ge=0, le=100)
    killed: bool | None = None


def coerce_spec(spec: DefinitionSpec | Mapping[str, Any]) -> DefinitionSpec:
    if isinstance(spec, DefinitionSpec):
        return spec
    try:
        return DefinitionSpec.model_validate(dict(spec))
    except ValidationError as e:
        raise DefinitionValidationError(f"invalid definition: {e}") from e


def load_definition_spec(path: Path) -> DefinitionSpec:
    """Read a flat definition from a YAML file."""
    return coerce_spec(read_yaml(path))


def _check_configurations(block: TreatmentBlock) -> None:
    try:
        json.loads(block.configurations or "")
    except ValueError as e:
        raise DefinitionValidationError(
            f"treatment [{block.name}] configurations is not valid JSON: {e}",
            code=SplitAdminErrorCodes.INVALID_CONFIGURATIONS,
        ) from e


def _encode_buckets(blocks: list[BucketBlock], names: set[str], owner: str) -> list[Bucket]:
    buckets = []
    for block in blocks:
        if block.treatment not in names:
            raise DefinitionValidationError(
                f"{owner} references unknown treatment [{block.treatment}]",
                code=SplitAdminErrorCodes.UNKNOWN_TREATMENT,
            )
        buckets.append(Bucket(treatment=block.treatment, size=block.size))
    return buckets


def _encode_matcher(block: MatcherBlock) -> Matcher:
    values: dict[str, Any] = {
        "string": block.string,
        "strings": list(block.strings) if block.strings is not None else None,
        "number": block.number,
        "date": block.date,
        "bool": block.boolean,
        "between": Between(block.between.start, block.between.end) if block.between else None,
        "depends": (
            Dependency(block.depends.split_name, tuple(block.depends.treatments))
            if block.depends
            else None
        ),
    }
    return build_matcher(block.type, values, attribute=block.attribute, negate=block.negate)


def encode_definition(
    spec: DefinitionSpec | Mapping[str, Any],
    comment: str | None = None,
) -> SplitDefinitionRequest:
    """Validate a flat definition and build the request body.

    Raises DefinitionValidationError before anything is sent when the default
    rule or any rule's bucket sizes do not sum to 100, a configuration is not
    JSON, a treatment name is duplicated or unknown, or a matcher carries
    fields its type does not use.
    """
    spec = coerce_spec(spec)

    names: set[str] = set()
    treatments = []
    for block in spec.treatment:
        if block.name in names:
            raise DefinitionValidationError(
                f"treatment [{block.name}] is declared more than once",
                code=SplitAdminErrorCodes.DUPLICATE_TREATMENT,
            )
        names.add(block.name)
        if block.configurations is not None:
            _check_configurations(block)
        treatments.append(
            Treatment(
                name=block.name,
                configurations=block.configurations,
                description=block.description,
                keys=list(block.keys) if block.keys is not None else None,
                segments=list(block.segments) if block.segments is not None else None,
            )
        )

    if spec.default_treatment not in names:
        raise DefinitionValidationError(
            f"default treatment [{spec.default_treatment}] is not a declared treatment",
            code=SplitAdminErrorCodes.UNKNOWN_TREATMENT,
        )

    default_rule = _encode_buckets(spec.default_rule, names, "default rule")
    total = sum(b.size for b in default_rule)
    if total != BUCKET_SIZE_TOTAL:
        raise DefinitionValidationError(
            f"the sum of all default rule sizes must equal 100, got {total}",
            code=SplitAdminErrorCodes.DEFAULT_RULE_SIZE_MISMATCH,
        )

    rules = []
    for index, block in enumerate(spec.rule):
        owner = f"rule {index}"
        buckets = _encode_buckets(block.bucket, names, owner)
        total = sum(b.size for b in buckets)
        if total != BUCKET_SIZE_TOTAL:
            raise DefinitionValidationError(
                f"the sum of all {owner} bucket sizes must equal 100, got {total}",
                code=SplitAdminErrorCodes.RULE_SIZE_MISMATCH,
            )
        condition = block.condition[0]
        rules.append(
            Rule(
                condition=Condition(
                    matchers=[_encode_matcher(m) for m in condition.matcher],
                    combiner=condition.combiner,
                ),
                buckets=buckets,
            )
        )

    return SplitDefinitionRequest(
        treatments=treatments,
        default_treatment=spec.default_treatment,
        default_rule=default_rule,
        rules=rules,
        traffic_allocation=spec.traffic_allocation,
        killed=spec.killed,
        comment=comment,
    )


def _decode_matcher(matcher: Matcher) -> MatcherBlock:
    values = matcher_values(matcher)
    between = values.get("between")
    depends = values.get("depends")
    return MatcherBlock(
        type=matcher.type.value,
        attribute=getattr(matcher, "attribute", None),
        negate=matcher.negate,
        string=values.get("string"),
        strings=values.get("strings"),
        number=values.get("number"),
        date=values.get("date"),
        boolean=values.get("bool"),
        between=BetweenBlock(start=between.start, end=between.end) if between else None,
        depends=(
            DependsBlock(split_name=depends.split_name, treatments=list(depends.treatments))
            if depends
            else None
        ),
    )


def _decode_buckets(buckets: list[Bucket]) -> list[BucketBlock]:
    return [BucketBlock(treatment=b.treatment, size=b.size) for b in buckets]


def decode_definition(definition: SplitDefinition | SplitDefinitionRequest) -> DefinitionSpec:
    """Flatten a nested definition, keeping rule order and absent fields absent."""
    try:
        return DefinitionSpec(
            default_treatment=definition.default_treatment,
            traffic_allocation=definition.traffic_allocation,
            killed=definition.killed,
            treatment=[
                TreatmentBlock(
                    name=t.name,
                    configurations=t.configurations,
                    description=t.description,
                    keys=list(t.keys) if t.keys is not None else None,
                    segments=list(t.segments) if t.segments is not None else None,
                )
                for t in definition.treatments
            ],
            default_rule=_decode_buckets(definition.default_rule),
            rule=[
                RuleBlock(
                    bucket=_decode_buckets(r.buckets),
                    condition=[
                        ConditionBlock(
                            combiner=r.condition.combiner,
                            matcher=[_decode_matcher(m) for m in r.condition.matchers],
                        )
                    ],
                )
                for r in definition.rules
            ],
        )
    except ValidationError as e:
        raise DefinitionValidationError(f"definition cannot be represented: {e}") from e
