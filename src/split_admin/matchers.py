"""Targeting rule matchers.

Each matcher variant carries only the value field its types use, so a
matcher can never hold a combination of values the API would reject. The
wire form is the flat object the admin API expects: ``type``, optional
``attribute`` and ``negate``, and exactly one value key (none for
``ALL_KEYS``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, ClassVar, Union

from .exceptions import DefinitionValidationError, SplitAdminErrorCodes


class MatcherType(StrEnum):
    ALL_KEYS = "ALL_KEYS"
    IN_SEGMENT = "IN_SEGMENT"
    IN_LARGE_SEGMENT = "IN_LARGE_SEGMENT"
    MATCHES_STRING = "MATCHES_STRING"
    IN_LIST_STRING = "IN_LIST_STRING"
    STARTS_WITH = "STARTS_WITH"
    ENDS_WITH = "ENDS_WITH"
    CONTAINS_STRING = "CONTAINS_STRING"
    EQUAL_SET = "EQUAL_SET"
    ANY_OF_SET = "ANY_OF_SET"
    ALL_OF_SET = "ALL_OF_SET"
    PART_OF_SET = "PART_OF_SET"
    EQUAL_NUMBER = "EQUAL_NUMBER"
    GREATER_THAN_OR_EQUAL_NUMBER = "GREATER_THAN_OR_EQUAL_NUMBER"
    LESS_THAN_OR_EQUAL_NUMBER = "LESS_THAN_OR_EQUAL_NUMBER"
    BETWEEN_NUMBER = "BETWEEN_NUMBER"
    ON_DATE = "ON_DATE"
    ON_OR_AFTER_DATE = "ON_OR_AFTER_DATE"
    ON_OR_BEFORE_DATE = "ON_OR_BEFORE_DATE"
    BETWEEN_DATE = "BETWEEN_DATE"
    EQUAL_TO_BOOLEAN = "EQUAL_TO_BOOLEAN"
    IN_SPLIT = "IN_SPLIT"


# Every optional value key a matcher may carry on the wire.
VALUE_KEYS = ("string", "strings", "number", "date", "bool", "between", "depends")


def parse_matcher_type(value: str) -> MatcherType:
    try:
        return MatcherType(value)
    except ValueError:
        raise DefinitionValidationError(
            f"unknown matcher type [{value}]",
            code=SplitAdminErrorCodes.UNKNOWN_MATCHER_TYPE,
        ) from None


def _common(kind: MatcherType, attribute: str | None, negate: bool | None) -> dict[str, Any]:
    body: dict[str, Any] = {"type": kind.value}
    if attribute is not None:
        body["attribute"] = attribute
    if negate is not None:
        body["negate"] = negate
    return body


class _Variant:
    """Shared behaviour of the matcher dataclasses."""

    types: ClassVar[frozenset[MatcherType]] = frozenset()
    value_key: ClassVar[str | None] = None

    type: MatcherType

    def __post_init__(self) -> None:
        self.type = parse_matcher_type(self.type)
        if self.type not in self.types:
            raise DefinitionValidationError(
                f"matcher type [{self.type.value}] cannot be used with {type(self).__name__}",
                code=SplitAdminErrorCodes.MATCHER_FIELD_MISMATCH,
            )


@dataclass
class AllKeysMatcher(_Variant):
    types: ClassVar[frozenset[MatcherType]] = frozenset({MatcherType.ALL_KEYS})

    type: MatcherType = MatcherType.ALL_KEYS
    attribute: str | None = None
    negate: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        return _common(self.type, self.attribute, self.negate)


@dataclass
class StringMatcher(_Variant):
    types: ClassVar[frozenset[MatcherType]] = frozenset(
        {MatcherType.IN_SEGMENT, MatcherType.IN_LARGE_SEGMENT, MatcherType.MATCHES_STRING}
    )
    value_key: ClassVar[str | None] = "string"

    type: MatcherType
    string: str
    attribute: str | None = None
    negate: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        body = _common(self.type, self.attribute, self.negate)
        body["string"] = self.string
        return body


@dataclass
class SetMatcher(_Variant):
    types: ClassVar[frozenset[MatcherType]] = frozenset(
        {
            MatcherType.IN_LIST_STRING,
            MatcherType.STARTS_WITH,
            MatcherType.ENDS_WITH,
            MatcherType.CONTAINS_STRING,
            MatcherType.EQUAL_SET,
            MatcherType.ANY_OF_SET,
            MatcherType.ALL_OF_SET,
            MatcherType.PART_OF_SET,
        }
    )
    value_key: ClassVar[str | None] = "strings"

    type: MatcherType
    strings: list[str]
    attribute: str | None = None
    negate: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        body = _common(self.type, self.attribute, self.negate)
        body["strings"] = list(self.strings)
        return body


@dataclass
class NumberMatcher(_Variant):
    types: ClassVar[frozenset[MatcherType]] = frozenset(
        {
            MatcherType.EQUAL_NUMBER,
            MatcherType.GREATER_THAN_OR_EQUAL_NUMBER,
            MatcherType.LESS_THAN_OR_EQUAL_NUMBER,
        }
    )
    value_key: ClassVar[str | None] = "number"

    type: MatcherType
    number: int
    attribute: str | None = None
    negate: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        body = _common(self.type, self.attribute, self.negate)
        body["number"] = self.number
        return body


@dataclass
class DateMatcher(_Variant):
    """Date comparison; ``date`` is epoch milliseconds."""

    types: ClassVar[frozenset[MatcherType]] = frozenset(
        {MatcherType.ON_DATE, MatcherType.ON_OR_AFTER_DATE, MatcherType.ON_OR_BEFORE_DATE}
    )
    value_key: ClassVar[str | None] = "date"

    type: MatcherType
    date: int
    attribute: str | None = None
    negate: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        body = _common(self.type, self.attribute, self.negate)
        body["date"] = self.date
        return body


@dataclass(frozen=True)
class Between:
    """Inclusive range for BETWEEN_NUMBER and BETWEEN_DATE."""

    start: int
    end: int

    def to_dict(self) -> dict[str, int]:
        return {"from": self.start, "to": self.end}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Between:
        return cls(start=data["from"], end=data["to"])


@dataclass
class BetweenMatcher(_Variant):
    types: ClassVar[frozenset[MatcherType]] = frozenset(
        {MatcherType.BETWEEN_NUMBER, MatcherType.BETWEEN_DATE}
    )
    value_key: ClassVar[str | None] = "between"

    type: MatcherType
    between: Between
    attribute: str | None = None
    negate: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        body = _common(self.type, self.attribute, self.negate)
        body["between"] = self.between.to_dict()
        return body


@dataclass
class BooleanMatcher(_Variant):
    types: ClassVar[frozenset[MatcherType]] = frozenset({MatcherType.EQUAL_TO_BOOLEAN})
    value_key: ClassVar[str | None] = "bool"

    value: bool
    type: MatcherType = MatcherType.EQUAL_TO_BOOLEAN
    attribute: str | None = None
    negate: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        body = _common(self.type, self.attribute, self.negate)
        body["bool"] = self.value
        return body


@dataclass(frozen=True)
class Dependency:
    """Another flag and the treatments of it that satisfy the matcher."""

    split_name: str
    treatments: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {"splitName": self.split_name, "treatments": list(self.treatments)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Dependency:
        return cls(split_name=data["splitName"], treatments=tuple(data.get("treatments") or ()))


@dataclass
class DependencyMatcher(_Variant):
    types: ClassVar[frozenset[MatcherType]] = frozenset({MatcherType.IN_SPLIT})
    value_key: ClassVar[str | None] = "depends"

    depends: Dependency
    type: MatcherType = MatcherType.IN_SPLIT
    negate: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        body = _common(self.type, None, self.negate)
        body["depends"] = self.depends.to_dict()
        return body


Matcher = Union[
    AllKeysMatcher,
    StringMatcher,
    SetMatcher,
    NumberMatcher,
    DateMatcher,
    BetweenMatcher,
    BooleanMatcher,
    DependencyMatcher,
]

VARIANTS: tuple[type[_Variant], ...] = (
    AllKeysMatcher,
    StringMatcher,
    SetMatcher,
    NumberMatcher,
    DateMatcher,
    BetweenMatcher,
    BooleanMatcher,
    DependencyMatcher,
)

_VARIANT_BY_TYPE: dict[MatcherType, type[_Variant]] = {
    kind: variant for variant in VARIANTS for kind in variant.types
}


def variant_for(kind: MatcherType) -> type[_Variant]:
    return _VARIANT_BY_TYPE[kind]


def build_matcher(
    kind: str,
    values: dict[str, Any],
    attribute: str | None = None,
    negate: bool | None = None,
) -> Matcher:
    """Build the variant for ``kind`` from its wire-named value fields.

    ``values`` maps value keys (see VALUE_KEYS) to values; keys set to None
    count as absent. The key the type needs must be present and no other
    key may be.
    """
    matcher_type = parse_matcher_type(kind)
    variant = variant_for(matcher_type)
    present = {k for k, v in values.items() if v is not None}
    expected = {variant.value_key} if variant.value_key else set()
    missing = expected - present
    extra = present - expected
    if missing:
        raise DefinitionValidationError(
            f"matcher type [{kind}] requires field [{missing.pop()}]",
            code=SplitAdminErrorCodes.MATCHER_FIELD_MISMATCH,
        )
    if extra:
        raise DefinitionValidationError(
            f"matcher type [{kind}] does not accept field(s) {sorted(extra)}",
            code=SplitAdminErrorCodes.MATCHER_FIELD_MISMATCH,
        )
    if variant is DependencyMatcher and attribute is not None:
        raise DefinitionValidationError(
            f"matcher type [{kind}] does not accept field(s) ['attribute']",
            code=SplitAdminErrorCodes.MATCHER_FIELD_MISMATCH,
        )

    if variant is AllKeysMatcher:
        return AllKeysMatcher(attribute=attribute, negate=negate)
    if variant is StringMatcher:
        return StringMatcher(matcher_type, values["string"], attribute, negate)
    if variant is SetMatcher:
        return SetMatcher(matcher_type, list(values["strings"]), attribute, negate)
    if variant is NumberMatcher:
        return NumberMatcher(matcher_type, values["number"], attribute, negate)
    if variant is DateMatcher:
        return DateMatcher(matcher_type, values["date"], attribute, negate)
    if variant is BetweenMatcher:
        return BetweenMatcher(matcher_type, values["between"], attribute, negate)
    if variant is BooleanMatcher:
        return BooleanMatcher(values["bool"], matcher_type, attribute, negate)
    return DependencyMatcher(values["depends"], matcher_type, negate)


def matcher_from_dict(data: dict[str, Any]) -> Matcher:
    """Decode a wire matcher object into its variant."""
    values = {k: data.get(k) for k in VALUE_KEYS}
    if values["between"] is not None:
        values["between"] = Between.from_dict(values["between"])
    if values["depends"] is not None:
        values["depends"] = Dependency.from_dict(values["depends"])
    return build_matcher(
        data.get("type", ""),
        values,
        attribute=data.get("attribute"),
        negate=data.get("negate"),
    )


def matcher_values(matcher: Matcher) -> dict[str, Any]:
    """The single value field of ``matcher`` keyed by its wire name ({} for ALL_KEYS)."""
    if isinstance(matcher, StringMatcher):
        return {"string": matcher.string}
    if isinstance(matcher, SetMatcher):
        return {"strings": list(matcher.strings)}
    if isinstance(matcher, NumberMatcher):
        return {"number": matcher.number}
    if isinstance(matcher, DateMatcher):
        return {"date": matcher.date}
    if isinstance(matcher, BetweenMatcher):
        return {"between": matcher.between}
    if isinstance(matcher, BooleanMatcher):
        return {"bool": matcher.value}
    if isinstance(matcher, DependencyMatcher):
        return {"depends": matcher.depends}
    return {}
