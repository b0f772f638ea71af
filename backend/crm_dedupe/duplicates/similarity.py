"""Deterministic weighted similarity scoring for duplicate detection."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, replace
from types import MappingProxyType

from rapidfuzz import fuzz
from rapidfuzz.utils import default_process

AttributeSet = Mapping[str, str | None]

_WEIGHT_TOLERANCE = 1e-9


def snapshot_attributes(values: Mapping[str, str | None]) -> AttributeSet:
    """Freeze an attribute set so later record edits cannot leak into a comparison."""

    return MappingProxyType(dict(values))


def normalize_name(value: str) -> str:
    """Lower-case, replace punctuation with spaces and collapse whitespace."""

    return " ".join(default_process(value).split())


def normalize_email(value: str) -> str:
    return value.strip().lower()


def extract_domain(website_or_url: str) -> str:
    """Reduce a website or URL to its bare host.

    Strips the protocol, the path and a leading ``www.``:
    ``"https://www.example.com/about"`` becomes ``"example.com"``.
    """

    domain = website_or_url.strip()
    if "://" in domain:
        domain = domain.split("://", 1)[1]
    domain = domain.split("/", 1)[0]
    if domain.lower().startswith("www."):
        domain = domain[4:]
    return domain.lower()


def token_sort_similarity(left: str, right: str) -> float:
    """Word-order-insensitive similarity in [0, 1]."""

    return fuzz.token_sort_ratio(left, right) / 100.0


def literal_similarity(left: str, right: str) -> float:
    """Character-level similarity in [0, 1]."""

    return fuzz.ratio(left, right) / 100.0


@dataclass(frozen=True, slots=True)
class MatchField:
    """One comparable attribute and how it contributes to the composite score."""

    name: str
    weight: float
    canonicalize: Callable[[str], str]
    compare: Callable[[str, str], float]

    def canonical(self, attributes: AttributeSet) -> str:
        """Canonical form of this field, or "" when the value is absent."""

        raw = attributes.get(self.name)
        if raw is None or not raw.strip():
            return ""
        return self.canonicalize(raw)


def name_field(weight: float, name: str = "name") -> MatchField:
    return MatchField(name=name, weight=weight, canonicalize=normalize_name, compare=token_sort_similarity)


def email_field(weight: float, name: str = "email") -> MatchField:
    return MatchField(name=name, weight=weight, canonicalize=normalize_email, compare=literal_similarity)


def domain_field(weight: float, name: str = "domain") -> MatchField:
    return MatchField(name=name, weight=weight, canonicalize=extract_domain, compare=literal_similarity)


@dataclass(frozen=True, slots=True)
class KindWeights:
    """Per-entity-kind comparable fields; weights must sum to 1.0."""

    fields: tuple[MatchField, ...]

    def __post_init__(self) -> None:
        if not self.fields:
            raise ValueError("At least one match field is required.")
        names = [field.name for field in self.fields]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate match field names: {names}.")
        if any(field.weight <= 0.0 for field in self.fields):
            raise ValueError("Match field weights must be positive.")
        total = sum(field.weight for field in self.fields)
        if abs(total - 1.0) > _WEIGHT_TOLERANCE:
            raise ValueError(f"Match field weights must sum to 1.0, got {total:.4f}.")

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(field.name for field in self.fields)

    def restricted_to(self, field_names: Iterable[str] | None) -> KindWeights:
        """Keep only the named fields, rescaling their weights to sum to 1.0.

        Unknown names are ignored; a restriction that keeps nothing returns the full set.
        """

        if field_names is None:
            return self
        wanted = set(field_names)
        kept = [field for field in self.fields if field.name in wanted]
        if not kept or len(kept) == len(self.fields):
            return self
        total = sum(field.weight for field in kept)
        return KindWeights(tuple(replace(field, weight=field.weight / total) for field in kept))

    def has_comparable_values(self, attributes: AttributeSet) -> bool:
        return any(field.canonical(attributes) for field in self.fields)


def score(weights: KindWeights, source: AttributeSet, candidate: AttributeSet) -> int:
    """Composite similarity score in [0, 100].

    Fields missing on either side drop out and the remaining fields share their
    weight. With nothing to compare the score is 0.
    """

    weighted_sum = 0.0
    present_weight = 0.0
    for field in weights.fields:
        left = field.canonical(source)
        right = field.canonical(candidate)
        if not left or not right:
            continue
        weighted_sum += field.weight * field.compare(left, right)
        present_weight += field.weight
    if present_weight <= 0.0:
        return 0
    return int(round(weighted_sum / present_weight * 100))
