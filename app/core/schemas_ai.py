"""Pydantic schemas for model responses, decoded leniently.

Every field has a typed default. ``LenientModel.decode`` validates each field
of a parsed JSON object on its own; a missing, null or ill-typed value takes
its default (or a per-call fallback) and is recorded in ``defaulted_fields``
instead of failing the whole response.
"""

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as SchemaValidationError
from pydantic.alias_generators import to_camel

from app.core.schemas_records import MethodDoc, Phase

_MISSING = object()


def _coerce_number(value: Any) -> Any:
    """Turn numeric strings like ``"85"`` or ``"85%"`` into floats."""
    if isinstance(value, bool):
        raise ValueError("boolean is not a number")
    if isinstance(value, str):
        cleaned = value.strip().rstrip("%").strip()
        try:
            return float(cleaned)
        except ValueError:
            raise ValueError(f"not a number: {value!r}") from None
    return value


def clamp_percentage(value: Any) -> int:
    """Coerce to an int clamped to [0, 100]."""
    number = _coerce_number(value)
    if not isinstance(number, (int, float)) or not math.isfinite(number):
        raise ValueError("percentage must be numeric")
    return int(min(100, max(0, round(number))))


def clamp_count(value: Any) -> int:
    """Coerce to a non-negative int."""
    number = _coerce_number(value)
    if not isinstance(number, (int, float)) or not math.isfinite(number):
        raise ValueError("count must be numeric")
    return int(max(0, round(number)))


def string_items(value: Any) -> list[str]:
    """Keep the non-blank string items of a list."""
    if not isinstance(value, list):
        raise ValueError("expected a list")
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


class LenientModel(BaseModel):
    """Base model for structured model output."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )

    defaulted_fields: list[str] = Field(default_factory=list, exclude=True)

    @classmethod
    def decode(cls, payload: Any, **fallbacks: Any):
        """
        Build an instance from a parsed JSON object, never failing on fields.

        Args:
            payload: Parsed JSON (anything that is not a dict counts as empty)
            **fallbacks: Per-call replacements for field defaults

        Returns:
            Fully populated instance; ``defaulted_fields`` lists the fields
            that did not come from the payload
        """
        data = payload if isinstance(payload, dict) else {}
        instance = cls.model_construct()
        defaulted: list[str] = []

        for name, field in cls.model_fields.items():
            if name == "defaulted_fields":
                continue
            raw = data.get(field.alias or name, _MISSING)
            if raw is _MISSING:
                raw = data.get(name, _MISSING)

            if raw is not _MISSING and raw is not None:
                try:
                    setattr(instance, name, raw)
                    continue
                except SchemaValidationError:
                    pass

            defaulted.append(name)
            if name in fallbacks:
                setattr(instance, name, fallbacks[name])

        instance.defaulted_fields = defaulted
        return instance


# =======================
# Classification
# =======================


class ClassifiedRequirement(LenientModel):
    """One requirement sentence as classified by the model."""

    text: str = ""
    phase: Phase | None = None
    confidence: int = 0
    user_story: str = ""

    @field_validator("text", "user_story", mode="before")
    @classmethod
    def _strip(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("phase", mode="before")
    @classmethod
    def _match_phase(cls, v: Any) -> Any:
        if isinstance(v, str):
            for phase in Phase:
                if phase.value.lower() == v.strip().lower():
                    return phase
        return v

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp_confidence(cls, v: Any) -> int:
        return clamp_percentage(v)

    @property
    def is_usable(self) -> bool:
        return bool(self.text) and self.phase is not None


def empty_phase_tally() -> dict[str, int]:
    return {phase.value: 0 for phase in Phase}


class ClassificationResult(BaseModel):
    """Classified requirements plus a locally computed phase tally."""

    requirements: list[ClassifiedRequirement] = Field(default_factory=list)
    statistics: dict[str, int] = Field(default_factory=empty_phase_tally)
    dropped_items: int = 0


# =======================
# Code generation / bug fixing
# =======================


class CodeGenerationResult(LenientModel):
    code: str = ""
    suggestions: list[str] = Field(default_factory=list)

    @field_validator("suggestions", mode="before")
    @classmethod
    def _strings(cls, v: Any) -> list[str]:
        return string_items(v)


class BugFixResult(LenientModel):
    fixed_code: str = ""
    issues: list[str] = Field(default_factory=list)
    optimizations: list[str] = Field(default_factory=list)

    @field_validator("issues", "optimizations", mode="before")
    @classmethod
    def _strings(cls, v: Any) -> list[str]:
        return string_items(v)


# =======================
# Test generation
# =======================


class TestGenerationResult(LenientModel):
    __test__ = False  # not a pytest test class

    test_code: str = ""
    coverage: int = 0
    total_tests: int = 0
    positive_tests: int = 0
    negative_tests: int = 0

    @field_validator("coverage", mode="before")
    @classmethod
    def _clamp_coverage(cls, v: Any) -> int:
        return clamp_percentage(v)

    @field_validator("total_tests", "positive_tests", "negative_tests", mode="before")
    @classmethod
    def _clamp_counts(cls, v: Any) -> int:
        return clamp_count(v)


# =======================
# Summarization
# =======================


class DocumentationResult(LenientModel):
    overview: str = ""
    features: list[str] = Field(default_factory=list)
    methods: list[MethodDoc] = Field(default_factory=list)
    example: str = ""

    @field_validator("features", mode="before")
    @classmethod
    def _strings(cls, v: Any) -> list[str]:
        return string_items(v)

    @field_validator("methods", mode="before")
    @classmethod
    def _method_items(cls, v: Any) -> list[dict[str, Any]]:
        if not isinstance(v, list):
            raise ValueError("expected a list")
        return [
            {
                "name": item["name"],
                "description": item["description"] if isinstance(item.get("description"), str) else "",
            }
            for item in v
            if isinstance(item, dict) and isinstance(item.get("name"), str)
        ]
