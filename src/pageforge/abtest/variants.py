"""
Element-level A/B variant configuration.

A test owns at least two variants and exactly one control. The control is the
unmodified page: it cannot be renamed, removed, demoted or given changes.
Every operation returns a new ``VariantSet``.
"""

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..core.css import string_to_style_object
from ..core.id import new_change_id

MIN_VARIANTS = 2
# Variant names run "Variant A" .. "Variant Z"
MAX_VARIANTS = 27


class VariantConfigError(ValueError):
    """Variant operation would break the test's invariants."""


class ChangeType(str, Enum):
    TEXT = "text"
    STYLE = "style"
    HIDE = "hide"
    SHOW = "show"
    REMOVE = "remove"
    ADD = "add"


_MODEL_CONFIG = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)


class ElementChange(BaseModel):
    """One mutation applied to the control page to produce a variant."""

    model_config = _MODEL_CONFIG

    id: str = Field(default_factory=new_change_id)
    element_id: str | None = None
    element_selector: str = ""
    change_type: ChangeType = ChangeType.TEXT
    old_value: str | None = None
    new_value: str | None = None
    description: str = ""

    @property
    def new_styles(self) -> dict[str, str]:
        """``new_value`` of a style change as a camelCase map."""
        if self.change_type != ChangeType.STYLE:
            return {}
        return string_to_style_object(self.new_value)


class ElementVariantConfig(BaseModel):
    model_config = _MODEL_CONFIG

    name: str
    description: str = ""
    is_control: bool = False
    changes: tuple[ElementChange, ...] = ()


_VARIANT_NAME = re.compile(r"^Variant ([A-Z])$")


def _variant_name(position: int) -> str:
    # position counts the control, so the first non-control is "Variant A"
    return f"Variant {chr(65 + position - 1)}"


def _next_variant_name(variants: tuple["ElementVariantConfig", ...]) -> str:
    """Letter after the highest default-named variant, so removals never reuse a name."""
    matches = (_VARIANT_NAME.match(v.name) for v in variants)
    letters = [m.group(1) for m in matches if m]
    used = max((ord(letter) - 64 for letter in letters), default=0)
    position = max(used, len(variants) - 1) + 1
    if position > 26:
        # past "Variant Z": fill the first free letter
        taken = set(letters)
        position = next(i for i in range(1, 27) if chr(64 + i) not in taken)
    return _variant_name(position)


class VariantSet(BaseModel):
    """Ordered variants of one element test."""

    model_config = ConfigDict(frozen=True)

    variants: tuple[ElementVariantConfig, ...]

    @classmethod
    def default(cls) -> "VariantSet":
        return cls(
            variants=(
                ElementVariantConfig(name="Control", description="Original version", is_control=True),
                ElementVariantConfig(name=_variant_name(1)),
            )
        )

    @classmethod
    def from_variants(cls, variants: list[ElementVariantConfig]) -> "VariantSet":
        """Build and validate; fewer than two variants yields the defaults."""
        if len(variants) < MIN_VARIANTS:
            return cls.default()
        variant_set = cls(variants=tuple(variants))
        variant_set.validate_variants()
        return variant_set

    @property
    def control(self) -> ElementVariantConfig:
        return next(v for v in self.variants if v.is_control)

    def __len__(self) -> int:
        return len(self.variants)

    def _get(self, index: int) -> ElementVariantConfig:
        if not 0 <= index < len(self.variants):
            raise VariantConfigError(f"No variant at index {index}")
        return self.variants[index]

    def _with(self, index: int, variant: ElementVariantConfig) -> "VariantSet":
        variants = list(self.variants)
        variants[index] = variant
        return VariantSet(variants=tuple(variants))

    def _editable(self, index: int) -> ElementVariantConfig:
        variant = self._get(index)
        if variant.is_control:
            raise VariantConfigError("Control variant cannot be modified")
        return variant

    def validate_variants(self) -> None:
        """
        Raises:
            VariantConfigError: Unless there are >= 2 variants and exactly one control
        """
        if len(self.variants) < MIN_VARIANTS:
            raise VariantConfigError(f"A test needs at least {MIN_VARIANTS} variants")
        controls = sum(1 for v in self.variants if v.is_control)
        if controls != 1:
            raise VariantConfigError(f"A test needs exactly one control variant, found {controls}")
        if any(v.changes for v in self.variants if v.is_control):
            raise VariantConfigError("Control variant cannot carry changes")

    # ------------------------------------------------------------------
    # Variants
    # ------------------------------------------------------------------

    def add_variant(self, description: str = "") -> "VariantSet":
        if len(self.variants) >= MAX_VARIANTS:
            raise VariantConfigError(f"A test supports at most {MAX_VARIANTS} variants")
        new = ElementVariantConfig(name=_next_variant_name(self.variants), description=description)
        return VariantSet(variants=(*self.variants, new))

    def remove_variant(self, index: int) -> "VariantSet":
        self._editable(index)
        if len(self.variants) <= MIN_VARIANTS:
            raise VariantConfigError(f"A test needs at least {MIN_VARIANTS} variants")
        variants = self.variants[:index] + self.variants[index + 1 :]
        return VariantSet(variants=variants)

    def update_variant(
        self, index: int, name: str | None = None, description: str | None = None
    ) -> "VariantSet":
        variant = self._editable(index)
        updates = {}
        if name is not None:
            if not name.strip():
                raise VariantConfigError("Variant name cannot be empty")
            updates["name"] = name.strip()
        if description is not None:
            updates["description"] = description
        return self._with(index, variant.model_copy(update=updates))

    # ------------------------------------------------------------------
    # Changes
    # ------------------------------------------------------------------

    def add_change(self, index: int, change: ElementChange | None = None) -> "VariantSet":
        variant = self._editable(index)
        change = change or ElementChange()
        return self._with(index, variant.model_copy(update={"changes": (*variant.changes, change)}))

    def update_change(self, index: int, change_id: str, **fields) -> "VariantSet":
        variant = self._editable(index)
        changes = []
        found = False
        for change in variant.changes:
            if change.id == change_id:
                data = {**change.model_dump(), **fields, "id": change.id}
                change = ElementChange.model_validate(data)
                found = True
            changes.append(change)
        if not found:
            raise VariantConfigError(f"No change {change_id} in variant {variant.name}")
        return self._with(index, variant.model_copy(update={"changes": tuple(changes)}))

    def remove_change(self, index: int, change_id: str) -> "VariantSet":
        variant = self._editable(index)
        changes = tuple(c for c in variant.changes if c.id != change_id)
        return self._with(index, variant.model_copy(update={"changes": changes}))

    def to_payload(self) -> list[dict]:
        """camelCase JSON for the ab-tests API."""
        return [v.model_dump(mode="json", by_alias=True) for v in self.variants]
