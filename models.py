from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union


class DeviceClass(Enum):
    COMPACT = "compact"
    MEDIUM = "medium"
    WIDE = "wide"


@dataclass(frozen=True)
class Margins:
    """Card-area margins inside the container"""

    top: float
    bottom: float
    left: float
    right: float

    @property
    def horizontal(self) -> float:
        return self.left + self.right

    @property
    def vertical(self) -> float:
        return self.top + self.bottom


@dataclass(frozen=True)
class SpacingProfile:
    """Default spacing for one device class"""

    container_margins: Margins
    row_spacing: float
    card_spacing: float
    min_card_area_height: float
    preferred_cards_per_row: int = 1
    # upper bound on cards offered for this device class, None for no bound
    max_cards: Optional[int] = None

    def relaxed(self, factor: float) -> "SpacingProfile":
        """Same profile with inter-card spacing scaled by ``factor``"""
        return SpacingProfile(
            container_margins=self.container_margins,
            row_spacing=self.row_spacing * factor,
            card_spacing=self.card_spacing * factor,
            min_card_area_height=self.min_card_area_height,
            preferred_cards_per_row=self.preferred_cards_per_row,
            max_cards=self.max_cards,
        )


@dataclass(frozen=True)
class LayoutConstraints:
    """Card size bounds and tuning factors for the solver.

    Bounds are given as widths; heights follow from ``aspect_ratio``
    (height / width) so every bound pair keeps the card proportions.
    """

    min_card_width: float = 60.0
    max_card_width: float = 100.0
    scale_floor_width: float = 40.0
    aspect_ratio: float = 1.5
    safety_factor: float = 0.95
    overflow_scale_cap: float = 0.9
    fallback_relax_factor: float = 0.6
    fallback_spacing_factor: float = 0.5

    def __post_init__(self):
        if self.aspect_ratio <= 0:
            raise ValueError(f"aspect_ratio must be positive, got {self.aspect_ratio}")
        if not 0 < self.scale_floor_width <= self.min_card_width <= self.max_card_width:
            raise ValueError(
                "Expected 0 < scale_floor_width <= min_card_width <= max_card_width, got "
                f"{self.scale_floor_width}, {self.min_card_width}, {self.max_card_width}"
            )
        for name in (
            "safety_factor",
            "overflow_scale_cap",
            "fallback_relax_factor",
            "fallback_spacing_factor",
        ):
            value = getattr(self, name)
            if not 0 < value <= 1:
                raise ValueError(f"{name} must be in (0, 1], got {value}")

    @property
    def min_card_height(self) -> float:
        return self.min_card_width * self.aspect_ratio

    @property
    def max_card_height(self) -> float:
        return self.max_card_width * self.aspect_ratio

    @property
    def scale_floor_height(self) -> float:
        return self.scale_floor_width * self.aspect_ratio

    def relaxed(self) -> "LayoutConstraints":
        """Constraint set used by the emergency fallback"""
        relaxed_min = self.min_card_width * self.fallback_relax_factor
        return LayoutConstraints(
            min_card_width=relaxed_min,
            max_card_width=self.max_card_width,
            scale_floor_width=min(self.scale_floor_width, relaxed_min),
            aspect_ratio=self.aspect_ratio,
            safety_factor=self.safety_factor,
            overflow_scale_cap=self.overflow_scale_cap,
            fallback_relax_factor=self.fallback_relax_factor,
            fallback_spacing_factor=self.fallback_spacing_factor,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "min_card_width": self.min_card_width,
            "max_card_width": self.max_card_width,
            "scale_floor_width": self.scale_floor_width,
            "aspect_ratio": self.aspect_ratio,
            "safety_factor": self.safety_factor,
            "overflow_scale_cap": self.overflow_scale_cap,
            "fallback_relax_factor": self.fallback_relax_factor,
            "fallback_spacing_factor": self.fallback_spacing_factor,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LayoutConstraints":
        defaults = cls()
        return cls(**{key: data.get(key, value) for key, value in defaults.to_dict().items()})


@dataclass(frozen=True)
class LayoutRequest:
    """Immutable input of one layout computation"""

    card_count: int
    container_width: float
    container_height: float
    device_class: DeviceClass = DeviceClass.WIDE

    def __post_init__(self):
        if isinstance(self.card_count, bool) or not isinstance(self.card_count, int):
            raise ValueError(f"card_count must be an integer, got {self.card_count!r}")
        if self.card_count < 0:
            raise ValueError(f"card_count must be >= 0, got {self.card_count}")

    @property
    def cache_key(self) -> tuple[int, float, float, str]:
        return (
            self.card_count,
            float(self.container_width),
            float(self.container_height),
            self.device_class.value,
        )


@dataclass(frozen=True)
class AvailableSpace:
    """Sub-rectangle of the container usable for cards"""

    width: float
    height: float
    center_x: float
    center_y: float

    @property
    def left(self) -> float:
        return self.center_x - self.width / 2

    @property
    def top(self) -> float:
        return self.center_y - self.height / 2

    def safe_box(self, safety_factor: float) -> tuple[float, float]:
        """Width and height of the region a plan may occupy"""
        return self.width * safety_factor, self.height * safety_factor

    def describe(self) -> str:
        return (
            f"Available: {self.width:.1f}x{self.height:.1f} | "
            f"Center: {self.center_x:.1f},{self.center_y:.1f}"
        )


@dataclass(frozen=True)
class RowPlan:
    """Row/column decomposition of a card count"""

    rows: int
    cards_per_row: int

    @classmethod
    def empty(cls) -> "RowPlan":
        return cls(rows=0, cards_per_row=0)

    @classmethod
    def for_count(cls, card_count: int, cards_per_row: int) -> "RowPlan":
        """Plan with the fewest rows that hold ``card_count`` at ``cards_per_row``"""
        if card_count <= 0:
            return cls.empty()
        cards_per_row = max(1, min(cards_per_row, card_count))
        rows = -(-card_count // cards_per_row)
        return cls(rows=rows, cards_per_row=cards_per_row)

    @property
    def is_empty(self) -> bool:
        return self.rows == 0

    @property
    def capacity(self) -> int:
        return self.rows * self.cards_per_row

    def cards_in_row(self, row: int, card_count: int) -> int:
        return max(0, min(self.cards_per_row, card_count - row * self.cards_per_row))

    def is_complete_for(self, card_count: int) -> bool:
        """True when the plan holds every card and has no fully empty row"""
        if card_count == 0:
            return self.is_empty
        return self.capacity >= card_count and (self.rows - 1) * self.cards_per_row < card_count


@dataclass(frozen=True)
class CardSize:
    width: float
    height: float

    @property
    def ratio(self) -> float:
        return self.height / self.width if self.width else 0.0

    def scaled(self, factor: float) -> "CardSize":
        return CardSize(self.width * factor, self.height * factor)


@dataclass(frozen=True)
class CardPosition:
    """Center of one card, in container coordinates"""

    index: int
    x: float
    y: float
    card_width: float
    card_height: float
    row: int = 0
    column: int = 0

    @property
    def left(self) -> float:
        return self.x - self.card_width / 2

    @property
    def right(self) -> float:
        return self.x + self.card_width / 2

    @property
    def top(self) -> float:
        return self.y - self.card_height / 2

    @property
    def bottom(self) -> float:
        return self.y + self.card_height / 2


@dataclass(frozen=True)
class LayoutResult:
    """Geometric plan consumed once by the rendering layer"""

    positions: tuple[CardPosition, ...]
    card_size: CardSize
    row_plan: RowPlan
    total_width: float
    total_height: float
    is_optimal: bool
    card_spacing: float = 0.0
    row_spacing: float = 0.0
    min_card_size: Optional[CardSize] = None
    warnings: tuple[str, ...] = ()

    @property
    def card_count(self) -> int:
        return len(self.positions)

    def fill_ratio(self, space: AvailableSpace) -> float:
        """Fraction of the available area covered by cards"""
        area = space.width * space.height
        if area <= 0:
            return 0.0
        return self.card_count * self.card_size.width * self.card_size.height / area

    def describe(self) -> str:
        state = "optimal" if self.is_optimal else "degraded"
        return " | ".join(
            [
                f"Cards: {self.card_count}",
                f"Plan: {self.row_plan.rows}x{self.row_plan.cards_per_row}",
                f"Card: {self.card_size.width:.1f}x{self.card_size.height:.1f}",
                f"Total: {self.total_width:.1f}x{self.total_height:.1f}",
                f"State: {state}",
            ]
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to plain data for the rendering layer"""
        return {
            "positions": [
                {
                    "index": p.index,
                    "x": p.x,
                    "y": p.y,
                    "card_width": p.card_width,
                    "card_height": p.card_height,
                    "row": p.row,
                    "column": p.column,
                }
                for p in self.positions
            ],
            "card_size": {"width": self.card_size.width, "height": self.card_size.height},
            "row_plan": {
                "rows": self.row_plan.rows,
                "cards_per_row": self.row_plan.cards_per_row,
            },
            "total_width": self.total_width,
            "total_height": self.total_height,
            "is_optimal": self.is_optimal,
            "card_spacing": self.card_spacing,
            "row_spacing": self.row_spacing,
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    violations: tuple[str, ...] = ()
    fallback_required: bool = False

    @classmethod
    def from_violations(cls, violations: list[str]) -> "ValidationResult":
        return cls(
            is_valid=not violations,
            violations=tuple(violations),
            fallback_required=bool(violations),
        )


@dataclass(frozen=True)
class LayoutCapacity:
    """How many minimum-size cards a container holds"""

    max_cards_per_row: int
    max_rows: int
    max_safe_cards: int

    @property
    def fits_one_card(self) -> bool:
        return self.max_safe_cards > 0


@dataclass(frozen=True)
class OptimalLayout:
    """Primary plan accepted by the validator"""

    result: LayoutResult
    space: AvailableSpace


@dataclass(frozen=True)
class DegradedLayout:
    """Plan produced by the emergency fallback"""

    result: LayoutResult
    space: AvailableSpace
    rejected: ValidationResult


LayoutOutcome = Union[OptimalLayout, DegradedLayout]


@dataclass
class LayoutEngineConfig:
    """Configuration for the layout engine"""

    constraints: LayoutConstraints = field(default_factory=LayoutConstraints)
    cache_enabled: bool = True
    cache_max_entries: int = 128
    debounce_ms: float = 150.0
    performance_budget_ms: float = 100.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        return {
            "constraints": self.constraints.to_dict(),
            "cache_enabled": self.cache_enabled,
            "cache_max_entries": self.cache_max_entries,
            "debounce_ms": self.debounce_ms,
            "performance_budget_ms": self.performance_budget_ms,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LayoutEngineConfig":
        """Create from dictionary for JSON deserialization"""
        return cls(
            constraints=LayoutConstraints.from_dict(data.get("constraints", {})),
            cache_enabled=data.get("cache_enabled", True),
            cache_max_entries=data.get("cache_max_entries", 128),
            debounce_ms=data.get("debounce_ms", 150.0),
            performance_budget_ms=data.get("performance_budget_ms", 100.0),
        )
