"""Static portfolio configuration models."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterator, Optional

from fund_monitor.core.exceptions import ValidationError
from fund_monitor.domain.models.enums import Category, Market, ValueFallback


@dataclass(frozen=True)
class HoldingConfig:
    """
    One configured position within a category.

    allocation is a percentage of the category's invested capital.
    purchase_price may be unknown, in which case the holding has no profit rate.
    """

    code: str
    name: str
    allocation: Decimal
    purchase_price: Optional[Decimal] = None
    currency: str = "CNY"


@dataclass(frozen=True)
class CategoryConfig:
    """A portfolio partition: its market, capital and ordered holdings."""

    category: Category
    market: Market
    currency: str
    capital: Decimal
    holdings: tuple[HoldingConfig, ...] = ()
    value_fallback: ValueFallback = ValueFallback.COST


@dataclass(frozen=True)
class PortfolioConfig:
    """
    The full static configuration: exactly one CategoryConfig per Category.

    Iteration yields categories in configuration order.
    """

    categories: tuple[CategoryConfig, ...]

    def __post_init__(self) -> None:
        seen = [c.category for c in self.categories]
        if len(seen) != len(set(seen)):
            raise ValidationError("Portfolio config lists a category more than once")
        missing = [c.value for c in Category if c not in seen]
        if missing:
            raise ValidationError(f"Portfolio config is missing categories: {', '.join(missing)}")

    def __iter__(self) -> Iterator[CategoryConfig]:
        return iter(self.categories)

    def get(self, category: Category) -> CategoryConfig:
        """Return the configuration of one category."""
        for category_config in self.categories:
            if category_config.category == category:
                return category_config
        raise ValidationError(f"Unknown category: {category}")

    @property
    def holding_count(self) -> int:
        return sum(len(c.holdings) for c in self.categories)
