"""
Loading the static portfolio configuration.

The file is a JSON object keyed by category, mirroring how the holdings are
maintained by hand:

    {
      "a-share": {
        "currency": "CNY",
        "capital": 100000,
        "holdings": [
          {"code": "000001", "name": "Ping An Bank", "allocation": 30, "purchase_price": 11.2}
        ]
      },
      "hk": {...},
      "us": {...}
    }

market defaults to the category's market, holding currency to the
category's currency, and value_fallback to "cost".
"""

from decimal import Decimal
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, Field, RootModel
from pydantic import ValidationError as PydanticValidationError

from fund_monitor.core.exceptions import ConfigurationError, ValidationError
from fund_monitor.domain.models import (
    Category,
    CategoryConfig,
    HoldingConfig,
    Market,
    PortfolioConfig,
    ValueFallback,
)


class HoldingConfigModel(BaseModel):
    """One holding as written in the config file."""

    code: str = Field(min_length=1)
    name: str
    allocation: Decimal = Field(ge=0, le=100)
    purchase_price: Optional[Decimal] = Field(default=None, ge=0)
    currency: Optional[str] = None


class CategoryConfigModel(BaseModel):
    """One category as written in the config file."""

    market: Optional[Market] = None
    currency: str = "CNY"
    capital: Decimal = Field(ge=0)
    value_fallback: ValueFallback = ValueFallback.COST
    holdings: list[HoldingConfigModel] = Field(default_factory=list)


class PortfolioConfigModel(RootModel[dict[Category, CategoryConfigModel]]):
    """The whole config file: category -> category config."""

    def to_domain(self) -> PortfolioConfig:
        """Convert to immutable domain configuration (validates all three categories exist)."""
        categories = []
        for category, model in self.root.items():
            holdings = tuple(
                HoldingConfig(
                    code=h.code.strip(),
                    name=h.name,
                    allocation=h.allocation,
                    purchase_price=h.purchase_price,
                    currency=h.currency or model.currency,
                )
                for h in model.holdings
            )
            categories.append(
                CategoryConfig(
                    category=category,
                    market=model.market or category.default_market,
                    currency=model.currency,
                    capital=model.capital,
                    holdings=holdings,
                    value_fallback=model.value_fallback,
                )
            )
        return PortfolioConfig(categories=tuple(categories))


def parse_portfolio_config(data: Mapping[str, Any]) -> PortfolioConfig:
    """Build a PortfolioConfig from already-decoded data."""
    try:
        model = PortfolioConfigModel.model_validate(dict(data))
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid portfolio config: {e}") from e
    return model.to_domain()


def load_portfolio_config(path: Union[str, Path]) -> PortfolioConfig:
    """Read and validate a portfolio config JSON file."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot read portfolio config {path}: {e}") from e

    try:
        model = PortfolioConfigModel.model_validate_json(text)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid portfolio config {path}: {e}") from e
    return model.to_domain()
