"""Investment item and credit line models.

An item is one budget line of a project; a credit line is a financing
facility covering one or more items.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, computed_field


class CreditType(str, Enum):
    """Financing facility family an item is grouped into."""

    PERSONAL = "personal"
    CAPITAL = "capital"
    MORTGAGE = "mortgage"


class InvestmentItem(BaseModel):
    """One budget line of a project.

    Ranges on amount and advance_percentage are checked by the aggregator,
    so a malformed item can still be built and reported with InvalidInputError.
    """

    id: str = Field(..., description="Stable identifier")
    name: str = Field(default="", description="Display label")
    name_key: str | None = Field(None, description="Localization key")
    amount: float = Field(default=0.0, description="Total cost of the item")
    advance_percentage: float = Field(default=0.0, description="Upfront share 0-100")
    is_selected: bool = Field(default=True, description="Included in totals")
    credit_type: CreditType = Field(default=CreditType.CAPITAL, description="Default financing family")
    is_custom: bool = Field(default=False, description="User-added item")

    model_config = {
        "frozen": True,
    }

    @computed_field
    @property
    def advance_amount(self) -> float:
        """Amount paid upfront."""
        return self.amount * self.advance_percentage / 100.0

    @computed_field
    @property
    def finance_balance(self) -> float:
        """Amount left to finance."""
        return self.amount - self.advance_amount

    @computed_field
    @property
    def financing_percentage(self) -> float:
        """Share of the amount that is financed, in %."""
        if self.amount <= 0:
            return 0.0
        return self.finance_balance / self.amount * 100.0

    @property
    def label(self) -> str:
        return self.name or self.name_key or self.id


class ItemSplit(BaseModel):
    """Upfront / financed split of one selected item."""

    item_id: str
    name: str
    credit_type: CreditType
    amount: float
    advance_amount: float
    finance_balance: float
    is_custom: bool = False

    model_config = {
        "frozen": True,
    }


class AggregateResult(BaseModel):
    """Per-item splits and portfolio totals over selected items."""

    per_item: list[ItemSplit] = Field(default_factory=list)
    total_amount: float = 0.0
    total_advance: float = 0.0
    total_financed: float = 0.0

    model_config = {
        "frozen": True,
    }

    @computed_field
    @property
    def item_count(self) -> int:
        return len(self.per_item)

    def financed_by_credit_type(self) -> dict[CreditType, tuple[float, list[str]]]:
        """Financed balance and item ids per credit type, positive balances only."""
        groups: dict[CreditType, tuple[float, list[str]]] = {}
        for split in self.per_item:
            if split.finance_balance <= 0:
                continue
            total, ids = groups.get(split.credit_type, (0.0, []))
            groups[split.credit_type] = (total + split.finance_balance, ids + [split.item_id])
        return groups


class CreditLine(BaseModel):
    """One financing facility covering one or more items.

    total_amount may be a user override that disagrees with the items it
    funds; the analysis engine flags that, it never corrects it.
    """

    id: str = Field(..., description="Line identifier")
    item_ids: frozenset[str] = Field(default_factory=frozenset, description="Funded item ids")
    total_amount: float = Field(default=0.0, description="Financed principal")
    annual_rate: float = Field(default=0.0, description="Nominal annual rate %")
    term_months: int = Field(default=12, description="Term in months")
    credit_type: CreditType | None = Field(None, description="Financing family")

    model_config = {
        "frozen": True,
    }


class PricedCreditLine(BaseModel):
    """Credit line with its computed installment."""

    line: CreditLine
    monthly_payment: float

    model_config = {
        "frozen": True,
    }

    @computed_field
    @property
    def total_paid(self) -> float:
        """Sum of all installments over the term."""
        return self.monthly_payment * self.line.term_months

    @computed_field
    @property
    def total_interest(self) -> float:
        """Interest paid over the term."""
        return self.total_paid - self.line.total_amount
