"""Mortgage viability against a catalog of bank products.

For each product: how much the bank finances, the installment at the
borrower's desired term, and whether that installment fits the
product's installment-to-income limit, either as requested or with a
longer term.
"""

from __future__ import annotations

from math import isfinite
from typing import Iterable

import pandas as pd

from investsim.core.exceptions import InvalidInputError
from investsim.core.logging import get_logger
from investsim.domain.calculator.financial import (
    monthly_payment,
    monthly_rate_from_effective_annual,
    recommended_term,
)
from investsim.domain.models.mortgage import MortgageEvaluation, MortgageProduct, MortgageStatus

log = get_logger(__name__)

STATUS_ORDER = {
    MortgageStatus.VIABLE: 0,
    MortgageStatus.EXTEND_TERM: 1,
    MortgageStatus.NOT_VIABLE: 2,
}

EVALUATION_COLUMNS = [
    "bank_name",
    "product_name",
    "status",
    "financed_amount",
    "required_down_payment",
    "initial_installment",
    "max_allowed_installment",
    "desired_term_months",
    "recommended_term_months",
    "max_term_months",
    "monthly_rate_pct",
    "effective_annual_rate_pct",
    "total_financial_cost_pct",
]


def _check_borrower(property_value: float, monthly_income: float, desired_term_months: int) -> None:
    if not isfinite(property_value) or property_value < 0:
        raise InvalidInputError("property_value", property_value, "must be a finite number >= 0")
    if not isfinite(monthly_income) or monthly_income < 0:
        raise InvalidInputError("monthly_income", monthly_income, "must be a finite number >= 0")
    if desired_term_months < 1:
        raise InvalidInputError("desired_term_months", desired_term_months, "must be >= 1")


def evaluate_product(
    product: MortgageProduct,
    property_value: float,
    monthly_income: float,
    desired_term_months: int,
) -> MortgageEvaluation:
    """Evaluate one complete product for a borrower.

    Args:
        product: Catalog offer; must satisfy product.is_complete
        property_value: Appraised value of the property
        monthly_income: Borrower's monthly income
        desired_term_months: Term the borrower asks for

    Returns:
        MortgageEvaluation. When the installment at the desired term is
        too high, recommended_term_months holds the shortest term that
        fits (EXTEND_TERM) or the product maximum (NOT_VIABLE).

    Raises:
        InvalidInputError: If the borrower inputs are invalid or the
            product is missing figures
    """
    _check_borrower(property_value, monthly_income, desired_term_months)
    if not product.is_complete:
        raise InvalidInputError(
            "product",
            product.product_name or product.bank_name,
            "missing rate, LTV, income ratio, max loan or max term",
        )

    financed = min(property_value * product.loan_to_value_pct / 100.0, product.max_loan_amount)
    monthly_rate = monthly_rate_from_effective_annual(product.effective_annual_rate_pct)
    max_installment = monthly_income * product.installment_to_income_pct / 100.0
    installment = monthly_payment(financed, monthly_rate * 1200.0, desired_term_months)

    suggested_term: int | None = None
    if installment <= max_installment:
        status = MortgageStatus.VIABLE
    else:
        suggested_term = recommended_term(financed, monthly_rate, max_installment)
        if suggested_term is not None and suggested_term <= product.max_term_months:
            status = MortgageStatus.EXTEND_TERM
        else:
            status = MortgageStatus.NOT_VIABLE
            suggested_term = product.max_term_months

    return MortgageEvaluation(
        bank_code=product.bank_code,
        bank_name=product.bank_name,
        product_name=product.product_name,
        financed_amount=financed,
        required_down_payment=property_value - financed,
        initial_installment=installment,
        max_allowed_installment=max_installment,
        desired_term_months=desired_term_months,
        recommended_term_months=suggested_term,
        max_term_months=product.max_term_months,
        status=status,
        monthly_rate_pct=monthly_rate * 100.0,
        effective_annual_rate_pct=product.effective_annual_rate_pct,
        total_financial_cost_pct=product.total_financial_cost_pct or 0.0,
    )


def _best_offer(offers: list[MortgageEvaluation]) -> MortgageEvaluation:
    viable = [e for e in offers if e.status is MortgageStatus.VIABLE]
    if viable:
        return min(viable, key=lambda e: e.initial_installment)
    extendable = [e for e in offers if e.status is MortgageStatus.EXTEND_TERM]
    if extendable:
        return min(extendable, key=lambda e: e.recommended_term_months or 0)
    return min(offers, key=lambda e: e.initial_installment)


def best_per_bank(evaluations: Iterable[MortgageEvaluation]) -> list[MortgageEvaluation]:
    """Keep one offer per bank code.

    Viable offers win on lowest installment, then extendable ones on
    shortest recommended term, then the cheapest non-viable one.
    """
    by_bank: dict[int, list[MortgageEvaluation]] = {}
    for evaluation in evaluations:
        by_bank.setdefault(evaluation.bank_code, []).append(evaluation)
    return [_best_offer(offers) for offers in by_bank.values()]


def rank_evaluations(evaluations: Iterable[MortgageEvaluation]) -> list[MortgageEvaluation]:
    """Order by status (viable first), then by installment."""
    return sorted(evaluations, key=lambda e: (STATUS_ORDER[e.status], e.initial_installment))


def mortgage_viability(
    property_value: float,
    monthly_income: float,
    desired_term_months: int,
    products: Iterable[MortgageProduct],
    one_per_bank: bool = True,
) -> list[MortgageEvaluation]:
    """Evaluate a product catalog for one borrower and rank the results.

    Incomplete products are skipped. An empty list means no product in
    the catalog could be evaluated.

    Args:
        property_value: Appraised value of the property
        monthly_income: Borrower's monthly income
        desired_term_months: Term the borrower asks for
        products: Catalog of mortgage offers
        one_per_bank: Keep only the best offer of each bank

    Returns:
        Evaluations ordered viable, extend term, not viable; cheapest
        installment first within each status
    """
    _check_borrower(property_value, monthly_income, desired_term_months)

    products = list(products)
    complete = [p for p in products if p.is_complete]
    evaluations = [
        evaluate_product(p, property_value, monthly_income, desired_term_months)
        for p in complete
    ]
    if one_per_bank:
        evaluations = best_per_bank(evaluations)
    ranked = rank_evaluations(evaluations)

    log.debug(
        "mortgage_viability_evaluated",
        products=len(products),
        skipped=len(products) - len(complete),
        results=len(ranked),
        viable=sum(1 for e in ranked if e.is_viable),
    )
    return ranked


def evaluations_frame(evaluations: Iterable[MortgageEvaluation]) -> pd.DataFrame:
    """Tabular view of ranked evaluations."""
    return pd.DataFrame(
        [e.model_dump(mode="json") for e in evaluations],
        columns=EVALUATION_COLUMNS,
    )
