"""Revenue totals computed from Stripe balance transactions."""

from typing import Any, Iterable

CHARGE_TYPES = {"charge", "payment"}
REFUND_TYPES = {"refund", "payment_refund"}
DEFAULT_CURRENCY = "usd"


def money(cents: int) -> dict[str, int | float]:
    return {"cents": cents, "dollars": round(cents / 100, 2)}


def summarize_revenue(transactions: Iterable[Any]) -> dict[str, Any]:
    """
    Totals over charge and refund balance transactions.

    Amounts are in the account's settlement currency. Refund transactions carry
    negative amounts, so ``net_revenue`` already has refunds and fees removed.
    Other transaction types (payouts, adjustments) are ignored.
    """
    orders = revenue = refunded = fees = net = 0
    currency = None

    for transaction in transactions:
        kind = transaction["type"]
        if kind not in CHARGE_TYPES and kind not in REFUND_TYPES:
            continue
        currency = currency or transaction["currency"]
        if kind in CHARGE_TYPES:
            orders += 1
            revenue += transaction["amount"]
        else:
            refunded -= transaction["amount"]
        fees += transaction["fee"]
        net += transaction["net"]

    average = round(revenue / orders) if orders else 0
    net_average = round(net / orders) if orders else 0
    return {
        "currency": currency or DEFAULT_CURRENCY,
        "orders": orders,
        "revenue": money(revenue),
        "refunds": money(refunded),
        "fees": money(fees),
        "net_revenue": money(net),
        "average_order_value": money(average),
        "net_average_order_value": money(net_average),
    }
