"""
Customer-name matching against unfulfilled store orders.

A store order matches when its customer name equals the extracted name
(case-insensitive, trimmed) or when a part of one name contains a part of the
other. Search-name parts shorter than ``name_match_min_part_length`` are
ignored for the partial rule.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Optional, Union

from shipmail.config import ExtractorConfig
from shipmail.models.order import OrderSummary

logger = logging.getLogger(__name__)

OrderLike = Union[OrderSummary, Mapping[str, Any]]


def _as_summary(order: OrderLike) -> OrderSummary:
    if isinstance(order, OrderSummary):
        return order
    return OrderSummary.from_store_payload(order)


def names_match(search_name: str, order_name: str, min_part_length: int = 3) -> bool:
    """Apply the exact-or-partial name rule to two already lowercased names."""
    if not order_name:
        return False
    if order_name == search_name:
        return True

    order_parts = order_name.split()
    for search_part in search_name.split():
        if len(search_part) < min_part_length:
            continue
        for order_part in order_parts:
            if search_part in order_part or order_part in search_part:
                return True
    return False


def match_orders_by_customer_name(
    customer_name: Optional[str],
    orders: Iterable[OrderLike],
    config: Optional[ExtractorConfig] = None,
) -> List[OrderSummary]:
    """
    Return the orders whose customer matches *customer_name*.

    Args:
        customer_name: Name extracted from a confirmation email.
        orders:        :class:`OrderSummary` objects or raw store order dicts.
        config:        Optional :class:`~shipmail.config.ExtractorConfig`.

    Returns:
        Matching orders, in input order. Empty when *customer_name* is empty.
    """
    if config is None:
        config = ExtractorConfig.default()

    if not customer_name or not customer_name.strip():
        logger.error("No customer name provided for order matching")
        return []

    search_name = customer_name.lower().strip()
    matching = [
        summary
        for summary in (_as_summary(o) for o in orders)
        if names_match(
            search_name,
            summary.customer_name.lower().strip(),
            config.name_match_min_part_length,
        )
    ]

    logger.info(
        "Found %d unfulfilled orders matching customer name: %s",
        len(matching), customer_name,
    )
    return matching
