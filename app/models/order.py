"""
app/models/order.py

Purpose: Order document model

- Server-assigned orderId / timestamp
- Caller-supplied fields stored as-is (items, total, userId, ...)
"""

from typing import Any, Dict

ORDER_ID_PREFIX = "order_"
SERVER_FIELDS = ("orderId", "timestamp")


def format_order_id(millis: int) -> str:
    return f"{ORDER_ID_PREFIX}{millis}"


def new_order_document(fields: Dict[str, Any], order_id: str, timestamp: str) -> Dict[str, Any]:
    order = {"orderId": order_id, "timestamp": timestamp}
    order.update({k: v for k, v in fields.items() if k not in SERVER_FIELDS})
    return order
