# studio_pos/api/views.py
from typing import Any, Dict

from studio_pos.domain.models import Transaction
from studio_pos.services.cart_service import item_view


def transaction_view(transaction: Transaction) -> Dict[str, Any]:
    return {
        "id": transaction.id,
        "items": [item_view(i) for i in transaction.items],
        "total": transaction.total,
        "amount_paid": transaction.amount_paid,
        "change": transaction.change,
        "payment_method": transaction.payment_method,
        "payment_type": transaction.payment_type,
        "dp_amount": transaction.dp_amount,
        "remaining_amount": transaction.remaining_amount,
        "customer_name": transaction.customer_name,
        "customer_phone": transaction.customer_phone,
        "created_at": transaction.created_at,
        "created_by": transaction.created_by,
    }
