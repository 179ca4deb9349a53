"""
Orders Repository - order reads and receipt accounting.

The percentage invariant: the payment_percentage of all receipts on one order
never sums to more than 100.
"""

import logging
from datetime import datetime
from typing import Dict, List

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from database.models import Order, Quote, Receipt, Space
from errors import ForbiddenError, InvalidStateError, NotFoundError

logger = logging.getLogger(__name__)

MAX_TOTAL_PERCENTAGE = 100
# Sums are rounded to this many places so 33.3 + 33.3 + 33.4 lands on 100
PERCENTAGE_PRECISION = 6


class OrdersRepository:
    """Order operations scoped to one requesting user."""

    def __init__(self, session: Session, user_id: str):
        self.session = session
        self.user_id = user_id

    def _query(self):
        return self.session.query(Order).options(
            selectinload(Order.receipts),
            selectinload(Order.quote).selectinload(Quote.spaces).selectinload(Space.items)
        )

    def _get_owned(self, order_id: str, lock: bool = False) -> Order:
        """Existence first, then ownership. ``lock`` takes a row lock for the transaction."""
        query = self.session.query(Order).filter(Order.id == order_id)
        if lock:
            query = query.with_for_update()
        order = query.first()
        if not order:
            raise NotFoundError('Order not found')
        if order.user_id != self.user_id:
            logger.warning(f"User {self.user_id} denied access to order {order_id}")
            raise ForbiddenError()
        return order

    def _get_receipt(self, order: Order, receipt_id: str) -> Receipt:
        receipt = self.session.query(Receipt).filter(
            Receipt.id == receipt_id,
            Receipt.order_id == order.id
        ).first()
        if not receipt:
            raise NotFoundError('Receipt not found')
        return receipt

    # =========================================================================
    # ORDERS
    # =========================================================================

    def list_orders(self) -> List[Dict]:
        """All of the requester's orders with receipts and the source quote tree, newest first."""
        orders = self._query().filter(
            Order.user_id == self.user_id
        ).order_by(Order.created_at.desc()).all()
        return [o.to_dict() for o in orders]

    def get_order(self, order_id: str) -> Dict:
        self._get_owned(order_id)
        return self._query().filter(Order.id == order_id).one().to_dict()

    # =========================================================================
    # RECEIPTS
    # =========================================================================

    def allocated_percentage(self, order_id: str) -> float:
        total = self.session.query(
            func.coalesce(func.sum(Receipt.payment_percentage), 0)
        ).filter(Receipt.order_id == order_id).scalar()
        return float(total)

    def add_receipt(self, order_id: str, data: Dict) -> Dict:
        """
        Create a draft receipt unless it would push the order past 100 %.

        The order row is locked first so concurrent calls for the same order
        run the sum-then-insert one at a time.
        """
        order = self._get_owned(order_id, lock=True)

        allocated = self.allocated_percentage(order.id)
        requested = data['payment_percentage']
        if round(allocated + requested, PERCENTAGE_PRECISION) > MAX_TOTAL_PERCENTAGE:
            logger.info(
                f"Rejected receipt on order {order_id}: {allocated} + {requested} exceeds 100%"
            )
            raise InvalidStateError('Total payment percentage cannot exceed 100%')

        receipt = Receipt(
            order_id=order.id,
            payment_percentage=requested,
            amount=data['amount'],
            status='draft'
        )
        self.session.add(receipt)
        self.session.flush()
        logger.info(f"Created receipt {receipt.id} on order {order_id} ({requested}%)")
        return receipt.to_dict()

    def update_receipt_status(self, order_id: str, receipt_id: str, status: str) -> Dict:
        """Set a receipt's status. ``sent`` stamps sent_at, any other status clears it."""
        order = self._get_owned(order_id)
        receipt = self._get_receipt(order, receipt_id)

        receipt.status = status
        receipt.sent_at = datetime.utcnow() if status == 'sent' else None
        self.session.flush()
        logger.info(f"Receipt {receipt_id} on order {order_id} is now {status}")
        return receipt.to_dict()

    def delete_receipt(self, order_id: str, receipt_id: str) -> None:
        """Only draft receipts can be deleted."""
        order = self._get_owned(order_id)
        receipt = self._get_receipt(order, receipt_id)

        if receipt.status != 'draft':
            raise InvalidStateError('Only draft receipts can be deleted')

        self.session.delete(receipt)
        self.session.flush()
        logger.info(f"Deleted receipt {receipt_id} from order {order_id}")
