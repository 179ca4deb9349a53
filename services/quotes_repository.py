"""
Quotes Repository - quote lifecycle rules.

Covers listing, reading, creating, fully replacing and deleting a user's quotes
and converting an approved quote into an order. Every operation runs inside
the caller's session; the caller's transaction makes the multi-row writes atomic.
"""

import logging
from typing import Dict, List

from sqlalchemy.orm import Session, selectinload

from database.models import CabinetItem, Order, Quote, Space
from errors import ForbiddenError, InvalidStateError, NotFoundError

logger = logging.getLogger(__name__)

# Fields copied from a quote onto the order created from it
ORDER_SNAPSHOT_FIELDS = (
    'client_name', 'email', 'phone', 'project_name', 'installation_address',
    'total', 'adjustment_type', 'adjustment_percentage', 'adjusted_total',
)

QUOTE_SCALAR_FIELDS = ORDER_SNAPSHOT_FIELDS + ('status',)


def build_spaces(spaces_data: List[Dict]) -> List[Space]:
    """Build the Space/CabinetItem graph for a validated ``spaces`` payload."""
    spaces = []
    for space_idx, space_data in enumerate(spaces_data):
        space = Space(name=space_data['name'], position=space_idx)
        space.items = [
            CabinetItem(
                product_id=item.get('product_id'),
                material=item.get('material'),
                width=item['width'],
                height=item['height'],
                depth=item['depth'],
                price=item['price'],
                position=item_idx
            )
            for item_idx, item in enumerate(space_data['items'])
        ]
        spaces.append(space)
    return spaces


class QuotesRepository:
    """Quote operations scoped to one requesting user."""

    def __init__(self, session: Session, user_id: str):
        self.session = session
        self.user_id = user_id

    def _query(self):
        return self.session.query(Quote).options(
            selectinload(Quote.spaces).selectinload(Space.items)
        )

    def _get_owned(self, quote_id: str) -> Quote:
        """Existence is checked before ownership: 404 for missing, 403 for someone else's."""
        quote = self._query().filter(Quote.id == quote_id).first()
        if not quote:
            raise NotFoundError('Quote not found')
        if quote.user_id != self.user_id:
            logger.warning(f"User {self.user_id} denied access to quote {quote_id}")
            raise ForbiddenError()
        return quote

    def _delete_tree(self, quote_id: str) -> None:
        """Remove every item, then every space, of a quote."""
        space_ids = self.session.query(Space.id).filter(Space.quote_id == quote_id)
        self.session.query(CabinetItem).filter(
            CabinetItem.space_id.in_(space_ids.scalar_subquery())
        ).delete(synchronize_session=False)
        self.session.query(Space).filter(
            Space.quote_id == quote_id
        ).delete(synchronize_session=False)

    # =========================================================================
    # READ
    # =========================================================================

    def list_quotes(self) -> List[Dict]:
        """All of the requester's quotes, newest first."""
        quotes = self._query().filter(
            Quote.user_id == self.user_id
        ).order_by(Quote.created_at.desc()).all()
        return [q.to_dict() for q in quotes]

    def get_quote(self, quote_id: str) -> Dict:
        return self._get_owned(quote_id).to_dict()

    # =========================================================================
    # WRITE
    # =========================================================================

    def create_quote(self, data: Dict) -> Dict:
        """Persist a quote with its whole space/item tree, owned by the requester."""
        quote = Quote(user_id=self.user_id)
        for field in QUOTE_SCALAR_FIELDS:
            setattr(quote, field, data.get(field))
        quote.spaces = build_spaces(data['spaces'])

        self.session.add(quote)
        self.session.flush()
        logger.info(f"Created quote: {quote.id} ({len(quote.spaces)} spaces)")
        return quote.to_dict()

    def update_quote(self, quote_id: str, data: Dict) -> Dict:
        """
        Full replacement: scalar fields are overwritten and the space/item
        tree is deleted and rebuilt from the payload.
        """
        quote = self._get_owned(quote_id)

        self._delete_tree(quote.id)
        self.session.expire(quote, ['spaces'])

        for field in QUOTE_SCALAR_FIELDS:
            setattr(quote, field, data.get(field))
        quote.spaces = build_spaces(data['spaces'])

        self.session.flush()
        self.session.refresh(quote)
        logger.info(f"Updated quote: {quote_id} (status={quote.status})")
        return quote.to_dict()

    def delete_quote(self, quote_id: str) -> None:
        """Delete items, spaces, then the quote. Converted orders keep their snapshot."""
        quote = self._get_owned(quote_id)

        self.session.query(Order).filter(
            Order.quote_id == quote.id
        ).update({Order.quote_id: None}, synchronize_session=False)

        self._delete_tree(quote.id)
        self.session.expire(quote, ['spaces', 'orders'])
        self.session.delete(quote)
        self.session.flush()
        logger.info(f"Deleted quote: {quote_id}")

    def convert_to_order(self, quote_id: str) -> Dict:
        """
        Create an order snapshotting an approved quote.

        Raises:
            NotFoundError: no such quote
            ForbiddenError: quote belongs to another user
            InvalidStateError: quote status is not ``approved``
        """
        quote = self._get_owned(quote_id)
        if quote.status != 'approved':
            raise InvalidStateError('Only approved quotes can be converted to orders')

        order = Order(quote_id=quote.id, user_id=self.user_id, status='pending')
        for field in ORDER_SNAPSHOT_FIELDS:
            setattr(order, field, getattr(quote, field))

        self.session.add(order)
        self.session.flush()
        logger.info(f"Converted quote {quote_id} to order {order.id}")
        return order.to_dict()
