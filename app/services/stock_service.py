# app/services/stock_service.py
from sqlalchemy.orm import Session

from app.data.database import transaction
from app.domain.errors import InsufficientStockError, NotFoundError, ValidationError
from app.repos.card_repo import CardRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)


class StockService:
    """Administracja stanem setow w katalogu."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = CardRepo(db)

    def adjust_set_quantity(self, card_name: str, set_id: int, new_quantity: int) -> int:
        if new_quantity < 0:
            raise ValidationError("Quantity cannot be negative")

        with transaction(self.db):
            card_set = self.repo.get_set_by_card_name(card_name, set_id, for_update=True)
            if not card_set:
                raise NotFoundError("Set not found in card")

            old = card_set.quantity
            card_set.quantity = new_quantity

        logger.info(f"Stan setu {set_id} karty {card_name!r}: {old} -> {new_quantity}")
        return new_quantity

    def decrement_set_quantity(self, card_id: int, set_id: int, delta: int) -> int:
        """
        Odejmuje delta od stanu setu (ujemna delta = dostawa).
        Ponizej zera: zapisuje 0 i zglasza InsufficientStockError.
        """
        with transaction(self.db):
            if not self.repo.get_card(card_id):
                raise NotFoundError("Card not found")

            card_set = self.repo.get_set(card_id, set_id, for_update=True)
            if not card_set:
                raise NotFoundError("Set not found in card")

            available = card_set.quantity
            remaining = available - delta
            card_set.quantity = max(remaining, 0)

        if remaining < 0:
            logger.warning(f"Set {set_id} karty {card_id}: zadano {delta}, bylo {available}, stan 0")
            raise InsufficientStockError(
                f"Insufficient stock: requested {delta}, available {available}",
                requested=delta,
                available=available,
            )

        logger.info(f"Set {set_id} karty {card_id}: {available} -> {remaining}")
        return remaining
