# app/services/cart_service.py
from typing import Any, Dict, List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.data.database import transaction
from app.data.models.card import CardSetModel
from app.data.models.cart_item import CartLineModel
from app.domain.errors import InsufficientStockError, NotFoundError, ValidationError
from app.domain.schemas import CardOut
from app.repos.card_repo import CardRepo
from app.repos.cart_repo import CartRepo
from app.repos.user_repo import UserRepo
from app.utils.settings import STOCK_POLICY, STOCK_POLICY_DECOUPLED, STOCK_POLICY_RESERVE
from app.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Use case'y koszyka i uzgadnianie ilosci z magazynem.

    Kazda operacja wielokrokowa idzie w jednej transakcji (commit albo rollback).
    Polityka magazynu (STOCK_POLICY):
    -decoupled: koszyk nie zmienia stanu setow
    -reserve: wzrost ilosci pozycji zdejmuje roznice ze stanu setu, spadek oddaje
     (najwyzej tyle ile pozycja zarezerwowala), usuniecie oddaje cala rezerwacje
    """

    def __init__(self, db: Session, stock_policy: str = STOCK_POLICY):
        if stock_policy not in (STOCK_POLICY_DECOUPLED, STOCK_POLICY_RESERVE):
            raise ValueError(f"Nieznana polityka magazynu: {stock_policy}")

        self.db = db
        self.repo = CartRepo(db)
        self.cards = CardRepo(db)
        self.users = UserRepo(db)
        self.stock_policy = stock_policy

    @property
    def reserves_stock(self) -> bool:
        return self.stock_policy == STOCK_POLICY_RESERVE

    #query - odczyt
    def get_cart(self, user_id: int) -> List[Dict[str, Any]]:
        if not self.users.get_user(user_id):
            raise NotFoundError("user not found")

        return [
            {
                "cartId": line.id,
                "cardId": CardOut.model_validate(line.card),
                "setId": line.set_id,
                "quantity": line.quantity,
            }
            for line in self.repo.get_user_lines(user_id)
        ]

    #commands
    def add_to_cart(self, user_id: int, card_id: int, set_id: int, quantity: int) -> CartLineModel:
        if quantity <= 0:
            raise ValidationError("Quantity must be greater than 0")

        try:
            return self._add_to_cart(user_id, card_id, set_id, quantity)
        except IntegrityError:
            #rownolegle pierwsze dodanie tej samej pozycji wygralo u_user_card_set, powtarzamy jako inkrementacje
            logger.warning(f"Kolizja przy dodawaniu (user {user_id}, card {card_id}, set {set_id}), ponawiam")
            return self._add_to_cart(user_id, card_id, set_id, quantity)

    def _add_to_cart(self, user_id: int, card_id: int, set_id: int, quantity: int) -> CartLineModel:
        with transaction(self.db):
            user = self.users.get_user(user_id)
            if not user:
                raise NotFoundError("User not found")

            if not self.cards.get_set(card_id, set_id):
                raise NotFoundError("Set not found in card")

            line = self.repo.find_line(user_id, card_id, set_id, for_update=True)

            if line:
                logger.info(
                    f"Pozycja {line.id} juz w koszyku usera {user_id}, zwiekszam ilosc "
                    f"z {line.quantity} do {line.quantity + quantity}"
                )
                line.quantity += quantity
            else:
                line = self.repo.add_line(
                    CartLineModel(
                        user_id=user_id,
                        card_id=card_id,
                        set_id=set_id,
                        quantity=quantity,
                        reserved=0,
                    )
                )
                logger.info(f"Dodano pozycje {line.id} (card {card_id}, set {set_id}) do koszyka usera {user_id}")

            #membership w user.cart - idempotentnie
            if line not in user.cart:
                user.cart.append(line)

        return line

    def update_quantity(self, user_id: int, line_id: int, quantity: int) -> Dict[str, int]:
        if quantity <= 0:
            raise ValidationError("Quantity must be greater than 0")

        with transaction(self.db):
            line = self.repo.get_user_line(user_id, line_id, for_update=True)
            if not line:
                raise NotFoundError("Cart item not found")

            difference = quantity - line.quantity

            if self.reserves_stock and difference != 0:
                card_set = self.cards.get_set(line.card_id, line.set_id, for_update=True)
                if not card_set:
                    raise NotFoundError("Set not found in card")

                if difference > 0:
                    self._reserve(line, card_set, difference)
                else:
                    self._release(line, card_set, -difference)

            line.quantity = quantity

        logger.info(f"Pozycja {line_id}: ilosc {quantity} (roznica {difference})")

        return {"quantity": quantity, "quantityDifference": difference}

    def remove_from_cart(self, user_id: int, line_id: int) -> None:
        with transaction(self.db):
            user = self.users.get_user(user_id)
            if not user:
                raise NotFoundError("User not found")

            line = self.repo.get_user_line(user_id, line_id, for_update=True)
            if not line:
                raise NotFoundError("Cart item not found")

            if line.reserved:
                card_set = self.cards.get_set(line.card_id, line.set_id, for_update=True)
                if card_set:
                    self._release(line, card_set, line.reserved)

            #delete-orphan: zdjecie z listy usera kasuje wiersz w tym samym flushu
            user.cart.remove(line)
            self.db.flush()

        logger.info(f"Pozycja {line_id} usunieta z koszyka usera {user_id}")

    def _reserve(self, line: CartLineModel, card_set: CardSetModel, amount: int) -> None:
        if card_set.quantity < amount:
            logger.warning(
                f"Brak stanu na secie {card_set.id}: potrzeba {amount}, jest {card_set.quantity}"
            )
            raise InsufficientStockError(
                f"Insufficient stock: requested {amount}, available {card_set.quantity}",
                requested=amount,
                available=card_set.quantity,
            )
        card_set.quantity -= amount
        line.reserved += amount

    def _release(self, line: CartLineModel, card_set: CardSetModel, amount: int) -> None:
        #oddajemy najwyzej tyle ile pozycja faktycznie zdjela ze stanu
        released = min(amount, line.reserved)
        card_set.quantity += released
        line.reserved -= released
