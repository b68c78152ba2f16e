# app/repos/cart_repo.py
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from app.data.models.card import CardModel, CardSetModel
from app.data.models.cart_item import CartLineModel


class CartRepo:
    """Dostep do pozycji koszyka. Nie commituje - granice transakcji trzyma serwis."""

    def __init__(self, db: Session):
        self.db = db

    def get_user_line(self, user_id: int, line_id: int, for_update: bool = False) -> CartLineModel | None:
        stmt = select(CartLineModel).where(
            CartLineModel.id == line_id,
            CartLineModel.user_id == user_id,
        )
        return self._fetch_one(stmt, for_update)

    def find_line(self, user_id: int, card_id: int, set_id: int, for_update: bool = False) -> CartLineModel | None:
        stmt = select(CartLineModel).where(
            CartLineModel.user_id == user_id,
            CartLineModel.card_id == card_id,
            CartLineModel.set_id == set_id,
        )
        return self._fetch_one(stmt, for_update)

    def _fetch_one(self, stmt, for_update: bool) -> CartLineModel | None:
        if for_update:
            #blokada wiersza + swieze wartosci zamiast tych z identity map
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_user_lines(self, user_id: int) -> List[CartLineModel]:
        #join po secie - pozycje wskazujace na nieistniejacy set traktujemy jak brak
        stmt = (
            select(CartLineModel)
            .join(CardModel, CardModel.id == CartLineModel.card_id)
            .join(
                CardSetModel,
                (CardSetModel.card_id == CartLineModel.card_id)
                & (CardSetModel.id == CartLineModel.set_id),
            )
            .options(selectinload(CartLineModel.card).selectinload(CardModel.sets))
            .where(CartLineModel.user_id == user_id)
            .order_by(CartLineModel.id)
        )
        return list(self.db.execute(stmt).scalars().all())

    def add_line(self, line: CartLineModel) -> CartLineModel:
        self.db.add(line)
        self.db.flush()
        return line
