# app/repos/card_repo.py
from typing import List

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from app.data.models.card import CardModel, CardSetModel


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class CardRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_card(self, card_id: int) -> CardModel | None:
        return self.db.get(CardModel, card_id)

    def count_cards(self) -> int:
        return self.db.execute(select(func.count(CardModel.id))).scalar_one()

    def list_cards(self, skip: int, limit: int) -> List[CardModel]:
        stmt = (
            select(CardModel)
            .options(selectinload(CardModel.sets))
            .order_by(CardModel.id)
            .offset(skip)
            .limit(limit)
        )
        return list(self.db.execute(stmt).scalars().all())

    def card_at_offset(self, offset: int) -> CardModel | None:
        stmt = (
            select(CardModel)
            .options(selectinload(CardModel.sets))
            .order_by(CardModel.id)
            .offset(offset)
            .limit(1)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def search_by_name(self, query: str) -> List[CardModel]:
        pattern = f"%{_escape_like(query)}%"
        stmt = (
            select(CardModel)
            .options(selectinload(CardModel.sets))
            .where(CardModel.name.ilike(pattern, escape="\\"))
            .order_by(CardModel.id)
        )
        return list(self.db.execute(stmt).scalars().all())

    def suggest_names(self, prefix: str, limit: int) -> List[str]:
        pattern = f"{_escape_like(prefix)}%"
        stmt = (
            select(CardModel.name)
            .where(CardModel.name.ilike(pattern, escape="\\"))
            .order_by(CardModel.name)
            .limit(limit)
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_set(self, card_id: int, set_id: int, for_update: bool = False) -> CardSetModel | None:
        #set zawsze po kluczu (card_id, set_id), samo set_id nie wystarcza
        stmt = select(CardSetModel).where(
            CardSetModel.card_id == card_id,
            CardSetModel.id == set_id,
        )
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_set_by_card_name(self, card_name: str, set_id: int, for_update: bool = False) -> CardSetModel | None:
        stmt = (
            select(CardSetModel)
            .join(CardModel, CardModel.id == CardSetModel.card_id)
            .where(CardModel.name == card_name, CardSetModel.id == set_id)
        )
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return self.db.execute(stmt).scalars().first()
