# app/api/routers/cards.py
import random
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import get_rng
from app.data.database import get_db
from app.domain.schemas import AdjustQuantityIn, CardOut, DecrementSetQuantityIn, FeaturedCardOut, MessageOut, SetQuantityOut
from app.services.catalog_service import CatalogService, DEFAULT_LIMIT, DEFAULT_PAGE
from app.services.stock_service import StockService

router = APIRouter(prefix="/api", tags=["cards"])


@router.get("/cards", response_model=List[CardOut])
def list_cards(
    page: int = Query(DEFAULT_PAGE),
    limit: int = Query(DEFAULT_LIMIT),
    db: Session = Depends(get_db),
):
    return CatalogService(db).list_cards(page, limit)


@router.get("/featured-cards", response_model=List[FeaturedCardOut])
def featured_cards(db: Session = Depends(get_db), rng: random.Random = Depends(get_rng)):
    return CatalogService(db, rng=rng).featured_cards()


@router.get("/cards/search", response_model=List[CardOut])
def search_cards(q: str = Query(""), db: Session = Depends(get_db)):
    return CatalogService(db).search_cards(q)


@router.get("/cards/suggestions", response_model=List[str])
def suggest_cards(q: str = Query(""), db: Session = Depends(get_db)):
    return CatalogService(db).suggest_cards(q)


@router.put("/cards/adjust-quantity", response_model=MessageOut)
def adjust_quantity(payload: AdjustQuantityIn, db: Session = Depends(get_db)):
    StockService(db).adjust_set_quantity(payload.cardName, payload.setIndex, payload.newQuantity)
    return {"message": "Quantity adjusted successfully"}


@router.get("/cards/{card_id}", response_model=CardOut)
def get_card(card_id: int, db: Session = Depends(get_db)):
    return CatalogService(db).get_card(card_id)


@router.put("/update-quantity/{card_id}/{set_id}", response_model=SetQuantityOut)
def update_set_quantity(
    card_id: int,
    set_id: int,
    payload: DecrementSetQuantityIn,
    db: Session = Depends(get_db),
):
    quantity = StockService(db).decrement_set_quantity(card_id, set_id, payload.quantityDifference)
    return {"message": "Quantity updated in database", "quantity": quantity}
