# app/data/seed.py
from sqlalchemy.orm import Session

from app.data.database import Base, SessionLocal, engine, transaction
from app.data.models.card import CardModel, CardSetModel
from app.utils.logging import get_logger

logger = get_logger(__name__)

SAMPLE_CARDS = [
    {
        "name": "Blue-Eyes White Dragon",
        "attribute": "LIGHT",
        "level": 8,
        "atk": 3000,
        "def_": 2500,
        "images": ["https://images.ygoprodeck.com/images/cards/89631139.jpg"],
        "sets": [
            {"set_name": "Legend of Blue Eyes White Dragon", "set_code": "LOB-001", "set_rarity": "Ultra Rare", "set_rarity_code": "(UR)", "set_price": "120.00", "quantity": 5},
            {"set_name": "Starter Deck: Kaiba", "set_code": "SDK-001", "set_rarity": "Ultra Rare", "set_rarity_code": "(UR)", "set_price": "45.50", "quantity": 3},
        ],
    },
    {
        "name": "Dark Magician",
        "attribute": "DARK",
        "level": 7,
        "atk": 2500,
        "def_": 2100,
        "images": ["https://images.ygoprodeck.com/images/cards/46986414.jpg"],
        "sets": [
            {"set_name": "Legend of Blue Eyes White Dragon", "set_code": "LOB-005", "set_rarity": "Ultra Rare", "set_rarity_code": "(UR)", "set_price": "60.00", "quantity": 4},
        ],
    },
    {
        "name": "Pot of Greed",
        "images": ["https://images.ygoprodeck.com/images/cards/55144522.jpg"],
        "sets": [
            {"set_name": "Legend of Blue Eyes White Dragon", "set_code": "LOB-119", "set_rarity": "Rare", "set_rarity_code": "(R)", "set_price": "8.99", "quantity": 12},
        ],
    },
]


def build_card(data: dict) -> CardModel:
    fields = {k: v for k, v in data.items() if k != "sets"}
    fields.setdefault("quantity", 0)
    card = CardModel(**fields)
    card.sets = [CardSetModel(position=i, **s) for i, s in enumerate(data.get("sets", []))]
    return card


def seed(db: Session, cards: list[dict] = SAMPLE_CARDS) -> int:
    # not forcing: only seed if empty
    if db.query(CardModel).first():
        return 0

    with transaction(db):
        db.add_all([build_card(c) for c in cards])

    logger.info(f"Seeded {len(cards)} cards")
    return len(cards)


if __name__ == "__main__":
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed(db)
    finally:
        db.close()
