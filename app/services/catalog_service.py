# app/services/catalog_service.py
import random
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from app.domain.errors import NotFoundError, ValidationError
from app.domain.schemas import CardOut, CardSetOut
from app.repos.card_repo import CardRepo
from app.utils.settings import FEATURED_CARDS_COUNT
from app.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
SUGGESTIONS_LIMIT = 10


class CatalogService:
    """Zapytania do katalogu kart - tylko odczyt."""

    def __init__(self, db: Session, rng: random.Random | None = None):
        self.repo = CardRepo(db)
        self.rng = rng or random.Random()

    def list_cards(self, page: int = DEFAULT_PAGE, limit: int = DEFAULT_LIMIT) -> List[CardOut]:
        if page < 1:
            raise ValidationError("page must be >= 1")
        if limit < 1 or limit > MAX_LIMIT:
            raise ValidationError(f"limit must be between 1 and {MAX_LIMIT}")

        skip = (page - 1) * limit
        cards = self.repo.list_cards(skip=skip, limit=limit)
        return [CardOut.model_validate(c) for c in cards]

    def get_card(self, card_id: int) -> CardOut:
        card = self.repo.get_card(card_id)
        if not card:
            raise NotFoundError("Card not found")
        return CardOut.model_validate(card)

    def featured_cards(self, count: int = FEATURED_CARDS_COUNT) -> List[Dict[str, Any]]:
        """
        Kazdy slot losuje niezaleznie offset w katalogu (duplikaty mozliwe),
        potem jeden set danej karty.
        """
        total = self.repo.count_cards()
        if total <= 0:
            raise NotFoundError("No documents found")

        featured = []
        for _ in range(count):
            card = self.repo.card_at_offset(self.rng.randrange(total))
            if card is None:
                #katalog skurczyl sie miedzy count a odczytem
                continue

            selected = self.rng.choice(card.sets) if card.sets else None
            featured.append(
                {
                    **CardOut.model_validate(card).model_dump(),
                    "selectedSet": CardSetOut.model_validate(selected) if selected else None,
                }
            )

        logger.info(f"Wylosowano {len(featured)} kart z {total}")
        return featured

    def search_cards(self, query: str) -> List[CardOut]:
        return [CardOut.model_validate(c) for c in self.repo.search_by_name(query)]

    def suggest_cards(self, query: str) -> List[str]:
        #pusty prefiks pasuje do wszystkiego - pierwsze nazwy alfabetycznie
        return self.repo.suggest_names(query, SUGGESTIONS_LIMIT)
