# app/data/models/card.py
from sqlalchemy import Column, Integer, String, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.orm import relationship

from app.data.database import Base


class CardModel(Base):
    __tablename__ = "cards"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False, index=True)
    attribute = Column(String, nullable=True)
    level = Column(Integer, nullable=True)
    atk = Column(Integer, nullable=True)
    def_ = Column("def", Integer, nullable=True)

    #stary licznik z katalogu, stan magazynu jest per set
    quantity = Column(Integer, nullable=False, default=0)
    images = Column(JSON, nullable=False, default=list)

    sets = relationship(
        "CardSetModel",
        back_populates="card",
        cascade="all, delete-orphan",
        order_by="CardSetModel.position",
    )


class CardSetModel(Base):
    """Wariant (druk) karty z wlasna cena i stanem. Identyfikowany zawsze przez (card_id, id)."""

    __tablename__ = "card_sets"

    id = Column(Integer, primary_key=True)
    card_id = Column(Integer, ForeignKey("cards.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    set_name = Column(String, nullable=True)
    set_code = Column(String, nullable=True)
    set_rarity = Column(String, nullable=True)
    set_rarity_code = Column(String, nullable=True)
    set_price = Column(String, nullable=True)
    quantity = Column(Integer, nullable=False, default=0)

    card = relationship("CardModel", back_populates="sets")

    __table_args__ = (UniqueConstraint("card_id", "id", name="u_card_set"),)
