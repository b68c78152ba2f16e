from sqlalchemy import Column, Integer, ForeignKey, ForeignKeyConstraint, UniqueConstraint
from sqlalchemy.orm import relationship

from app.data.database import Base


class CartLineModel(Base):
    __tablename__ = "cart_lines"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    card_id = Column(Integer, ForeignKey("cards.id", ondelete="CASCADE"), nullable=False)
    set_id = Column(Integer, nullable=False)

    quantity = Column(Integer, nullable=False, default=1)
    #ile sztuk ta pozycja trzyma zdjete ze stanu setu (tylko polityka reserve)
    reserved = Column(Integer, nullable=False, default=0)

    user = relationship("UserModel", back_populates="cart")
    card = relationship("CardModel")

    __table_args__ = (
        #set wskazywany zawsze razem z karta
        ForeignKeyConstraint(
            ["card_id", "set_id"],
            ["card_sets.card_id", "card_sets.id"],
            ondelete="CASCADE",
        ),
        UniqueConstraint("user_id", "card_id", "set_id", name="u_user_card_set"),
    )
