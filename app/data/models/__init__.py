#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from app.data.models.card import CardModel, CardSetModel
from app.data.models.user import UserModel
from app.data.models.cart_item import CartLineModel

__all__ = ["CardModel", "CardSetModel", "UserModel", "CartLineModel"]
