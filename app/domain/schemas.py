# app/domain/schemas.py
from typing import List

from pydantic import AliasChoices, BaseModel, Field, ConfigDict


class CredentialsIn(BaseModel):
    """Signup / login. Walidacja wzorcow jest w AuthService (konkretne komunikaty)."""

    username: str
    password: str


class PrincipalOut(BaseModel):
    """To co trzymamy w sesji - bez hasla."""

    user_id: int
    role: str


class UserOut(BaseModel):
    id: int
    username: str
    role: str
    cart: List[int] = []


class LoginOut(BaseModel):
    message: str
    user: UserOut


class MessageOut(BaseModel):
    message: str


class CardSetOut(BaseModel):
    id: int
    set_name: str | None = None
    set_code: str | None = None
    set_rarity: str | None = None
    set_rarity_code: str | None = None
    set_price: str | None = None
    quantity: int

    model_config = ConfigDict(from_attributes=True)


class CardOut(BaseModel):
    id: int
    name: str
    attribute: str | None = None
    level: int | None = None
    atk: int | None = None
    def_: int | None = Field(
        None,
        validation_alias=AliasChoices("def_", "def"),
        serialization_alias="def",
    )
    quantity: int
    sets: List[CardSetOut]
    images: List[str]

    model_config = ConfigDict(from_attributes=True)


class FeaturedCardOut(CardOut):
    selectedSet: CardSetOut | None = None


class AddToCartIn(BaseModel):
    userId: int = Field(..., gt=0)
    cardId: int = Field(..., gt=0)
    setId: int = Field(..., gt=0)
    quantity: int = Field(1, gt=0, description="Ilosc do dodania (musi byc > 0)")


class AddToCartOut(BaseModel):
    message: str
    cartItemId: int
    updatedQuantity: int


class CartLineOut(BaseModel):
    cartId: int
    cardId: CardOut
    setId: int
    quantity: int


class UpdateCartQuantityIn(BaseModel):
    quantity: int = Field(..., gt=0)


class UpdateCartQuantityOut(BaseModel):
    message: str
    quantity: int
    quantityDifference: int


class DecrementSetQuantityIn(BaseModel):
    quantityDifference: int


class SetQuantityOut(BaseModel):
    message: str
    quantity: int


class AdjustQuantityIn(BaseModel):
    cardName: str = Field(..., min_length=1)
    newQuantity: int = Field(..., ge=0)
    #historyczna nazwa pola, niesie id seta
    setIndex: int = Field(..., gt=0)
