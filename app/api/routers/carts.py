#app/api/routers/carts.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_stock_policy
from app.data.database import get_db
from app.domain.schemas import (
    AddToCartIn,
    AddToCartOut,
    CartLineOut,
    MessageOut,
    UpdateCartQuantityIn,
    UpdateCartQuantityOut,
)
from app.services.cart_service import CartService

router = APIRouter(tags=["carts"])


def get_service(db: Session = Depends(get_db), stock_policy: str = Depends(get_stock_policy)):
    return CartService(db=db, stock_policy=stock_policy)


@router.post("/add-to-cart", response_model=AddToCartOut)
def add_to_cart(payload: AddToCartIn, svc: CartService = Depends(get_service)):
    line = svc.add_to_cart(
        user_id=payload.userId,
        card_id=payload.cardId,
        set_id=payload.setId,
        quantity=payload.quantity,
    )
    return {
        "message": "Item added to cart successfully",
        "cartItemId": line.id,
        "updatedQuantity": line.quantity,
    }


@router.get("/api/cart/{user_id}", response_model=List[CartLineOut])
def get_cart(user_id: int, svc: CartService = Depends(get_service)):
    return svc.get_cart(user_id)


@router.put("/api/cart/{user_id}/{cart_item_id}", response_model=UpdateCartQuantityOut)
def update_cart_quantity(
    user_id: int,
    cart_item_id: int,
    payload: UpdateCartQuantityIn,
    svc: CartService = Depends(get_service),
):
    result = svc.update_quantity(user_id, cart_item_id, payload.quantity)
    return {"message": "Quantity updated successfully", **result}


@router.delete("/api/cart/{user_id}/{cart_item_id}", response_model=MessageOut)
def remove_from_cart(user_id: int, cart_item_id: int, svc: CartService = Depends(get_service)):
    svc.remove_from_cart(user_id, cart_item_id)
    return {"message": "Item removed from cart successfully"}
