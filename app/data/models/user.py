from sqlalchemy import Column, Integer, String, CheckConstraint
from sqlalchemy.orm import relationship

from app.data.database import Base

ROLE_USER = "user"
ROLE_ADMIN = "admin"


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    username = Column(String(16), nullable=False, unique=True, index=True)
    password_hash = Column(String, nullable=False)
    role = Column(String, nullable=False, default=ROLE_USER)

    #lista pozycji koszyka usera, kolejnosc dodawania
    cart = relationship(
        "CartLineModel",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="CartLineModel.id",
    )

    __table_args__ = (CheckConstraint("role IN ('user', 'admin')", name="ck_user_role"),)
