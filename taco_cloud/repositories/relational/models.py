# ==============================================================================
# TABLAS RELACIONALES (SQLAlchemy ORM)
# ==============================================================================
# Las filas ORM son internas del backend: los repositorios las convierten
# a las dataclasses de taco_cloud.models antes de devolverlas.
# ==============================================================================

from datetime import datetime
from typing import List

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, declarative_base, mapped_column, relationship

Base = declarative_base()


class IngredientRow(Base):
    __tablename__ = 'ingredient'

    id: Mapped[str] = mapped_column(String(4), primary_key=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    type: Mapped[str] = mapped_column(String(10), nullable=False)


class TacoRow(Base):
    __tablename__ = 'taco'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )

    # Orden de los ingredientes tal como se enviaron
    ingredient_links: Mapped[List['TacoIngredientRow']] = relationship(
        'TacoIngredientRow',
        order_by='TacoIngredientRow.position',
        cascade='all, delete-orphan',
        lazy='selectin',
    )


class TacoIngredientRow(Base):
    __tablename__ = 'taco_ingredients'

    taco_id: Mapped[int] = mapped_column(ForeignKey('taco.id'), primary_key=True)
    position: Mapped[int] = mapped_column(Integer, primary_key=True)
    ingredient_id: Mapped[str] = mapped_column(ForeignKey('ingredient.id'), nullable=False)


class UserRow(Base):
    # "user" es palabra reservada en varios motores
    __tablename__ = 'app_user'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(50), unique=True, index=True, nullable=False)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    fullname: Mapped[str] = mapped_column(String(100), default='')
    street: Mapped[str] = mapped_column(String(100), default='')
    city: Mapped[str] = mapped_column(String(50), default='')
    state: Mapped[str] = mapped_column(String(50), default='')
    zip: Mapped[str] = mapped_column(String(10), default='')
    phone_number: Mapped[str] = mapped_column(String(20), default='')


class OrderRow(Base):
    __tablename__ = 'taco_order'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(
        ForeignKey('app_user.username'), index=True, nullable=False
    )
    placed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(String(10), nullable=False)
    delivery_name: Mapped[str] = mapped_column(String(50), nullable=False)
    delivery_street: Mapped[str] = mapped_column(String(50), nullable=False)
    delivery_city: Mapped[str] = mapped_column(String(50), nullable=False)
    delivery_state: Mapped[str] = mapped_column(String(50), nullable=False)
    delivery_zip: Mapped[str] = mapped_column(String(10), nullable=False)
    cc_number: Mapped[str] = mapped_column(String(19), nullable=False)
    cc_expiration: Mapped[str] = mapped_column(String(5), nullable=False)
    cc_cvv: Mapped[str] = mapped_column(String(3), nullable=False)

    taco_links: Mapped[List['OrderTacoRow']] = relationship(
        'OrderTacoRow',
        order_by='OrderTacoRow.position',
        cascade='all, delete-orphan',
        lazy='selectin',
    )


class OrderTacoRow(Base):
    __tablename__ = 'taco_order_tacos'

    order_id: Mapped[int] = mapped_column(ForeignKey('taco_order.id'), primary_key=True)
    position: Mapped[int] = mapped_column(Integer, primary_key=True)
    taco_id: Mapped[int] = mapped_column(ForeignKey('taco.id'), nullable=False)

    taco: Mapped[TacoRow] = relationship(TacoRow, lazy='selectin')
