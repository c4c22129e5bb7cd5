from __future__ import annotations
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Integer, String, Text, Boolean, ForeignKey, DateTime, func
from typing import Optional
from .account import Base


class Brand(Base):
    __tablename__ = 'brands'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(128), unique=True, nullable=False, index=True)


class Generic(Base):
    __tablename__ = 'generics'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(128), unique=True, nullable=False, index=True)


class CatalogItem(Base):
    __tablename__ = 'catalog_items'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(150), nullable=False, index=True)
    category: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    # Assigned once at creation; unique so concurrent creations retry instead of duplicating
    sku: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    mrp_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    sell_price_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    cost_price_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    image_url: Mapped[str] = mapped_column(String(512), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    generic_id: Mapped[Optional[int]] = mapped_column(ForeignKey('generics.id'), nullable=True, index=True)
    brand_id: Mapped[Optional[int]] = mapped_column(ForeignKey('brands.id'), nullable=True, index=True)
    # published flag ("status") and stock availability are toggled independently
    status: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    availability: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_by: Mapped[int] = mapped_column(ForeignKey('accounts.id'), nullable=False)
    created_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    generic = relationship('Generic', lazy='joined')
    brand = relationship('Brand', lazy='joined')

__all__ = ["Brand", "Generic", "CatalogItem"]
