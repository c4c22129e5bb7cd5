from __future__ import annotations
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, String, Boolean, DateTime, Index, func, text
from typing import Optional
from .account import Base


class Advertisement(Base):
    __tablename__ = 'advertisements'
    KIND = 'advertisement'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    image_url: Mapped[str] = mapped_column(String(512), nullable=False)
    category: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    hyperlink: Mapped[Optional[str]] = mapped_column(String(512))
    is_visible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # at most one visible row per table
    __table_args__ = (
        Index('uq_advertisements_single_visible', 'is_visible', unique=True,
              sqlite_where=text('is_visible = 1'), postgresql_where=text('is_visible')),
    )


class PromotionModal(Base):
    __tablename__ = 'promotion_modals'
    KIND = 'promotion modal'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    image_url: Mapped[str] = mapped_column(String(512), nullable=False)
    hyperlink: Mapped[Optional[str]] = mapped_column(String(512))
    is_visible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index('uq_promotion_modals_single_visible', 'is_visible', unique=True,
              sqlite_where=text('is_visible = 1'), postgresql_where=text('is_visible')),
    )

__all__ = ['Advertisement', 'PromotionModal']
