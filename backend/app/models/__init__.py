"""
Product Cache API Database Models

SQLAlchemy models for the authoritative product store.
"""

from sqlalchemy import Integer, Numeric, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Canonical Base class for all database models."""

    pass


class Product(Base):
    """Product catalog row."""

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    price: Mapped[float] = mapped_column(
        Numeric(18, 2, asdecimal=False), nullable=False
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, name={self.name}, category={self.category})>"
