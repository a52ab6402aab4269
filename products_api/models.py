from typing import Optional

from sqlalchemy import Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from products_api.core.db import Base


class ProductRow(Base):
    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Every data column is nullable; zero values may be stored as NULL.
    name: Mapped[Optional[str]] = mapped_column(String(255), unique=True, nullable=True)
    type: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    count: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    price: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
