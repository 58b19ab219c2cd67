"""Per-collection id counter."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from catalog_admin.models.base import Base


class IdSequence(Base):
    """Last id handed out for a collection ("categories", "products")."""

    __tablename__ = "id_sequences"

    name: Mapped[str] = mapped_column(String(50), primary_key=True)
    value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<IdSequence(name='{self.name}', value={self.value})>"
