"""Subject ORM: reference data, seeded by migration and read-only at runtime."""

from sqlalchemy import String, Integer
from sqlalchemy.orm import Mapped, mapped_column

from studyhub.db.base import Base


class Subject(Base):
    __tablename__ = "subjects"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
