from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from labtrack.database import Base


class ParameterDefinition(Base):
    __tablename__ = "parameter_definitions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    key: Mapped[str] = mapped_column(String(100), unique=True, index=True, nullable=False)
    label: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(100), index=True, nullable=False)
    unit: Mapped[str | None] = mapped_column(String(50), nullable=True)
    method: Mapped[str | None] = mapped_column(Text, nullable=True)
