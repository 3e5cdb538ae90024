from datetime import datetime

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from labtrack.database import Base


class ReferenceStandard(Base):
    __tablename__ = "reference_standards"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    rules = relationship(
        "ReferenceStandardRule",
        back_populates="standard",
        cascade="all, delete-orphan",
        order_by="ReferenceStandardRule.id",
    )
    samples = relationship("Sample", back_populates="reference_standard")


class ReferenceStandardRule(Base):
    __tablename__ = "reference_standard_rules"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    standard_id: Mapped[int] = mapped_column(
        ForeignKey("reference_standards.id", ondelete="CASCADE"), index=True, nullable=False
    )
    parameter_key: Mapped[str] = mapped_column(String(100), index=True, nullable=False)
    condition_type: Mapped[str] = mapped_column(String(20), nullable=False)
    min_value: Mapped[float | None] = mapped_column(Float, nullable=True)
    max_value: Mapped[float | None] = mapped_column(Float, nullable=True)
    expected_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    display_reference: Mapped[str | None] = mapped_column(String(255), nullable=True)

    standard = relationship("ReferenceStandard", back_populates="rules")
