from datetime import date, datetime

from sqlalchemy import Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from labtrack.database import Base


# Parameters stored in dedicated columns; everything else lives in the JSON bags.
DIRECT_MEASUREMENT_FIELDS = (
    "temperatura",
    "ph",
    "turbidez",
    "condutividade",
    "cor_aparente",
    "cloro_residual",
)


class Sample(Base):
    __tablename__ = "samples"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    code: Mapped[str] = mapped_column(String(50), unique=True, index=True, nullable=False)
    batch_code: Mapped[str | None] = mapped_column(String(50), index=True, nullable=True)
    reference_standard_id: Mapped[int | None] = mapped_column(
        ForeignKey("reference_standards.id", ondelete="SET NULL"), index=True, nullable=True
    )
    collection_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Analyst entries are kept as typed, e.g. "< 0,05" or "Ausente".
    temperatura: Mapped[str | None] = mapped_column(String(50), nullable=True)
    ph: Mapped[str | None] = mapped_column(String(50), nullable=True)
    turbidez: Mapped[str | None] = mapped_column(String(50), nullable=True)
    condutividade: Mapped[str | None] = mapped_column(String(50), nullable=True)
    cor_aparente: Mapped[str | None] = mapped_column(String(50), nullable=True)
    cloro_residual: Mapped[str | None] = mapped_column(String(50), nullable=True)

    params: Mapped[str | None] = mapped_column(Text, nullable=True)
    results: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    reference_standard = relationship("ReferenceStandard", back_populates="samples")

    def direct_measurements(self) -> dict[str, str | None]:
        return {field: getattr(self, field) for field in DIRECT_MEASUREMENT_FIELDS}
