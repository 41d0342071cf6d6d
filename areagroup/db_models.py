from datetime import UTC, datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


def utc_now() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


class ConversionRun(Base):
    __tablename__ = "conversion_runs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    input_file: Mapped[str] = mapped_column(Text)
    output_file: Mapped[str] = mapped_column(Text)
    output_type: Mapped[str] = mapped_column(String(16))
    search_criteria: Mapped[str] = mapped_column(Text, default="{}")
    status: Mapped[str] = mapped_column(String(32), default="queued", index=True)
    started_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    total_rows: Mapped[int] = mapped_column(Integer, default=0)
    matched_records: Mapped[int] = mapped_column(Integer, default=0)
    output_records: Mapped[int] = mapped_column(Integer, default=0)
    warning_count: Mapped[int] = mapped_column(Integer, default=0)
    error: Mapped[str | None] = mapped_column(Text, nullable=True)

    warnings: Mapped[list["RunWarning"]] = relationship(back_populates="run", cascade="all, delete-orphan")


class RunWarning(Base):
    __tablename__ = "run_warnings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    run_id: Mapped[int] = mapped_column(ForeignKey("conversion_runs.id", ondelete="CASCADE"), index=True)
    row_index: Mapped[int | None] = mapped_column(Integer, nullable=True)
    kind: Mapped[str] = mapped_column(String(32))
    message: Mapped[str] = mapped_column(Text)

    run: Mapped[ConversionRun] = relationship(back_populates="warnings")
