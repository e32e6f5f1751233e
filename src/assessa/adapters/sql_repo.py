# src/assessa/adapters/sql_repo.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable, get_args

from sqlmodel import JSON, Column, Field, Session, SQLModel, create_engine, select

from assessa.domain.errors import PropertyNotFoundError
from assessa.domain.tax_records import PaymentStatus, TaxAssessmentRecord, TaxHistory, TaxPaymentRecord


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _payment_status(raw: str | None) -> PaymentStatus | None:
    # rows may hold free-form county statuses; anything unrecognized reads back as unknown
    if raw is None:
        return None
    status = raw.strip().lower()
    return status if status in get_args(PaymentStatus) else None


# ---------- Tax history ----------

class TaxAssessmentRow(SQLModel, table=True):
    __tablename__ = "tax_assessments"

    id: int | None = Field(default=None, primary_key=True)
    property_id: str = Field(index=True)
    assessment_year: int = Field(index=True)

    assessed_value: float | None = None
    land_value: float | None = None
    improvement_value: float | None = None
    annual_taxes: float | None = None
    tax_rate: float | None = None


class TaxPaymentRow(SQLModel, table=True):
    __tablename__ = "tax_payments"

    id: int | None = Field(default=None, primary_key=True)
    property_id: str = Field(index=True)
    tax_year: int = Field(index=True)

    amount_due: float | None = None
    amount_paid: float | None = None
    status: str | None = None


class SqlTaxHistoryRepository:
    def __init__(self, uri: str = "sqlite:///assessa.db"):
        self.engine = create_engine(uri, echo=False)
        SQLModel.metadata.create_all(self.engine)

    def add_assessments(self, property_id: str, items: Iterable[TaxAssessmentRecord]) -> int:
        """Insert or replace assessments, one row per (property, year)."""
        written = 0
        with Session(self.engine) as session:
            for item in items:
                stmt = select(TaxAssessmentRow).where(
                    TaxAssessmentRow.property_id == property_id,
                    TaxAssessmentRow.assessment_year == item.assessment_year,
                )
                row = session.exec(stmt).first()
                if row is None:
                    row = TaxAssessmentRow(property_id=property_id, assessment_year=item.assessment_year)
                for field in ["assessed_value", "land_value", "improvement_value", "annual_taxes", "tax_rate"]:
                    setattr(row, field, getattr(item, field))
                session.add(row)
                written += 1
            session.commit()
        return written

    def add_payments(self, property_id: str, items: Iterable[TaxPaymentRecord]) -> int:
        # a year may carry several installments, so payments are append-only
        written = 0
        with Session(self.engine) as session:
            for item in items:
                session.add(
                    TaxPaymentRow(
                        property_id=property_id,
                        tax_year=item.tax_year,
                        amount_due=item.amount_due,
                        amount_paid=item.amount_paid,
                        status=item.status,
                    )
                )
                written += 1
            session.commit()
        return written

    def get_history(self, property_id: str, limit: int = 5, payment_limit: int | None = None) -> TaxHistory:
        with Session(self.engine) as session:
            a_stmt = (
                select(TaxAssessmentRow)
                .where(TaxAssessmentRow.property_id == property_id)
                .order_by(TaxAssessmentRow.assessment_year.desc())
                .limit(limit)
            )
            p_stmt = (
                select(TaxPaymentRow)
                .where(TaxPaymentRow.property_id == property_id)
                .order_by(TaxPaymentRow.tax_year.desc(), TaxPaymentRow.id.desc())
                .limit(payment_limit or limit)
            )
            a_rows = list(session.exec(a_stmt))
            p_rows = list(session.exec(p_stmt))

        if not a_rows and not p_rows:
            raise PropertyNotFoundError(property_id)

        return TaxHistory(
            assessments=tuple(
                TaxAssessmentRecord(
                    assessment_year=r.assessment_year,
                    assessed_value=r.assessed_value,
                    land_value=r.land_value,
                    improvement_value=r.improvement_value,
                    annual_taxes=r.annual_taxes,
                    tax_rate=r.tax_rate,
                )
                for r in a_rows
            ),
            payments=tuple(
                TaxPaymentRecord(
                    tax_year=r.tax_year,
                    amount_due=r.amount_due,
                    amount_paid=r.amount_paid,
                    status=_payment_status(r.status),
                )
                for r in p_rows
            ),
        )


# ---------- Analyses ----------

class AnalysisRow(SQLModel, table=True):
    __tablename__ = "analyses"

    id: int | None = Field(default=None, primary_key=True)
    ts: datetime = Field(default_factory=_utcnow, index=True)
    property_id: str | None = Field(default=None, index=True)

    payload: dict[str, Any] = Field(sa_column=Column(JSON))
    result: dict[str, Any] = Field(sa_column=Column(JSON))


class SqlAnalysisRepository:
    def __init__(self, uri: str = "sqlite:///assessa.db"):
        self.engine = create_engine(uri, echo=False)
        SQLModel.metadata.create_all(self.engine)

    def save_analysis(self, property_id: str | None, analysis: dict[str, Any], payload: dict[str, Any]) -> int:
        row = AnalysisRow(property_id=property_id, payload=payload, result=analysis)
        with Session(self.engine) as session:
            session.add(row)
            session.commit()
            session.refresh(row)
            return int(row.id)  # type: ignore[arg-type]

    def list_recent(self, property_id: str | None = None, limit: int = 10) -> list[dict[str, Any]]:
        with Session(self.engine) as session:
            stmt = select(AnalysisRow)
            if property_id is not None:
                stmt = stmt.where(AnalysisRow.property_id == property_id)
            stmt = stmt.order_by(AnalysisRow.ts.desc(), AnalysisRow.id.desc()).limit(limit)
            rows = list(session.exec(stmt))
        return [
            r.result | {"analysis_id": r.id, "property_id": r.property_id, "ts": r.ts.isoformat()}
            for r in rows
        ]
