# industrin/crud/quote_request.py
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from industrin.models.quote_request import GeneralQuoteRequest, QuoteRequest
from industrin.schemas.quote_request import GeneralQuoteRequestCreate, QuoteRequestCreate


def create_quote_request(db: Session, data: QuoteRequestCreate) -> QuoteRequest:
    obj = QuoteRequest(**data.model_dump())
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def create_general_quote_request(
    db: Session,
    data: GeneralQuoteRequestCreate,
    files: Optional[List[Dict[str, Any]]] = None,
) -> GeneralQuoteRequest:
    obj = GeneralQuoteRequest(**data.model_dump(), files=files or [])
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def list_quote_requests(
    db: Session, company_id: Optional[str] = None, skip: int = 0, limit: int = 100
) -> List[QuoteRequest]:
    q = db.query(QuoteRequest)
    if company_id:
        q = q.filter(QuoteRequest.company_id == company_id)
    return (
        q.order_by(QuoteRequest.submitted_at.desc(), QuoteRequest.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def list_general_quote_requests(
    db: Session, skip: int = 0, limit: int = 100
) -> List[GeneralQuoteRequest]:
    return (
        db.query(GeneralQuoteRequest)
        .order_by(GeneralQuoteRequest.submitted_at.desc(), GeneralQuoteRequest.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def count_quote_requests(db: Session) -> int:
    return db.query(QuoteRequest).count()


def count_general_quote_requests(db: Session) -> int:
    return db.query(GeneralQuoteRequest).count()
