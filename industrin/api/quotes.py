# industrin/api/quotes.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from industrin.core.auth import get_db
from industrin.core.errors import NotFound, ValidationFailed
from industrin.crud.company import get_company
from industrin.crud.quote_request import create_general_quote_request, create_quote_request
from industrin.schemas.quote_request import (
    GeneralQuoteRequestCreate,
    GeneralQuoteRequestOut,
    QuoteRequestCreate,
    QuoteRequestOut,
)
from industrin.services.uploads import discard_attachments, save_attachments

log = logging.getLogger("industrin.quotes")

router = APIRouter()


@router.post(
    "/quote-requests",
    response_model=QuoteRequestOut,
    status_code=status.HTTP_201_CREATED,
)
def submit_quote_request(payload: QuoteRequestCreate, db: Session = Depends(get_db)):
    if get_company(db, payload.company_id) is None:
        raise NotFound("Company not found")
    obj = create_quote_request(db, payload)
    log.info("quote request %s for company %s", obj.id, obj.company_id)
    return QuoteRequestOut.model_validate(obj)


@router.post(
    "/general-quote-requests",
    response_model=GeneralQuoteRequestOut,
    status_code=status.HTTP_201_CREATED,
)
async def submit_general_quote_request(
    description: str = Form(...),
    service_type: str = Form(..., alias="serviceType"),
    urgency: str = Form(...),
    name: str = Form(...),
    email: str = Form(...),
    phone: Optional[str] = Form(None),
    company: Optional[str] = Form(None),
    preferred_contact: str = Form("email", alias="preferredContact"),
    files: Optional[List[UploadFile]] = File(None),
    db: Session = Depends(get_db),
):
    """
    Multipart form for a request not aimed at one company.
    Up to 5 attachments, 10 MB each.
    """
    try:
        data = GeneralQuoteRequestCreate(
            description=description,
            service_type=service_type,
            urgency=urgency,
            name=name,
            email=email,
            phone=phone or None,
            company_name=company or None,
            preferred_contact=preferred_contact,
        )
    except ValidationError as e:
        raise ValidationFailed(
            "Invalid request data",
            details=e.errors(include_url=False, include_context=False),
        )

    stored = await save_attachments(files)
    try:
        obj = create_general_quote_request(db, data, files=stored)
    except Exception:
        db.rollback()
        discard_attachments(stored)
        raise
    log.info("general quote request %s with %d attachment(s)", obj.id, len(stored))
    return GeneralQuoteRequestOut.model_validate(obj)
