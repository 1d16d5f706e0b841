# industrin/api/catalog.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from industrin.core.auth import get_db
from industrin.crud.company import list_categories, list_regions, list_service_areas

router = APIRouter()


# distinct value lists for the search filters


@router.get("/regions", response_model=List[str])
def regions(db: Session = Depends(get_db)):
    return list_regions(db)


@router.get("/categories", response_model=List[str])
def categories(db: Session = Depends(get_db)):
    return list_categories(db)


@router.get("/service-areas", response_model=List[str])
def service_areas(db: Session = Depends(get_db)):
    return list_service_areas(db)
