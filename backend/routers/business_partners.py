from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from database import get_db
from crud import business_partners as business_partners_crud
from exceptions import PartyNotFoundError
from models.business_partners import BusinessPartner as BusinessPartnerModel, PartnerStatus
from schemas.business_partners import BusinessPartner, BusinessPartnerCreate
from utils.tenancy import get_tenant_id, get_actor_id

router = APIRouter(prefix="/business-partners", tags=["Business Partners"])
logger = logging.getLogger("business_partners")

@router.post("/", response_model=BusinessPartner, status_code=status.HTTP_201_CREATED)
def create_business_partner(
    partner: BusinessPartnerCreate,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    actor_id: Optional[str] = Depends(get_actor_id)
):
    try:
        return business_partners_crud.create_partner(db, partner, tenant_id, actor_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.get("/", response_model=List[BusinessPartner])
def read_business_partners(
    skip: int = 0,
    limit: int = 100,
    status: Optional[PartnerStatus] = None,
    is_vendor: Optional[bool] = Query(None),
    is_customer: Optional[bool] = Query(None),
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    query = db.query(BusinessPartnerModel).filter(BusinessPartnerModel.tenant_id == tenant_id)
    if status:
        query = query.filter(BusinessPartnerModel.status == status)
    if is_vendor is not None:
        query = query.filter(BusinessPartnerModel.is_vendor == is_vendor)
    if is_customer is not None:
        query = query.filter(BusinessPartnerModel.is_customer == is_customer)
    return query.order_by(BusinessPartnerModel.id).offset(skip).limit(limit).all()

@router.get("/{partner_id}", response_model=BusinessPartner)
def read_business_partner(partner_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    try:
        return business_partners_crud.get_partner(db, tenant_id, partner_id)
    except PartyNotFoundError:
        raise HTTPException(status_code=404, detail="Business partner not found")
