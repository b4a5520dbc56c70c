# lucent_shop/routers/admin/shipments.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from lucent_shop.dependencies import get_admin_user, get_db
from lucent_shop.models.user import User
from lucent_shop.schemas.order import AdminShipment, ShipmentUpdate
from lucent_shop.services import shipment as shipment_service

router = APIRouter()


@router.patch("/{shipment_id}", response_model=AdminShipment)
async def update_shipment(
    shipment_id: int,
    shipment_data: ShipmentUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user)
):
    """[ADMIN] Carrier, tracking number and delivery progress of one shipment."""
    return shipment_service.update_shipment(db, shipment_id, shipment_data, admin)
