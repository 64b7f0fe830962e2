from fastapi import APIRouter

from app.api.v1.schemas import ReconcileRequestSchema, ReconcileResponseSchema
from app.domain.entities.booking_status import BookingStatusPair
from app.domain.services.status_reconciler import reconcile

router = APIRouter()


@router.post("/reconcile", response_model=ReconcileResponseSchema)
def reconcile_statuses(req: ReconcileRequestSchema) -> ReconcileResponseSchema:
    result = reconcile(
        BookingStatusPair(id=req.id, therapist_status=req.therapist_status, store_status=req.store_status)
    )
    return ReconcileResponseSchema(combined_status=result.combined_status, hint=result.hint)
