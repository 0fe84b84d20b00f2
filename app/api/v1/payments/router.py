from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.rbac import require_roles
from app.core.cache import CacheLayer
from app.core.enums import AuthorRole, NotificationType
from app.core.exceptions import ServiceError
from app.core.state import get_cache, get_notification_hub
from app.db.session import get_db
from app.realtime.notifications import Notification, NotificationHub

from .schemas import PaymentCreate, PaymentResponse, PaymentUpdate
from .service import PaymentService

router = APIRouter(prefix="/api/v1/payments", tags=["payments"])

PAYMENT_ROLES = (AuthorRole.admin, AuthorRole.parent)


def get_payment_service(cache: CacheLayer = Depends(get_cache)) -> PaymentService:
    return PaymentService(cache)


def _payment_notification(payment: PaymentResponse, title: str) -> Notification:
    return Notification(
        type=NotificationType.info,
        title=title,
        body=f"Payment of {payment.amount} via {payment.method} is {payment.status}",
        link=f"/payments/{payment.id}",
    )


@router.post(
    "",
    response_model=PaymentResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_roles(*PAYMENT_ROLES))],
)
async def create_payment(
    payload: PaymentCreate,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    service: PaymentService = Depends(get_payment_service),
    hub: NotificationHub = Depends(get_notification_hub),
) -> PaymentResponse:
    try:
        payment = await service.create(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    background_tasks.add_task(
        hub.send_to_room,
        f"enrollment:{payment.enrollment_id}",
        _payment_notification(payment, "Payment recorded"),
    )
    return payment


@router.get(
    "",
    response_model=List[PaymentResponse],
    dependencies=[Depends(require_roles(*PAYMENT_ROLES))],
)
async def list_payments(
    enrollment_id: Optional[UUID] = Query(None),
    db: AsyncSession = Depends(get_db),
    service: PaymentService = Depends(get_payment_service),
) -> List[PaymentResponse]:
    return await service.list(db, enrollment_id)


@router.get(
    "/{payment_id}",
    response_model=PaymentResponse,
    dependencies=[Depends(require_roles(*PAYMENT_ROLES))],
)
async def get_payment(
    payment_id: UUID,
    db: AsyncSession = Depends(get_db),
    service: PaymentService = Depends(get_payment_service),
) -> PaymentResponse:
    try:
        return await service.get(db, payment_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put(
    "/{payment_id}",
    response_model=PaymentResponse,
    dependencies=[Depends(require_roles(*PAYMENT_ROLES))],
)
async def update_payment(
    payment_id: UUID,
    payload: PaymentUpdate,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    service: PaymentService = Depends(get_payment_service),
    hub: NotificationHub = Depends(get_notification_hub),
) -> PaymentResponse:
    try:
        payment = await service.update(db, payment_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    if payload.status is not None:
        background_tasks.add_task(
            hub.send_to_room,
            f"enrollment:{payment.enrollment_id}",
            _payment_notification(payment, "Payment status changed"),
        )
    return payment


@router.delete(
    "/{payment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_roles(AuthorRole.admin))],
)
async def delete_payment(
    payment_id: UUID,
    db: AsyncSession = Depends(get_db),
    service: PaymentService = Depends(get_payment_service),
) -> None:
    try:
        await service.delete(db, payment_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
