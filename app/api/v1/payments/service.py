from app.core.cache import CacheKeys
from app.core.entity_service import EntityService
from app.core.models import Enrollment, Payment
from app.core.referential import Reference

from .schemas import PaymentResponse


class PaymentService(EntityService):
    """Payments against an enrollment, newest first. The enrollment is checked only when sent."""

    model = Payment
    response_model = PaymentResponse
    label = "Payment"
    namespace = CacheKeys.PAYMENTS
    references = (Reference("enrollment_id", Enrollment, "Enrollment"),)
    parent_field = "enrollment_id"
    order_by = Payment.payment_date.desc()
    nullable_fields = frozenset({"transaction_id"})
