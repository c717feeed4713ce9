"""
Billing services.
"""
from decimal import Decimal

from apps.billing.models import BillService
from apps.core.observability.events import log_domain_event


def add_service_line(bill, service, quantity=1, discount_percentage=Decimal('0.00'), unit_price=None, notes=None):
    """
    Attach a service to a bill.

    unit_price defaults to the service's catalogue cost. total_price is
    unit_price * quantity * (1 - discount_percentage / 100), rounded half-up
    to two decimals.

    Raises:
        UniquenessViolation: the service is already on this bill
        DomainViolation: quantity or discount outside their range
    """
    line = BillService(
        bill=bill,
        service=service,
        quantity=quantity,
        unit_price=service.cost if unit_price is None else unit_price,
        discount_percentage=discount_percentage,
        notes=notes,
    )
    line.save()

    log_domain_event(
        'bill_line_added',
        entity_type=BillService._meta.label,
        entity_id=line.pk,
        entity_ids={'bill_id': line.bill_id, 'service_id': line.service_id},
        total_price=str(line.total_price),
    )
    return line
