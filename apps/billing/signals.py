from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from .models import Bill, BillPayment, BillService


@receiver([post_save, post_delete], sender=BillService)
@receiver([post_save, post_delete], sender=BillPayment)
def update_bill_totals(sender, instance, **kwargs):
    """
    Re-derive the parent bill's totals and payment status whenever one of
    its service lines or ledger entries is saved or deleted.
    """
    # Deleting the bill cascades to its lines; nothing left to update
    if isinstance(kwargs.get('origin'), Bill):
        return

    bill = Bill.objects.filter(pk=instance.bill_id).first()
    if bill is not None:
        bill.save(update_fields=Bill.DERIVED_FIELDS)
