from common.filters import AllOrExactFilter, DateRangeFilterSet

from .models import Bill


class BillFilter(DateRangeFilterSet):
    """``status`` is the payment status."""

    date_field = 'billing_date'

    status = AllOrExactFilter(field_name='payment_status')
    bill_type = AllOrExactFilter()

    class Meta:
        model = Bill
        fields = ['status', 'bill_type', 'payment_method', 'start_date', 'end_date']
