import random
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import IntegrityError, models, transaction
from django.utils import timezone

ZERO = Decimal('0.00')


class Bill(models.Model):
    """
    Bill Model - one billable transaction (OPD visit, IPD stay, ad hoc service).

    Totals and payment status are derived on every save:

    - subtotal / total_discount / total_tax are the sums over ``services``
      and total_amount = subtotal - total_discount + total_tax. Client-sent
      totals are always overwritten, so a bill without services totals 0.
    - payment_status follows the ``payments`` ledger (successful entries):
      paid when they cover total_amount, partial when some money came in,
      pending otherwise.

    The one-shot payment path (``payment_method`` / ``paid_date``) writes
    payment_status directly without a save; see ``services.set_payment_status``.
    """

    BILL_TYPE_CHOICES = [
        ('consultation', 'Consultation'),
        ('procedure', 'Procedure'),
        ('surgery', 'Surgery'),
        ('medicine', 'Medicine'),
        ('lab_test', 'Lab Test'),
        ('room_charges', 'Room Charges'),
        ('emergency', 'Emergency'),
        ('other', 'Other'),
        ('opd', 'OPD'),
        ('ipd', 'IPD'),
        ('diagnostic', 'Diagnostic'),
        ('pharmacy', 'Pharmacy'),
    ]

    PAYMENT_STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('paid', 'Paid'),
        ('partially_paid', 'Partially Paid'),
        ('partial', 'Partial'),
        ('overdue', 'Overdue'),
        ('cancelled', 'Cancelled'),
        ('refunded', 'Refunded'),
    ]

    PAYMENT_METHOD_CHOICES = [
        ('cash', 'Cash'),
        ('card', 'Card'),
        ('upi', 'UPI'),
        ('net_banking', 'Net Banking'),
        ('insurance', 'Insurance'),
        ('cheque', 'Cheque'),
        ('dummy_payment', 'Dummy Payment'),
    ]

    CLAIM_STATUS_CHOICES = [
        ('not_applicable', 'Not Applicable'),
        ('pending', 'Pending'),
        ('approved', 'Approved'),
        ('rejected', 'Rejected'),
        ('partial', 'Partial'),
    ]

    DERIVED_FIELDS = ['subtotal', 'total_discount', 'total_tax', 'total_amount', 'payment_status']

    bill_number = models.CharField(
        max_length=20,
        unique=True,
        editable=False,
        help_text="Bill number BILL<YYYY><MM><sequence>"
    )

    # Patient and snapshot of name / contact at billing time
    patient = models.ForeignKey(
        'patients.PatientProfile',
        on_delete=models.PROTECT,
        related_name='bills'
    )
    patient_name = models.CharField(max_length=200)
    patient_contact = models.CharField(max_length=20, blank=True)

    bill_type = models.CharField(max_length=20, choices=BILL_TYPE_CHOICES, default='opd')

    # Optional links
    appointment = models.ForeignKey(
        'appointments.Appointment',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='bills'
    )
    admission_code = models.CharField(max_length=20, blank=True, help_text="Admission code for IPD bills")
    doctor = models.ForeignKey(
        'doctors.Doctor',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='bills'
    )
    doctor_name = models.CharField(max_length=200, blank=True)

    # Derived totals
    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    total_discount = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    total_tax = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    payment_status = models.CharField(max_length=20, choices=PAYMENT_STATUS_CHOICES, default='pending')

    # One-shot payment
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, blank=True)
    paid_date = models.DateTimeField(null=True, blank=True)

    insurance = models.JSONField(
        default=dict,
        blank=True,
        help_text="{has_insurance, insurance_provider, policy_number, claim_amount, approved_amount, claim_status}"
    )

    billing_date = models.DateTimeField(default=timezone.now)
    due_date = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True)
    generated_by = models.CharField(max_length=100, default='System')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'bills'
        ordering = ['-billing_date']
        verbose_name = 'Bill'
        verbose_name_plural = 'Bills'
        indexes = [
            models.Index(fields=['payment_status'], name='bill_payment_status_idx'),
            models.Index(fields=['bill_type'], name='bill_type_idx'),
            models.Index(fields=['billing_date'], name='bill_date_idx'),
            models.Index(fields=['patient', 'billing_date'], name='bill_patient_date_idx'),
        ]

    def __str__(self):
        return f"{self.bill_number} - {self.patient_name}"

    def save(self, *args, **kwargs):
        """Save the bill with derived totals, retrying on bill number collisions."""
        update_fields = kwargs.get('update_fields')
        if update_fields is not None:
            kwargs['update_fields'] = list(set(update_fields) | set(self.DERIVED_FIELDS) | {'updated_at'})

        max_retries = 3
        last_exception = None
        for _ in range(max_retries):
            generated = False
            if not self.bill_number:
                self.bill_number = self.generate_bill_number()
                generated = True
            try:
                with transaction.atomic():
                    self._calculate_derived_totals()
                    super().save(*args, **kwargs)
                return
            except IntegrityError as exc:
                last_exception = exc
                if generated and 'bill_number' in str(exc):
                    self.bill_number = ''
                    continue
                raise

        raise last_exception

    @staticmethod
    def generate_bill_number(now=None):
        """Generate bill number: BILL<YYYY><MM><count + 1, 4 digits>"""
        now = timezone.localtime(now or timezone.now())
        sequence = Bill.objects.count() + 1
        while True:
            candidate = f"BILL{now.year}{now.month:02d}{sequence:04d}"
            if not Bill.objects.filter(bill_number=candidate).exists():
                return candidate
            sequence += 1

    def _calculate_derived_totals(self):
        """
        Recompute totals from the service lines and status from the ledger.

        Called by save(); a bill that is not stored yet has no lines or
        payments and totals 0.
        """
        if self.pk:
            line_totals = self.services.aggregate(
                subtotal=models.Sum('total_price'),
                discount=models.Sum('discount'),
                tax=models.Sum('tax'),
            )
            total_paid = self.payments.filter(status='success').aggregate(
                total=models.Sum('amount')
            )['total'] or ZERO
        else:
            line_totals = {}
            total_paid = ZERO

        self.subtotal = line_totals.get('subtotal') or ZERO
        self.total_discount = line_totals.get('discount') or ZERO
        self.total_tax = line_totals.get('tax') or ZERO
        self.total_amount = self.subtotal - self.total_discount + self.total_tax
        self.payment_status = self.derive_payment_status(total_paid, self.total_amount)

    @staticmethod
    def derive_payment_status(total_paid, total_amount):
        if total_paid >= total_amount:
            return 'paid'
        if total_paid > ZERO:
            return 'partial'
        return 'pending'

    @property
    def total_paid(self):
        return self.payments.filter(status='success').aggregate(
            total=models.Sum('amount')
        )['total'] or ZERO


class BillService(models.Model):
    """Service line item on a bill. ``total_price`` is quantity x unit price."""

    CATEGORY_CHOICES = [
        ('consultation', 'Consultation'),
        ('diagnostic', 'Diagnostic'),
        ('treatment', 'Treatment'),
        ('surgery', 'Surgery'),
        ('medicine', 'Medicine'),
        ('room_charges', 'Room Charges'),
        ('other', 'Other'),
    ]

    bill = models.ForeignKey(Bill, on_delete=models.CASCADE, related_name='services')
    service_name = models.CharField(max_length=200)
    service_code = models.CharField(max_length=50, blank=True)
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES, default='other')
    quantity = models.PositiveIntegerField(default=1)
    unit_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(ZERO)]
    )
    total_price = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    discount = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    tax = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)

    class Meta:
        db_table = 'bill_services'
        ordering = ['bill', 'id']
        verbose_name = 'Bill Service'
        verbose_name_plural = 'Bill Services'

    def __str__(self):
        return f"{self.service_name} x{self.quantity} - {self.bill.bill_number}"

    def save(self, *args, **kwargs):
        self.total_price = Decimal(self.unit_price) * self.quantity
        super().save(*args, **kwargs)


class BillPayment(models.Model):
    """Payment ledger entry; only ``success`` entries count towards the bill."""

    METHOD_CHOICES = [
        ('cash', 'Cash'),
        ('card', 'Card'),
        ('upi', 'UPI'),
        ('net_banking', 'Net Banking'),
        ('insurance', 'Insurance'),
        ('cheque', 'Cheque'),
    ]

    STATUS_CHOICES = [
        ('success', 'Success'),
        ('failed', 'Failed'),
        ('pending', 'Pending'),
    ]

    bill = models.ForeignKey(Bill, on_delete=models.CASCADE, related_name='payments')
    payment_id = models.CharField(max_length=40, unique=True, editable=False)
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(ZERO)]
    )
    payment_method = models.CharField(max_length=20, choices=METHOD_CHOICES)
    transaction_id = models.CharField(max_length=100, blank=True)
    payment_date = models.DateTimeField(default=timezone.now)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='success')

    class Meta:
        db_table = 'bill_payments'
        ordering = ['bill', 'payment_date']
        verbose_name = 'Bill Payment'
        verbose_name_plural = 'Bill Payments'

    def __str__(self):
        return f"{self.payment_id} - {self.amount} ({self.status})"

    def save(self, *args, **kwargs):
        if not self.payment_id:
            self.payment_id = self.generate_payment_id()
        if not self.transaction_id:
            self.transaction_id = self.payment_id
        super().save(*args, **kwargs)

    @staticmethod
    def generate_payment_id():
        """PAY<epoch milliseconds><0-999>"""
        millis = int(timezone.now().timestamp() * 1000)
        return f"PAY{millis}{random.randint(0, 999)}"
