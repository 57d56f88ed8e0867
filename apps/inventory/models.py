import math
from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import IntegrityError, models, transaction
from django.utils import timezone

SECONDS_PER_DAY = 24 * 60 * 60


class InventoryItem(models.Model):
    """
    Inventory Item Model - one stocked good (medicine, equipment, consumable).

    ``status`` is derived on every save with priority
    expired > out of stock > low stock > in stock, so a value written by hand
    (``discontinued`` included) is replaced on the next save.

    ``alerts`` holds the result of the last ``check_alerts()`` call only; it
    is rebuilt from scratch each time and keeps no history.
    """

    CATEGORY_CHOICES = [
        ('medicines', 'Medicines'),
        ('medical_equipment', 'Medical Equipment'),
        ('surgical_instruments', 'Surgical Instruments'),
        ('consumables', 'Consumables'),
        ('others', 'Others'),
    ]

    UNIT_CHOICES = [
        ('pieces', 'Pieces'),
        ('bottles', 'Bottles'),
        ('boxes', 'Boxes'),
        ('vials', 'Vials'),
        ('tablets', 'Tablets'),
        ('capsules', 'Capsules'),
        ('ml', 'ML'),
        ('grams', 'Grams'),
        ('kg', 'KG'),
    ]

    STATUS_CHOICES = [
        ('in_stock', 'In Stock'),
        ('low_stock', 'Low Stock'),
        ('out_of_stock', 'Out of Stock'),
        ('expired', 'Expired'),
        ('discontinued', 'Discontinued'),
    ]

    ALERT_TYPES = [
        ('low_stock', 'Low Stock'),
        ('expiry_warning', 'Expiry Warning'),
        ('expired', 'Expired'),
    ]

    item_name = models.CharField(max_length=200)
    item_code = models.CharField(
        max_length=20,
        unique=True,
        editable=False,
        help_text="Category prefix + 4 digit sequence, e.g. MED0001"
    )
    category = models.CharField(max_length=30, choices=CATEGORY_CHOICES)
    description = models.TextField(blank=True)
    manufacturer = models.CharField(max_length=200, blank=True)
    batch_number = models.CharField(max_length=100, blank=True)
    expiry_date = models.DateTimeField(null=True, blank=True)

    unit_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    quantity = models.IntegerField(default=0)
    reorder_level = models.IntegerField(default=10)
    max_stock_level = models.IntegerField()
    unit = models.CharField(max_length=20, choices=UNIT_CHOICES)

    supplier = models.JSONField(default=dict, blank=True, help_text="{name, contact, email}")
    location = models.JSONField(default=dict, blank=True, help_text="{section, shelf, row}")

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='in_stock')
    alerts = models.JSONField(
        default=list,
        blank=True,
        help_text="[{type, message, date, acknowledged}] from the last alert check"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    last_updated = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'inventory_items'
        ordering = ['item_name']
        verbose_name = 'Inventory Item'
        verbose_name_plural = 'Inventory Items'
        indexes = [
            models.Index(fields=['category'], name='inventory_category_idx'),
            models.Index(fields=['status'], name='inventory_status_idx'),
            models.Index(fields=['expiry_date'], name='inventory_expiry_idx'),
        ]

    def __str__(self):
        return f"{self.item_code} - {self.item_name}"

    def save(self, *args, **kwargs):
        """Derive status; assign the item code on first save."""
        self.status = self.derive_status()
        update_fields = kwargs.get('update_fields')
        if update_fields is not None:
            kwargs['update_fields'] = list(set(update_fields) | {'status', 'last_updated'})

        max_retries = 3
        last_exception = None
        for _ in range(max_retries):
            generated = False
            if not self.item_code:
                self.item_code = self.generate_item_code(self.category)
                generated = True
            try:
                with transaction.atomic():
                    super().save(*args, **kwargs)
                return
            except IntegrityError as exc:
                last_exception = exc
                if generated and 'item_code' in str(exc):
                    self.item_code = ''
                    continue
                raise

        raise last_exception

    @classmethod
    def category_prefix(cls, category):
        label = dict(cls.CATEGORY_CHOICES).get(category, category or '')
        return label[:3].upper()

    @classmethod
    def generate_item_code(cls, category):
        """<first 3 letters of the category label><count + 1, 4 digits>"""
        prefix = cls.category_prefix(category)
        sequence = cls.objects.count() + 1
        while True:
            candidate = f"{prefix}{sequence:04d}"
            if not cls.objects.filter(item_code=candidate).exists():
                return candidate
            sequence += 1

    def derive_status(self, now=None):
        now = now or timezone.now()
        if self.expiry_date and self.expiry_date < now:
            return 'expired'
        if self.quantity <= 0:
            return 'out_of_stock'
        if self.quantity <= self.reorder_level:
            return 'low_stock'
        return 'in_stock'

    def days_until_expiry(self, now=None):
        """Whole days left before expiry, rounded up; None without an expiry date."""
        if self.expiry_date is None:
            return None
        now = now or timezone.now()
        return math.ceil((self.expiry_date - now).total_seconds() / SECONDS_PER_DAY)

    def build_alerts(self, now=None):
        """Alerts for the current quantity and expiry date."""
        now = now or timezone.now()
        warning_until = now + timedelta(days=settings.HMS_EXPIRY_WARNING_DAYS)
        raised_at = now.isoformat()
        alerts = []

        if 0 < self.quantity <= self.reorder_level:
            alerts.append({
                'type': 'low_stock',
                'message': (
                    f"{self.item_name} is running low. Current quantity: {self.quantity}, "
                    f"Reorder level: {self.reorder_level}"
                ),
                'date': raised_at,
                'acknowledged': False,
            })

        if self.expiry_date:
            expiry_label = timezone.localtime(self.expiry_date).strftime('%a %b %d %Y')
            if self.expiry_date < now:
                alerts.append({
                    'type': 'expired',
                    'message': f"{self.item_name} has expired on {expiry_label}",
                    'date': raised_at,
                    'acknowledged': False,
                })
            elif self.expiry_date <= warning_until:
                days = self.days_until_expiry(now)
                alerts.append({
                    'type': 'expiry_warning',
                    'message': f"{self.item_name} will expire in {days} days on {expiry_label}",
                    'date': raised_at,
                    'acknowledged': False,
                })

        return alerts

    def check_alerts(self, now=None):
        """Replace the stored alerts with a fresh set and save."""
        self.alerts = self.build_alerts(now)
        self.save(update_fields=['alerts'])
        return self.alerts


class InventoryUsage(models.Model):
    """Stock taken out of an item."""

    item = models.ForeignKey(InventoryItem, on_delete=models.CASCADE, related_name='usage')
    date = models.DateTimeField(default=timezone.now)
    quantity_used = models.PositiveIntegerField()
    department = models.CharField(max_length=100, blank=True)
    purpose = models.CharField(max_length=255, blank=True)

    class Meta:
        db_table = 'inventory_usage'
        ordering = ['-date']
        verbose_name = 'Inventory Usage'
        verbose_name_plural = 'Inventory Usage'

    def __str__(self):
        return f"{self.item.item_code}: -{self.quantity_used} ({self.department})"


class InventoryRestock(models.Model):
    """Stock added to an item."""

    item = models.ForeignKey(InventoryItem, on_delete=models.CASCADE, related_name='restock_history')
    date = models.DateTimeField(default=timezone.now)
    quantity = models.PositiveIntegerField()
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    supplier = models.CharField(max_length=200, blank=True)
    batch_number = models.CharField(max_length=100, blank=True)

    class Meta:
        db_table = 'inventory_restocks'
        ordering = ['-date']
        verbose_name = 'Inventory Restock'
        verbose_name_plural = 'Inventory Restocks'

    def __str__(self):
        return f"{self.item.item_code}: +{self.quantity}"
