# apps/inventory/tests.py

from datetime import datetime, timedelta, timezone as dt_timezone
from decimal import Decimal
from unittest.mock import patch

from django.test import TestCase
from django.utils import timezone

from common.exceptions import ValidationError
from common.testing import JSONClient, admin_headers, doctor_headers, make_doctor

from . import services
from .models import InventoryItem, InventoryUsage

NOW = datetime(2024, 6, 1, 12, tzinfo=dt_timezone.utc)


def make_item(**extra):
    fields = {
        'item_name': 'Paracetamol 500mg',
        'category': 'medicines',
        'unit_price': Decimal('2.50'),
        'quantity': 100,
        'reorder_level': 10,
        'max_stock_level': 500,
        'unit': 'tablets',
    }
    fields.update(extra)
    return InventoryItem.objects.create(**fields)


class InventoryStatusTestCase(TestCase):
    """Status derivation priority: expired > out of stock > low stock > in stock"""

    def test_in_stock(self):
        self.assertEqual(make_item().status, 'in_stock')

    def test_low_stock_at_reorder_level(self):
        self.assertEqual(make_item(quantity=10).status, 'low_stock')

    def test_out_of_stock(self):
        self.assertEqual(make_item(quantity=0).status, 'out_of_stock')

    def test_expired_wins_over_quantity(self):
        item = make_item(quantity=0, expiry_date=timezone.now() - timedelta(days=1))
        self.assertEqual(item.status, 'expired')

    def test_hand_set_status_is_rederived(self):
        item = make_item()
        item.status = 'discontinued'
        item.quantity = 0
        item.expiry_date = timezone.now() - timedelta(days=2)
        item.save()
        item.refresh_from_db()
        self.assertEqual(item.status, 'expired')

        expired = services.expiry_items()[1]
        self.assertIn(item, list(expired))

    def test_discontinued_empty_item_is_listed_as_out_of_stock(self):
        item = make_item()
        item.status = 'discontinued'
        item.quantity = 0
        item.save()

        self.assertEqual(InventoryItem.objects.get(pk=item.pk).status, 'out_of_stock')
        self.assertIn(item, list(services.low_stock_items()))

    def test_item_code_from_category_label(self):
        first = make_item()
        second = make_item(item_name='Syringe', category='consumables', unit='pieces')
        self.assertEqual(first.item_code, 'MED0001')
        self.assertEqual(second.item_code, 'CON0002')


class InventoryAlertTestCase(TestCase):

    @patch('django.utils.timezone.now', return_value=NOW)
    def test_low_stock_alert(self, mock_now):
        item = make_item(quantity=5)
        alerts = item.check_alerts()

        self.assertEqual(len(alerts), 1)
        self.assertEqual(alerts[0]['type'], 'low_stock')
        self.assertEqual(
            alerts[0]['message'],
            'Paracetamol 500mg is running low. Current quantity: 5, Reorder level: 10'
        )
        self.assertFalse(alerts[0]['acknowledged'])

    @patch('django.utils.timezone.now', return_value=NOW)
    def test_expiry_warning_rounds_days_up(self, mock_now):
        item = make_item(expiry_date=NOW + timedelta(days=9, hours=1))
        alerts = item.check_alerts()

        self.assertEqual([alert['type'] for alert in alerts], ['expiry_warning'])
        self.assertIn('will expire in 10 days on', alerts[0]['message'])

    @patch('django.utils.timezone.now', return_value=NOW)
    def test_expired_alert(self, mock_now):
        item = make_item(expiry_date=NOW - timedelta(days=2))
        alerts = item.check_alerts()

        self.assertEqual([alert['type'] for alert in alerts], ['expired'])
        self.assertIn('has expired on', alerts[0]['message'])

    @patch('django.utils.timezone.now', return_value=NOW)
    def test_no_alert_when_out_of_stock_or_far_from_expiry(self, mock_now):
        item = make_item(quantity=0, expiry_date=NOW + timedelta(days=90))
        self.assertEqual(item.check_alerts(), [])


class InventoryMovementTestCase(TestCase):
    """Usage and restock"""

    def test_restock_from_low_to_in_stock(self):
        item = make_item(quantity=5)
        self.assertEqual(item.status, 'low_stock')

        item = services.restock_item(item.pk, 20, unit_price='3.00', supplier='MedSupply')
        item.refresh_from_db()

        self.assertEqual(item.quantity, 25)
        self.assertEqual(item.status, 'in_stock')
        self.assertEqual(item.unit_price, Decimal('3.00'))
        self.assertEqual(item.restock_history.count(), 1)
        self.assertEqual(item.alerts, [])

    def test_usage_beyond_stock_is_rejected(self):
        item = make_item(quantity=5)

        with self.assertRaises(ValidationError):
            services.record_usage(item.pk, 999, department='ICU')

        item.refresh_from_db()
        self.assertEqual(item.quantity, 5)
        self.assertFalse(InventoryUsage.objects.exists())

    def test_usage_decrements_and_logs(self):
        item = make_item(quantity=15)
        services.record_usage(item.pk, 6, department='Ward A', purpose='Fever')
        item.refresh_from_db()

        self.assertEqual(item.quantity, 9)
        self.assertEqual(item.status, 'low_stock')
        self.assertEqual(item.usage.get().quantity_used, 6)
        self.assertEqual(item.alerts[0]['type'], 'low_stock')


class InventoryApiTestCase(TestCase):
    """Inventory endpoints"""

    def setUp(self):
        self.client = JSONClient()
        self.url = '/api/inventory/'

    def test_add_item(self):
        response, data = self.client.post_json(self.url, {
            'item_name': 'Gloves',
            'category': 'consumables',
            'unit_price': 5,
            'quantity': 3,
            'reorder_level': 10,
            'max_stock_level': 200,
            'unit': 'boxes',
            'supplier': '{"name": "MedSupply"}',
        }, **admin_headers())

        self.assertEqual(data['message'], 'Inventory item added successfully')
        item = InventoryItem.objects.get(item_code=data['item_code'])
        self.assertEqual(item.status, 'low_stock')
        self.assertEqual(item.supplier, {'name': 'MedSupply'})
        self.assertEqual(len(item.alerts), 1)

    def test_add_item_missing_fields(self):
        response, data = self.client.post_json(self.url, {'item_name': 'Gloves'}, **admin_headers())
        self.assertFalse(data['success'])

    def test_add_item_impossible_expiry(self):
        response, data = self.client.post_json(self.url, {
            'item_name': 'Gloves',
            'category': 'consumables',
            'unit_price': 5,
            'quantity': 3,
            'max_stock_level': 200,
            'unit': 'boxes',
            'expiry_date': '2024-13-45',
        }, **admin_headers())
        self.assertEqual(response.status_code, 200)
        self.assertFalse(data['success'])
        self.assertEqual(data['message'], 'Invalid date for expiry_date')
        self.assertFalse(InventoryItem.objects.exists())

    def test_usage_endpoint_rejects_excess(self):
        item = make_item(quantity=5)
        response, data = self.client.post_json(
            f'{self.url}{item.pk}/usage/', {'quantity_used': 999}, **admin_headers()
        )
        self.assertFalse(data['success'])
        self.assertEqual(data['message'], 'Insufficient quantity available')

        response, data = self.client.post_json(
            f'{self.url}{item.pk}/usage/', {'quantity_used': 2, 'department': 'OPD'}, **admin_headers()
        )
        self.assertEqual(data['message'], 'Usage recorded successfully')

    def test_restock_endpoint(self):
        item = make_item(quantity=5)
        response, data = self.client.post_json(f'{self.url}{item.pk}/restock/', {'quantity': 20}, **admin_headers())
        self.assertEqual(data['message'], 'Item restocked successfully')
        self.assertEqual(InventoryItem.objects.get(pk=item.pk).quantity, 25)

    def test_alert_lists(self):
        make_item(item_name='Low', quantity=3)
        make_item(item_name='Empty', quantity=0)
        make_item(item_name='Fine')
        make_item(item_name='Soon', expiry_date=timezone.now() + timedelta(days=5))
        make_item(item_name='Old', expiry_date=timezone.now() - timedelta(days=5))

        data = self.client.get_json(f'{self.url}low-stock/', **admin_headers())[1]
        self.assertEqual(sorted(row['item_name'] for row in data['alerts']), ['Empty', 'Low'])

        data = self.client.get_json(f'{self.url}expiry-alerts/', **admin_headers())[1]
        self.assertEqual([row['item_name'] for row in data['expiring_items']], ['Soon'])
        self.assertEqual([row['item_name'] for row in data['expired_items']], ['Old'])

    def test_list_filters(self):
        make_item(item_name='Low', quantity=3)
        make_item(item_name='Gloves', category='consumables', unit='boxes')
        make_item(item_name='Fine')

        data = self.client.get_json(self.url, {'category': 'medicines', 'status': 'low_stock'}, **admin_headers())[1]
        self.assertEqual([row['item_name'] for row in data['items']], ['Low'])

        data = self.client.get_json(self.url, {'category': 'All', 'status': 'in_stock'}, **admin_headers())[1]
        self.assertEqual([row['item_name'] for row in data['items']], ['Fine', 'Gloves'])

        data = self.client.get_json(self.url, {'unit': 'boxes'}, **admin_headers())[1]
        self.assertEqual([row['item_name'] for row in data['items']], ['Gloves'])

    def test_update_rederives_status(self):
        item = make_item()
        response, data = self.client.put_json(f'{self.url}{item.pk}/', {'quantity': 0}, **admin_headers())
        self.assertEqual(data['message'], 'Item updated successfully')
        self.assertEqual(data['item']['status'], 'out_of_stock')

    def test_get_unknown_item(self):
        response, data = self.client.get_json(f'{self.url}9999/', **admin_headers())
        self.assertFalse(data['success'])
        self.assertEqual(data['message'], 'Item not found')

    def test_admin_only(self):
        doctor = make_doctor()
        response, data = self.client.get_json(self.url, **doctor_headers(doctor))
        self.assertFalse(data['success'])
