# apps/staff/tests.py

from datetime import date
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone

from common.exceptions import ValidationError
from common.testing import JSONClient, admin_headers, doctor_headers, make_doctor

from . import services
from .models import Staff, StaffAttendance


def staff_payload(**extra):
    data = {
        'name': 'Meena Iyer',
        'email': 'meena@example.com',
        'phone': '9876543210',
        'role': 'nurse',
        'department': 'ICU',
        'qualification': 'BSc Nursing',
        'experience': 5,
        'salary': '42000',
    }
    data.update(extra)
    return data


class StaffModelTestCase(TestCase):

    def test_employee_id_format(self):
        first = services.add_staff(staff_payload())
        second = services.add_staff(staff_payload(email='ravi@example.com', name='Ravi'))
        year = timezone.localdate().year

        self.assertEqual(first.employee_id, f'EMP{year}0001')
        self.assertEqual(second.employee_id, f'EMP{year}0002')

    def test_defaults(self):
        staff = services.add_staff(staff_payload())
        self.assertEqual(staff.status, 'active')
        self.assertEqual(staff.leave_balance, {'casual': 12, 'sick': 10, 'annual': 21})
        self.assertEqual(staff.salary, Decimal('42000'))

    def test_duplicate_email(self):
        services.add_staff(staff_payload())
        with self.assertRaisesMessage(ValidationError, 'Staff member already exists'):
            services.add_staff(staff_payload(email='MEENA@example.com'))

    def test_role_label_is_normalised(self):
        staff = services.add_staff(staff_payload(role='Support Staff'))
        self.assertEqual(staff.role, 'support_staff')


class StaffAttendanceTestCase(TestCase):
    """One record per day, hours recomputed from the clock times"""

    def setUp(self):
        self.staff = services.add_staff(staff_payload())
        self.day = date(2024, 3, 4)

    def test_hours_worked(self):
        record = services.mark_attendance(self.staff, check_in='09:00', check_out='17:30', day=self.day)
        self.assertEqual(record.hours_worked, Decimal('8.50'))
        self.assertEqual(record.status, 'present')

    def test_second_mark_updates_same_record(self):
        services.mark_attendance(self.staff, check_in='09:15', day=self.day)
        record = services.mark_attendance(self.staff, check_out='06:15 PM', status='late', day=self.day)

        self.assertEqual(StaffAttendance.objects.count(), 1)
        self.assertEqual(record.check_in, '09:15')
        self.assertEqual(record.status, 'late')
        self.assertEqual(record.hours_worked, Decimal('9.00'))

    def test_check_in_only_leaves_hours_at_zero(self):
        record = services.mark_attendance(self.staff, check_in='09:00', day=self.day)
        self.assertEqual(record.hours_worked, Decimal('0'))

    def test_invalid_status(self):
        with self.assertRaises(ValidationError):
            services.mark_attendance(self.staff, status='holiday', day=self.day)

    def test_history_by_month(self):
        services.mark_attendance(self.staff, check_in='09:00', day=date(2024, 2, 28))
        services.mark_attendance(self.staff, check_in='09:00', day=date(2024, 3, 1))
        services.mark_attendance(self.staff, check_in='09:00', day=date(2024, 3, 2))

        self.assertEqual(services.attendance_history(self.staff, '3', '2024').count(), 2)
        self.assertEqual(services.attendance_history(self.staff).count(), 3)


class StaffApiTestCase(TestCase):
    """Staff endpoints"""

    def setUp(self):
        self.client = JSONClient()
        self.url = '/api/staff/'

    def _add(self, **extra):
        return self.client.post_json(self.url, staff_payload(**extra), **admin_headers())

    def test_add_and_get(self):
        response, data = self._add()
        self.assertEqual(data['message'], 'Staff member added successfully')

        staff = Staff.objects.get(employee_id=data['employee_id'])
        data = self.client.get_json(f'{self.url}{staff.pk}/', **admin_headers())[1]
        self.assertEqual(data['staff']['email'], 'meena@example.com')

    def test_missing_fields(self):
        response, data = self.client.post_json(self.url, {'name': 'Meena'}, **admin_headers())
        self.assertFalse(data['success'])

    def test_list_filters(self):
        self._add()
        self._add(email='ravi@example.com', name='Ravi', role='technician', department='Radiology')

        data = self.client.get_json(self.url, {'role': 'technician'}, **admin_headers())[1]
        self.assertEqual([row['name'] for row in data['staff']], ['Ravi'])

        data = self.client.get_json(self.url, {'department': 'All'}, **admin_headers())[1]
        self.assertEqual(len(data['staff']), 2)

        data = self.client.get_json(self.url, {'department': 'Radiology', 'status': 'All'}, **admin_headers())[1]
        self.assertEqual([row['name'] for row in data['staff']], ['Ravi'])

        data = self.client.get_json(self.url, {'role': 'nurse', 'department': 'Radiology'}, **admin_headers())[1]
        self.assertEqual(data['staff'], [])

    def test_update_and_delete(self):
        staff = Staff.objects.get(employee_id=self._add()[1]['employee_id'])

        response, data = self.client.put_json(
            f'{self.url}{staff.pk}/', {'status': 'on_leave', 'department': 'Emergency'}, **admin_headers()
        )
        self.assertEqual(data['message'], 'Staff updated successfully')
        staff.refresh_from_db()
        self.assertEqual(staff.status, 'on_leave')
        self.assertEqual(staff.department, 'Emergency')

        response, data = self.client.delete_json(f'{self.url}{staff.pk}/', **admin_headers())
        self.assertEqual(data['message'], 'Staff member deleted successfully')
        self.assertFalse(Staff.objects.exists())

    def test_attendance_endpoint(self):
        staff = Staff.objects.get(employee_id=self._add()[1]['employee_id'])
        url = f'{self.url}{staff.pk}/attendance/'

        response, data = self.client.post_json(url, {'check_in': '09:00', 'check_out': '13:00'}, **admin_headers())
        self.assertEqual(data['message'], 'Attendance marked successfully')
        self.assertEqual(Decimal(data['attendance']['hours_worked']), Decimal('4'))

        data = self.client.get_json(url, **admin_headers())[1]
        self.assertEqual(data['staff']['employee_id'], staff.employee_id)
        self.assertEqual(len(data['attendance']), 1)

    def test_unknown_staff(self):
        data = self.client.get_json(f'{self.url}9999/', **admin_headers())[1]
        self.assertEqual(data['message'], 'Staff member not found')

    def test_admin_only(self):
        data = self.client.get_json(self.url, **doctor_headers(make_doctor()))[1]
        self.assertFalse(data['success'])
        self.assertEqual(data['code'], 'forbidden')
