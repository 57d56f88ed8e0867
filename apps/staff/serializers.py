from rest_framework import serializers

from .models import Staff, StaffAttendance


class StaffAttendanceSerializer(serializers.ModelSerializer):
    class Meta:
        model = StaffAttendance
        fields = ['id', 'date', 'check_in', 'check_out', 'hours_worked', 'status']
        read_only_fields = fields


class StaffSerializer(serializers.ModelSerializer):
    class Meta:
        model = Staff
        fields = [
            'id', 'employee_id', 'name', 'email', 'phone', 'role', 'department',
            'date_of_joining', 'qualification', 'experience', 'salary', 'address',
            'emergency_contact', 'shifts', 'status', 'leave_balance', 'image',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields


class StaffCreateSerializer(serializers.Serializer):
    """Add-staff form (schema only)."""

    name = serializers.CharField()
    email = serializers.EmailField()
    phone = serializers.CharField()
    role = serializers.ChoiceField(choices=Staff.ROLE_CHOICES)
    department = serializers.CharField()
    qualification = serializers.CharField()
    experience = serializers.IntegerField(min_value=0)
    salary = serializers.DecimalField(max_digits=12, decimal_places=2)
    address = serializers.JSONField(required=False)
    emergency_contact = serializers.JSONField(required=False)
    shifts = serializers.JSONField(required=False)
    image = serializers.URLField(required=False)


class StaffUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = Staff
        fields = [
            'name', 'email', 'phone', 'role', 'department', 'qualification',
            'experience', 'salary', 'address', 'emergency_contact', 'shifts',
            'status', 'leave_balance', 'image'
        ]


class MarkAttendanceSerializer(serializers.Serializer):
    check_in = serializers.CharField(required=False, help_text="e.g. 09:00 or 9:00 AM")
    check_out = serializers.CharField(required=False)
    status = serializers.ChoiceField(choices=StaffAttendance.STATUS_CHOICES, required=False)
