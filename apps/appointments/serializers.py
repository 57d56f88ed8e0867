from rest_framework import serializers

from .models import Appointment


class AppointmentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Appointment
        fields = [
            'id', 'patient', 'doctor', 'slot_date', 'slot_time',
            'patient_data', 'doctor_data', 'amount', 'booked_at',
            'cancelled', 'payment', 'is_completed', 'is_telemedicine'
        ]
        read_only_fields = fields


class AppointmentBookSerializer(serializers.Serializer):
    doc_id = serializers.IntegerField()
    slot_date = serializers.CharField(max_length=20)
    slot_time = serializers.CharField(max_length=20)
