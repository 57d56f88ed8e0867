from rest_framework import serializers

from .models import PrescribedMedication, Prescription


class PrescribedMedicationSerializer(serializers.ModelSerializer):
    class Meta:
        model = PrescribedMedication
        fields = ['name', 'dosage', 'frequency', 'duration', 'instructions']


class PrescriptionSerializer(serializers.ModelSerializer):
    medications = PrescribedMedicationSerializer(many=True, read_only=True)

    class Meta:
        model = Prescription
        fields = [
            'id', 'appointment', 'doctor', 'patient', 'patient_data', 'doctor_data',
            'appointment_data', 'diagnosis', 'symptoms', 'medications', 'lab_tests',
            'advice', 'notes', 'follow_up_date', 'status', 'prescription_date',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields


class PrescriptionWriteSerializer(serializers.Serializer):
    """Create / update form (schema only)."""

    appointment_id = serializers.IntegerField(required=False)
    diagnosis = serializers.CharField()
    symptoms = serializers.CharField(required=False)
    medications = PrescribedMedicationSerializer(many=True)
    lab_tests = serializers.ListField(child=serializers.CharField(), required=False)
    advice = serializers.CharField(required=False)
    notes = serializers.CharField(required=False)
    follow_up_date = serializers.CharField(required=False)
    status = serializers.ChoiceField(choices=Prescription.STATUS_CHOICES, required=False)
