from rest_framework import serializers

from .models import TelemedicineSession


class TelemedicineSessionSerializer(serializers.ModelSerializer):
    patient_name = serializers.CharField(source='patient.name', read_only=True)
    patient_email = serializers.CharField(source='patient.email', read_only=True)
    patient_phone = serializers.CharField(source='patient.phone', read_only=True)
    doctor_name = serializers.CharField(source='doctor.name', read_only=True)
    doctor_speciality = serializers.CharField(source='doctor.speciality', read_only=True)
    doctor_image = serializers.CharField(source='doctor.image', read_only=True)

    class Meta:
        model = TelemedicineSession
        fields = [
            'id', 'session_id', 'room_id', 'patient', 'patient_name', 'patient_email',
            'patient_phone', 'doctor', 'doctor_name', 'doctor_speciality', 'doctor_image',
            'appointment', 'session_type', 'status', 'scheduled_time', 'duration',
            'start_time', 'end_time', 'recording_url', 'chat_history', 'technical_issues',
            'prescription_notes', 'doctor_notes', 'follow_up_required', 'follow_up_date',
            'session_fee', 'payment_status', 'patient_rating', 'feedback',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields


class AdminSessionCreateSerializer(serializers.Serializer):
    appointment_id = serializers.IntegerField()
    session_type = serializers.ChoiceField(choices=TelemedicineSession.SESSION_TYPE_CHOICES, required=False)
    scheduled_time = serializers.DateTimeField()
    duration = serializers.IntegerField(required=False)
    session_fee = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)


class DirectSessionCreateSerializer(serializers.Serializer):
    doctor_id = serializers.IntegerField()
    session_type = serializers.ChoiceField(choices=TelemedicineSession.SESSION_TYPE_CHOICES, required=False)
    scheduled_time = serializers.DateTimeField()


class EndSessionSerializer(serializers.Serializer):
    prescription_notes = serializers.CharField(required=False)
    doctor_notes = serializers.CharField(required=False)
    follow_up_required = serializers.BooleanField(required=False)
    follow_up_date = serializers.DateTimeField(required=False)


class ChatMessageSerializer(serializers.Serializer):
    sender = serializers.ChoiceField(choices=TelemedicineSession.SENDER_CHOICES, required=False)
    message = serializers.CharField()
    message_type = serializers.ChoiceField(choices=TelemedicineSession.MESSAGE_TYPE_CHOICES, required=False)


class RateSessionSerializer(serializers.Serializer):
    rating = serializers.IntegerField()
    feedback = serializers.CharField(required=False)
