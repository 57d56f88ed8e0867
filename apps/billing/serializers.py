from rest_framework import serializers

from .models import Bill, BillPayment, BillService


class BillServiceSerializer(serializers.ModelSerializer):
    class Meta:
        model = BillService
        fields = [
            'id', 'service_name', 'service_code', 'category',
            'quantity', 'unit_price', 'total_price', 'discount', 'tax'
        ]
        read_only_fields = ['id', 'total_price']


class BillPaymentSerializer(serializers.ModelSerializer):
    class Meta:
        model = BillPayment
        fields = [
            'id', 'payment_id', 'amount', 'payment_method',
            'transaction_id', 'payment_date', 'status'
        ]
        read_only_fields = fields


class BillSerializer(serializers.ModelSerializer):
    """Bill with its service lines and payment ledger."""

    services = BillServiceSerializer(many=True, read_only=True)
    payments = BillPaymentSerializer(many=True, read_only=True)
    patient_email = serializers.SerializerMethodField()
    doctor_speciality = serializers.SerializerMethodField()

    class Meta:
        model = Bill
        fields = [
            'id', 'bill_number', 'patient', 'patient_name', 'patient_contact', 'patient_email',
            'bill_type', 'appointment', 'admission_code', 'doctor', 'doctor_name',
            'doctor_speciality', 'services', 'subtotal', 'total_discount', 'total_tax',
            'total_amount', 'payment_status', 'payment_method', 'paid_date', 'payments',
            'insurance', 'billing_date', 'due_date', 'notes', 'generated_by',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields

    def get_patient_email(self, obj):
        return obj.patient.email if obj.patient_id else None

    def get_doctor_speciality(self, obj):
        return obj.doctor.speciality if obj.doctor else None


class BillCreateSerializer(serializers.Serializer):
    """Request body of bill creation (schema only; the service parses the payload)."""

    patient_id = serializers.IntegerField()
    bill_type = serializers.ChoiceField(choices=Bill.BILL_TYPE_CHOICES, required=False)
    appointment_id = serializers.IntegerField(required=False)
    admission_id = serializers.CharField(required=False)
    doctor_id = serializers.IntegerField(required=False)
    services = BillServiceSerializer(many=True, required=False)
    items = serializers.ListField(child=serializers.DictField(), required=False)
    insurance = serializers.JSONField(required=False)
    notes = serializers.CharField(required=False)
    generated_by = serializers.CharField(required=False)


class BillUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = Bill
        fields = ['bill_type', 'notes', 'generated_by', 'due_date', 'payment_method', 'admission_code', 'insurance']


class ProcessPaymentSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    payment_method = serializers.ChoiceField(choices=BillPayment.METHOD_CHOICES, required=False)
    transaction_id = serializers.CharField(required=False)
    payment_status = serializers.ChoiceField(choices=Bill.PAYMENT_STATUS_CHOICES, required=False)
