from rest_framework import serializers

from .models import Admission


class AdmissionSerializer(serializers.ModelSerializer):
    """
    Full admission record.

    ``total_charges`` is recomputed against the current time for stays that
    are still open, without writing it back. Missing name snapshots fall back
    to the linked patient / doctor.
    """

    patient_name = serializers.SerializerMethodField()
    doctor_name = serializers.SerializerMethodField()
    total_charges = serializers.SerializerMethodField()
    patient_email = serializers.SerializerMethodField()

    class Meta:
        model = Admission
        fields = [
            'id', 'admission_id', 'patient', 'patient_name', 'patient_email',
            'patient_age', 'patient_gender', 'patient_phone',
            'admission_type', 'doctor', 'doctor_name', 'doctor_name_at_admission',
            'department', 'room_number', 'room_type', 'bed_number', 'daily_charges',
            'admission_date', 'expected_discharge_date', 'expected_stay_duration',
            'actual_discharge_date', 'admission_reason', 'initial_diagnosis',
            'final_diagnosis', 'treatment_plan', 'attending_physicians',
            'vitals', 'medications', 'procedures', 'lab_tests', 'notes',
            'discharge_details', 'emergency_contact', 'insurance',
            'status', 'total_charges', 'created_at', 'updated_at'
        ]
        read_only_fields = fields

    def get_patient_name(self, obj):
        if obj.patient_name:
            return obj.patient_name
        return obj.patient.name if obj.patient else ''

    def get_patient_email(self, obj):
        return obj.patient.email if obj.patient else None

    def get_doctor_name(self, obj):
        return obj.doctor_name_at_admission or obj.doctor.name

    def get_total_charges(self, obj):
        if obj.is_active:
            return str(obj.calculate_total_charges())
        return str(obj.total_charges)


class AdmissionListSerializer(AdmissionSerializer):
    """Admission listing without the clinical logs."""

    class Meta(AdmissionSerializer.Meta):
        fields = [
            'id', 'admission_id', 'patient', 'patient_name', 'patient_email',
            'patient_age', 'patient_gender', 'patient_phone',
            'admission_type', 'doctor', 'doctor_name', 'department',
            'room_number', 'room_type', 'bed_number', 'daily_charges',
            'admission_date', 'expected_discharge_date', 'actual_discharge_date',
            'admission_reason', 'initial_diagnosis', 'status', 'total_charges',
            'created_at'
        ]
        read_only_fields = fields


class DoctorAdmissionSerializer(AdmissionListSerializer):
    """Admission row annotated with how the requesting doctor is involved."""

    doctor_role = serializers.ReadOnlyField()

    class Meta(AdmissionListSerializer.Meta):
        fields = AdmissionListSerializer.Meta.fields + ['doctor_role']
        read_only_fields = fields


class PatientAdmissionSerializer(AdmissionSerializer):
    """Patient's own admissions with display-friendly cost fields."""

    estimated_daily_cost = serializers.ReadOnlyField(source='daily_charges')
    total_cost = serializers.SerializerMethodField()
    attending_doctor = serializers.SerializerMethodField()
    diagnosis = serializers.SerializerMethodField()

    class Meta(AdmissionSerializer.Meta):
        fields = AdmissionSerializer.Meta.fields + [
            'estimated_daily_cost', 'total_cost', 'attending_doctor', 'diagnosis'
        ]
        read_only_fields = fields

    def get_total_cost(self, obj):
        return self.get_total_charges(obj)

    def get_attending_doctor(self, obj):
        if obj.attending_physicians:
            return {'name': obj.attending_physicians[0].get('doctor_name')}
        return {'name': self.get_doctor_name(obj)}

    def get_diagnosis(self, obj):
        return obj.initial_diagnosis or obj.admission_reason or 'To be determined'


class AdmissionCreateSerializer(serializers.Serializer):
    """Intake form accepted by the create endpoint (documentation only; parsed by the service)."""

    patient_id = serializers.IntegerField(required=False)
    admitting_doctor_id = serializers.IntegerField(required=False)
    attending_doctor_id = serializers.IntegerField(required=False)
    patient_name = serializers.CharField(required=False)
    patient_age = serializers.IntegerField(required=False)
    patient_gender = serializers.CharField(required=False)
    patient_contact = serializers.CharField(required=False)
    admission_type = serializers.ChoiceField(choices=Admission.ADMISSION_TYPE_CHOICES, required=False)
    department = serializers.CharField(required=False)
    room_number = serializers.CharField(required=False)
    room_type = serializers.ChoiceField(choices=Admission.ROOM_TYPE_CHOICES, required=False)
    bed_number = serializers.CharField(required=False)
    room_charges = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)
    admission_date = serializers.DateTimeField(required=False)
    expected_stay_duration = serializers.IntegerField(required=False)
    admission_reason = serializers.CharField(required=False)
    diagnosis = serializers.CharField(required=False)
    symptoms = serializers.CharField(required=False)
    emergency_contact = serializers.JSONField(required=False)
    insurance_details = serializers.JSONField(required=False)


class AdmissionUpdateSerializer(serializers.ModelSerializer):
    """Partial update of the editable admission fields."""

    class Meta:
        model = Admission
        fields = [
            'patient_name', 'patient_age', 'patient_gender', 'patient_phone',
            'admission_type', 'department', 'room_number', 'room_type', 'bed_number',
            'daily_charges', 'expected_discharge_date', 'expected_stay_duration',
            'admission_reason', 'initial_diagnosis', 'final_diagnosis', 'treatment_plan',
            'status', 'emergency_contact', 'insurance', 'discharge_details',
            'attending_physicians'
        ]


class DischargeSerializer(serializers.Serializer):
    discharge_type = serializers.ChoiceField(choices=Admission.DISCHARGE_TYPE_CHOICES, required=False)
    discharge_summary = serializers.CharField(required=False, allow_blank=True)
    follow_up_instructions = serializers.CharField(required=False, allow_blank=True)
    follow_up_date = serializers.DateTimeField(required=False)
    discharged_by = serializers.CharField(required=False, allow_blank=True)
    final_diagnosis = serializers.CharField(required=False, allow_blank=True)
    final_bill_amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
