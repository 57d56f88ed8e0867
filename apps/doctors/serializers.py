from rest_framework import serializers

from .models import Doctor


class DoctorSerializer(serializers.ModelSerializer):
    """Doctor profile without the password hash."""

    class Meta:
        model = Doctor
        fields = [
            'id', 'name', 'email', 'image', 'speciality', 'degree', 'experience',
            'about', 'available', 'fees', 'address', 'slots_booked',
            'consultation_fee', 'follow_up_fee', 'emergency_fee',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'slots_booked', 'created_at', 'updated_at']


class DoctorListSerializer(serializers.ModelSerializer):
    """Public listing used by the patient SPA."""

    class Meta:
        model = Doctor
        fields = [
            'id', 'name', 'image', 'speciality', 'degree', 'experience',
            'about', 'available', 'fees', 'address', 'slots_booked'
        ]


class DoctorCreateSerializer(serializers.ModelSerializer):
    """Admin form for adding a doctor."""

    password = serializers.CharField(write_only=True)

    class Meta:
        model = Doctor
        fields = [
            'name', 'email', 'password', 'image', 'speciality', 'degree',
            'experience', 'about', 'fees', 'address'
        ]
        extra_kwargs = {
            'email': {'error_messages': {'invalid': 'Please enter a valid email'}},
        }

    def validate_password(self, value):
        if len(value) < 8:
            raise serializers.ValidationError('Please enter a strong password')
        return value

    def create(self, validated_data):
        password = validated_data.pop('password')
        doctor = Doctor(**validated_data)
        doctor.set_password(password)
        doctor.save()
        return doctor


class DoctorProfileUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = Doctor
        fields = ['fees', 'address', 'available', 'about', 'image']
