from rest_framework import serializers

from .models import PatientProfile


class PatientProfileSerializer(serializers.ModelSerializer):
    """Patient profile without the password hash."""

    age = serializers.ReadOnlyField()

    class Meta:
        model = PatientProfile
        fields = [
            'id', 'name', 'email', 'image', 'phone', 'address',
            'gender', 'dob', 'age', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'email', 'created_at', 'updated_at']


class PatientProfileUpdateSerializer(serializers.ModelSerializer):
    """Fields a patient may change on their own profile."""

    class Meta:
        model = PatientProfile
        fields = ['name', 'image', 'phone', 'address', 'gender', 'dob']

    def validate_dob(self, value):
        from .models import age_from_dob
        if value and age_from_dob(value) is None:
            raise serializers.ValidationError('Date of birth must be DD_MM_YYYY')
        return value
