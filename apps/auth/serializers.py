"""Request shapes for the login and registration endpoints (schema only)."""
from rest_framework import serializers


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)


class RegisterSerializer(serializers.Serializer):
    name = serializers.CharField()
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=8)


class TokenSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    token = serializers.CharField()
