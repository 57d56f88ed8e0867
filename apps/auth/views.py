"""
Login and registration for the three HMS roles.

Each endpoint answers ``{"success": true, "token": <jwt>}``; the token is
sent back on later requests in the role's header (``atoken``, ``dtoken``,
``token``) or as ``Authorization: Bearer``.
"""

import logging

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from django.utils.crypto import constant_time_compare
from drf_spectacular.utils import extend_schema
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from common.auth_backends import ROLE_ADMIN, ROLE_DOCTOR, ROLE_PATIENT, issue_token
from common.drf_auth import AllowAny, IsAuthenticated
from common.exceptions import NotFound, Unauthorized, ValidationError

from .serializers import LoginSerializer, RegisterSerializer, TokenSerializer

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


def _credentials(request):
    return request.data.get('email') or '', request.data.get('password') or ''


@extend_schema(request=LoginSerializer, responses=TokenSerializer, tags=['Auth'])
@api_view(['POST'])
@permission_classes([AllowAny])
def admin_login_view(request):
    """Admin login against the configured ADMIN_EMAIL / ADMIN_PASSWORD."""
    email, password = _credentials(request)
    if not (constant_time_compare(email, settings.ADMIN_EMAIL)
            and constant_time_compare(password, settings.ADMIN_PASSWORD)):
        logger.warning(f"Admin login failed for {email}")
        raise Unauthorized('Invalid credentials')

    logger.info("Admin logged in")
    return Response({'success': True, 'token': issue_token(ROLE_ADMIN)})


@extend_schema(request=LoginSerializer, responses=TokenSerializer, tags=['Auth'])
@api_view(['POST'])
@permission_classes([AllowAny])
def doctor_login_view(request):
    from apps.doctors.models import Doctor

    email, password = _credentials(request)
    doctor = Doctor.objects.filter(email__iexact=email).first()
    if doctor is None or not doctor.check_password(password):
        logger.warning(f"Doctor login failed for {email}")
        raise Unauthorized('Invalid credentials')

    logger.info(f"Doctor {doctor.pk} logged in")
    return Response({'success': True, 'token': issue_token(ROLE_DOCTOR, doctor.pk)})


@extend_schema(request=LoginSerializer, responses=TokenSerializer, tags=['Auth'])
@api_view(['POST'])
@permission_classes([AllowAny])
def user_login_view(request):
    from apps.patients.models import PatientProfile

    email, password = _credentials(request)
    patient = PatientProfile.objects.filter(email__iexact=email).first()
    if patient is None:
        raise NotFound('User does not exist')
    if not patient.check_password(password):
        logger.warning(f"Patient login failed for {email}")
        raise Unauthorized('Invalid credentials')

    logger.info(f"Patient {patient.pk} logged in")
    return Response({'success': True, 'token': issue_token(ROLE_PATIENT, patient.pk)})


@extend_schema(request=RegisterSerializer, responses=TokenSerializer, tags=['Auth'])
@api_view(['POST'])
@permission_classes([AllowAny])
def user_register_view(request):
    """Create a patient account and log it in."""
    from apps.patients.models import PatientProfile

    name = request.data.get('name')
    email, password = _credentials(request)
    if not name or not email or not password:
        raise ValidationError('Missing Details')
    try:
        validate_email(email)
    except DjangoValidationError:
        raise ValidationError('Please enter a valid email')
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError('Please enter a strong password')
    if PatientProfile.objects.filter(email__iexact=email).exists():
        raise ValidationError('User already exists')

    patient = PatientProfile(name=name, email=email)
    patient.set_password(password)
    patient.save()

    logger.info(f"Patient {patient.pk} registered")
    return Response({'success': True, 'token': issue_token(ROLE_PATIENT, patient.pk)})


@extend_schema(tags=['Auth'])
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def me_view(request):
    """Role and id carried by the caller's token."""
    return Response({'success': True, 'role': request.user.role, 'id': request.user.id})
