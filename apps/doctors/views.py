import logging

from django.db.models import Q
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import filters, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from common.auth_backends import ROLE_ADMIN, ROLE_DOCTOR
from common.drf_auth import ANYONE, RolePermission
from common.exceptions import Forbidden, ValidationError
from common.utils import parse_json_field, require_fields, to_decimal

from .models import Doctor
from .services import get_doctor_or_404
from .serializers import (
    DoctorCreateSerializer, DoctorListSerializer,
    DoctorProfileUpdateSerializer, DoctorSerializer
)

logger = logging.getLogger(__name__)


@extend_schema_view(
    list=extend_schema(summary="List Doctors", description="Public doctor listing", tags=['Doctors']),
    retrieve=extend_schema(summary="Get Doctor", tags=['Doctors']),
    create=extend_schema(summary="Add Doctor", description="Admin only", request=DoctorCreateSerializer, tags=['Doctors']),
)
class DoctorViewSet(viewsets.ModelViewSet):
    """Doctor directory, admin management and the doctor's own profile."""

    queryset = Doctor.objects.all()
    permission_classes = [RolePermission]
    http_method_names = ['get', 'post', 'put', 'delete']
    default_roles = (ROLE_ADMIN,)
    action_roles = {
        'list': ANYONE,
        'retrieve': ANYONE,
        'change_availability': (ROLE_ADMIN, ROLE_DOCTOR),
        'profile': (ROLE_DOCTOR,),
        'update_profile': (ROLE_DOCTOR,),
        'dashboard': (ROLE_DOCTOR,),
    }

    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['speciality', 'available']
    search_fields = ['name', 'speciality', 'degree']
    ordering_fields = ['name', 'fees', 'created_at']
    ordering = ['name']

    def get_serializer_class(self):
        if self.action in ('list', 'retrieve') and getattr(self.request.user, 'role', None) != ROLE_ADMIN:
            return DoctorListSerializer
        if self.action == 'create':
            return DoctorCreateSerializer
        return DoctorSerializer

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        serializer = self.get_serializer(queryset, many=True)
        return Response({'success': True, 'doctors': serializer.data})

    def retrieve(self, request, *args, **kwargs):
        doctor = get_doctor_or_404(kwargs.get('pk'))
        return Response({'success': True, 'doctor': self.get_serializer(doctor).data})

    def create(self, request, *args, **kwargs):
        """Add a doctor (admin)."""
        require_fields(
            request.data,
            ['name', 'email', 'password', 'speciality', 'degree', 'experience', 'about', 'fees', 'address']
        )
        data = {key: request.data.get(key) for key in DoctorCreateSerializer.Meta.fields if key in request.data}
        data['address'] = parse_json_field(request.data.get('address'), 'address', default={})

        serializer = DoctorCreateSerializer(data=data)
        serializer.is_valid(raise_exception=True)
        doctor = serializer.save()

        logger.info(f"Doctor {doctor.pk} added ({doctor.speciality})")
        return Response({'success': True, 'message': 'Doctor Added', 'doctor_id': doctor.pk})

    def update(self, request, *args, **kwargs):
        doctor = get_doctor_or_404(kwargs.get('pk'))
        data = {key: request.data[key] for key in request.data if key != 'password'}
        if 'address' in data:
            data['address'] = parse_json_field(data['address'], 'address', default={})
        serializer = DoctorSerializer(doctor, data=data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response({'success': True, 'message': 'Doctor updated', 'doctor': serializer.data})

    def destroy(self, request, *args, **kwargs):
        doctor = get_doctor_or_404(kwargs.get('pk'))
        doctor.delete()
        logger.info(f"Doctor {kwargs.get('pk')} deleted")
        return Response({'success': True, 'message': 'Doctor deleted'})

    @action(detail=True, methods=['post'], url_path='change-availability')
    def change_availability(self, request, pk=None):
        """Toggle the doctor's availability for new bookings."""
        doctor = get_doctor_or_404(pk)
        if request.user.role == ROLE_DOCTOR and doctor.pk != request.user.id:
            raise Forbidden('Unauthorized action')

        doctor.available = not doctor.available
        doctor.save(update_fields=['available', 'updated_at'])
        return Response({'success': True, 'message': 'Availability Changed', 'available': doctor.available})

    @action(detail=True, methods=['post'], url_path='telemedicine-fees')
    def telemedicine_fees(self, request, pk=None):
        """Set the doctor's per-type telemedicine fees (admin)."""
        doctor = get_doctor_or_404(pk)
        for field in ('consultation_fee', 'follow_up_fee', 'emergency_fee'):
            if field in request.data:
                setattr(doctor, field, to_decimal(request.data.get(field), field))
        doctor.save()
        return Response({
            'success': True,
            'message': 'Doctor fees updated successfully',
            'doctor': DoctorSerializer(doctor).data
        })

    @action(detail=False, methods=['get'])
    def profile(self, request):
        doctor = get_doctor_or_404(request.user.id)
        return Response({'success': True, 'profile_data': DoctorSerializer(doctor).data})

    @extend_schema(request=DoctorProfileUpdateSerializer)
    @action(detail=False, methods=['post'], url_path='update-profile')
    def update_profile(self, request):
        doctor = get_doctor_or_404(request.user.id)
        data = {key: request.data[key] for key in DoctorProfileUpdateSerializer.Meta.fields if key in request.data}
        if 'address' in data:
            data['address'] = parse_json_field(data['address'], 'address', default={})

        serializer = DoctorProfileUpdateSerializer(doctor, data=data, partial=True)
        if not serializer.is_valid():
            raise ValidationError('Invalid profile data')
        serializer.save()
        return Response({'success': True, 'message': 'Profile Updated'})

    @action(detail=False, methods=['get'])
    def dashboard(self, request):
        """Earnings, appointment and patient counts for the logged-in doctor."""
        from apps.appointments.models import Appointment
        from apps.appointments.serializers import AppointmentSerializer

        appointments = Appointment.objects.filter(doctor_id=request.user.id).order_by('-booked_at')
        earnings = sum(
            (appointment.amount for appointment in appointments.filter(Q(is_completed=True) | Q(payment=True))),
            0
        )
        dash_data = {
            'earnings': earnings,
            'appointments': appointments.count(),
            'patients': appointments.values('patient_id').distinct().count(),
            'latest_appointments': AppointmentSerializer(appointments[:5], many=True).data,
        }
        return Response({'success': True, 'dash_data': dash_data})
