from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import filters, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.patients.services import get_patient_or_404
from common.auth_backends import ROLE_ADMIN, ROLE_DOCTOR, ROLE_PATIENT
from common.drf_auth import RolePermission
from common.exceptions import ValidationError

from . import services
from .models import Appointment
from .serializers import AppointmentBookSerializer, AppointmentSerializer


@extend_schema_view(
    list=extend_schema(
        summary="List Appointments",
        description="Admin sees all appointments, doctors and patients see their own",
        tags=['Appointments']
    ),
    retrieve=extend_schema(summary="Get Appointment", tags=['Appointments']),
    create=extend_schema(summary="Book Appointment", request=AppointmentBookSerializer, tags=['Appointments']),
)
class AppointmentViewSet(viewsets.ModelViewSet):
    """Appointment booking, cancellation, completion and the admin dashboard."""

    queryset = Appointment.objects.select_related('patient', 'doctor')
    serializer_class = AppointmentSerializer
    permission_classes = [RolePermission]
    http_method_names = ['get', 'post']
    default_roles = (ROLE_ADMIN, ROLE_DOCTOR, ROLE_PATIENT)
    action_roles = {
        'create': (ROLE_PATIENT,),
        'complete': (ROLE_DOCTOR,),
        'pay': (ROLE_PATIENT,),
        'dashboard': (ROLE_ADMIN,),
    }

    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_fields = ['doctor', 'patient', 'cancelled', 'is_completed', 'payment', 'slot_date']
    ordering_fields = ['booked_at', 'slot_date']
    ordering = ['-booked_at']

    def get_queryset(self):
        queryset = super().get_queryset()
        user = self.request.user
        role = getattr(user, 'role', None)
        if role == ROLE_DOCTOR:
            return queryset.filter(doctor_id=user.id)
        if role == ROLE_PATIENT:
            return queryset.filter(patient_id=user.id)
        return queryset

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        serializer = self.get_serializer(queryset, many=True)
        return Response({'success': True, 'appointments': serializer.data})

    def retrieve(self, request, *args, **kwargs):
        return Response({'success': True, 'appointment': self.get_serializer(self.get_object()).data})

    def create(self, request, *args, **kwargs):
        """Book an appointment for the logged-in patient."""
        payload = AppointmentBookSerializer(data=request.data)
        if not payload.is_valid():
            raise ValidationError('Missing required fields')

        patient = get_patient_or_404(request.user.id)
        appointment = services.book_appointment(
            patient,
            payload.validated_data['doc_id'],
            payload.validated_data['slot_date'],
            payload.validated_data['slot_time'],
        )
        return Response({
            'success': True,
            'message': 'Appointment Booked',
            'appointment': self.get_serializer(appointment).data
        })

    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        appointment = services.get_appointment(pk)
        services.cancel_appointment(appointment, request.user)
        return Response({'success': True, 'message': 'Appointment Cancelled'})

    @action(detail=True, methods=['post'])
    def complete(self, request, pk=None):
        appointment = services.get_appointment(pk)
        services.complete_appointment(appointment, request.user.id)
        return Response({'success': True, 'message': 'Appointment Completed'})

    @action(detail=True, methods=['post'])
    def pay(self, request, pk=None):
        """Record a dummy payment for the appointment fee."""
        appointment = services.get_appointment(pk)
        services.pay_appointment(appointment, request.user.id)
        return Response({'success': True, 'message': 'Dummy payment successful! (No real payment processed)'})

    @action(detail=False, methods=['get'])
    def dashboard(self, request):
        """Admin dashboard counts with the latest appointments."""
        from apps.doctors.models import Doctor
        from apps.patients.models import PatientProfile

        appointments = Appointment.objects.order_by('-booked_at')
        dash_data = {
            'doctors': Doctor.objects.count(),
            'appointments': appointments.count(),
            'patients': PatientProfile.objects.count(),
            'latest_appointments': AppointmentSerializer(appointments[:5], many=True).data,
        }
        return Response({'success': True, 'dash_data': dash_data})
