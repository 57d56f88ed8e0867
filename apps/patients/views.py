import logging

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import filters, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from common.auth_backends import ROLE_ADMIN, ROLE_PATIENT
from common.drf_auth import RolePermission
from common.exceptions import ValidationError
from common.utils import parse_json_field, require_fields

from .models import PatientProfile
from .services import get_patient_or_404
from .serializers import PatientProfileSerializer, PatientProfileUpdateSerializer

logger = logging.getLogger(__name__)


@extend_schema_view(
    list=extend_schema(summary="List Patients", description="All registered patients (admin)", tags=['Patients']),
    retrieve=extend_schema(summary="Get Patient", tags=['Patients']),
)
class PatientViewSet(viewsets.ReadOnlyModelViewSet):
    """Patient accounts: admin listing plus the patient's own profile."""

    queryset = PatientProfile.objects.all()
    serializer_class = PatientProfileSerializer
    permission_classes = [RolePermission]
    default_roles = (ROLE_ADMIN,)
    action_roles = {
        'profile': (ROLE_PATIENT,),
        'update_profile': (ROLE_PATIENT,),
    }

    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['gender']
    search_fields = ['name', 'email', 'phone']
    ordering_fields = ['name', 'created_at']
    ordering = ['-created_at']

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        serializer = self.get_serializer(queryset, many=True)
        return Response({'success': True, 'count': len(serializer.data), 'users': serializer.data})

    def retrieve(self, request, *args, **kwargs):
        patient = get_patient_or_404(kwargs.get('pk'))
        return Response({'success': True, 'user': self.get_serializer(patient).data})

    @action(detail=False, methods=['get'])
    def profile(self, request):
        """Logged-in patient's profile."""
        patient = get_patient_or_404(request.user.id)
        return Response({'success': True, 'user_data': self.get_serializer(patient).data})

    @extend_schema(request=PatientProfileUpdateSerializer)
    @action(detail=False, methods=['post', 'put'], url_path='update-profile')
    def update_profile(self, request):
        """Update name, phone, address, date of birth and gender."""
        patient = get_patient_or_404(request.user.id)
        require_fields(request.data, ['name', 'phone', 'dob', 'gender'], message='Data Missing')

        data = {
            key: request.data[key]
            for key in ('name', 'phone', 'dob', 'gender', 'image')
            if key in request.data
        }
        if 'address' in request.data:
            data['address'] = parse_json_field(request.data.get('address'), 'address', default={})

        serializer = PatientProfileUpdateSerializer(patient, data=data, partial=True)
        if not serializer.is_valid():
            raise ValidationError(next(iter(serializer.errors.values()))[0])
        serializer.save()

        logger.info(f"Patient {patient.pk} updated profile")
        return Response({'success': True, 'message': 'Profile Updated'})
