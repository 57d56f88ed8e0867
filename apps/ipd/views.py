import logging

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import filters, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from common.auth_backends import ROLE_ADMIN, ROLE_DOCTOR, ROLE_PATIENT
from common.drf_auth import RolePermission
from common.exceptions import Forbidden

from . import services
from .filters import AdmissionFilter
from .models import Admission
from .serializers import (
    AdmissionCreateSerializer, AdmissionListSerializer, AdmissionSerializer,
    DischargeSerializer, DoctorAdmissionSerializer, PatientAdmissionSerializer
)

logger = logging.getLogger(__name__)


@extend_schema_view(
    list=extend_schema(
        summary="List Admissions",
        description="Newest first; filter with status, department, start_date + end_date",
        tags=['Admissions']
    ),
    retrieve=extend_schema(summary="Get Admission", description="By record id or admission code", tags=['Admissions']),
    create=extend_schema(summary="Admit Patient", request=AdmissionCreateSerializer, tags=['Admissions']),
    update=extend_schema(summary="Update Admission", tags=['Admissions']),
    destroy=extend_schema(summary="Delete Admission", description="Admin only", tags=['Admissions']),
)
class AdmissionViewSet(viewsets.ModelViewSet):
    """Inpatient admissions: intake, clinical logs, discharge and room lookup."""

    queryset = Admission.objects.select_related('patient', 'doctor')
    serializer_class = AdmissionSerializer
    permission_classes = [RolePermission]
    http_method_names = ['get', 'post', 'put', 'delete']
    default_roles = (ROLE_ADMIN, ROLE_DOCTOR)
    action_roles = {
        'destroy': (ROLE_ADMIN,),
        'my_admissions': (ROLE_PATIENT,),
    }

    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_class = AdmissionFilter
    search_fields = ['admission_id', 'patient_name', 'doctor_name_at_admission', 'room_number']
    ordering_fields = ['admission_date', 'total_charges', 'created_at']
    ordering = ['-admission_date']

    def get_serializer_class(self):
        if self.action == 'list':
            return AdmissionListSerializer
        return AdmissionSerializer

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        serializer = self.get_serializer(queryset, many=True)
        return Response({'success': True, 'admissions': serializer.data})

    def retrieve(self, request, *args, **kwargs):
        admission = services.get_admission(kwargs.get('pk'))
        return Response({'success': True, 'admission': AdmissionSerializer(admission).data})

    def create(self, request, *args, **kwargs):
        admission = services.create_admission(request.data, request.user)
        return Response({
            'success': True,
            'message': 'Patient admitted successfully',
            'admission_id': admission.admission_id
        })

    def update(self, request, *args, **kwargs):
        admission = services.get_admission(kwargs.get('pk'))
        services.update_admission(admission, request.data)
        return Response({
            'success': True,
            'message': 'Admission updated successfully',
            'admission': AdmissionSerializer(admission).data
        })

    def destroy(self, request, *args, **kwargs):
        admission = services.get_admission(kwargs.get('pk'))
        admission_id = admission.admission_id
        admission.delete()
        logger.info(f"Admission {admission_id} deleted")
        return Response({'success': True, 'message': 'Admission deleted successfully'})

    def _append(self, request, pk, kind):
        admission = services.get_admission(pk)
        message = services.append_clinical_record(admission, kind, request.data)
        return Response({'success': True, 'message': message})

    @action(detail=True, methods=['post'])
    def vitals(self, request, pk=None):
        """Record a set of vital signs."""
        return self._append(request, pk, 'vitals')

    @action(detail=True, methods=['post'])
    def medication(self, request, pk=None):
        return self._append(request, pk, 'medication')

    @action(detail=True, methods=['post'])
    def procedure(self, request, pk=None):
        return self._append(request, pk, 'procedure')

    @action(detail=True, methods=['post'], url_path='lab-test')
    def lab_test(self, request, pk=None):
        return self._append(request, pk, 'lab_test')

    @action(detail=True, methods=['post'])
    def note(self, request, pk=None):
        return self._append(request, pk, 'note')

    @extend_schema(request=DischargeSerializer, tags=['Admissions'])
    @action(detail=True, methods=['post'])
    def discharge(self, request, pk=None):
        """Discharge the patient; the final bill is created separately."""
        admission = services.get_admission(pk)
        services.discharge_admission(admission, request.data)
        return Response({'success': True, 'message': 'Patient discharged successfully'})

    @action(detail=False, methods=['get'], url_path=r'patient/(?P<patient_id>[^/.]+)')
    def patient(self, request, patient_id=None):
        """All admissions of one patient."""
        admissions = self.get_queryset().filter(patient_id=patient_id).order_by('-admission_date')
        return Response({'success': True, 'admissions': AdmissionListSerializer(admissions, many=True).data})

    @action(detail=False, methods=['get'], url_path=r'doctor/(?P<doctor_id>[^/.]+)')
    def doctor(self, request, doctor_id=None):
        """Admissions the doctor admitted or attends, with the doctor's role on each."""
        if request.user.role == ROLE_DOCTOR and str(request.user.id) != str(doctor_id):
            raise Forbidden('Unauthorized action')
        admissions = services.doctor_admissions(int(doctor_id) if str(doctor_id).isdigit() else doctor_id)
        return Response({'success': True, 'admissions': DoctorAdmissionSerializer(admissions, many=True).data})

    @action(detail=False, methods=['get'], url_path='my-admissions')
    def my_admissions(self, request):
        admissions = self.get_queryset().filter(patient_id=request.user.id).order_by('-admission_date')
        return Response({'success': True, 'admissions': PatientAdmissionSerializer(admissions, many=True).data})

    @action(detail=False, methods=['get'], url_path='available-rooms')
    def available_rooms(self, request):
        """Unoccupied rooms from the fixed room inventory."""
        return Response({'success': True, **services.available_rooms()})
