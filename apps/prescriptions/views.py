from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from common.auth_backends import ROLE_ADMIN, ROLE_DOCTOR, ROLE_PATIENT
from common.drf_auth import ANYONE, RolePermission

from . import services
from .models import Prescription
from .serializers import PrescriptionSerializer, PrescriptionWriteSerializer


@extend_schema_view(
    list=extend_schema(summary="List All Prescriptions", tags=['Prescriptions']),
    retrieve=extend_schema(summary="Get Prescription", tags=['Prescriptions']),
    create=extend_schema(summary="Write Prescription", request=PrescriptionWriteSerializer, tags=['Prescriptions']),
    update=extend_schema(summary="Update Prescription", request=PrescriptionWriteSerializer, tags=['Prescriptions']),
)
class PrescriptionViewSet(viewsets.ModelViewSet):
    queryset = Prescription.objects.prefetch_related('medications')
    serializer_class = PrescriptionSerializer
    permission_classes = [RolePermission]
    http_method_names = ['get', 'post', 'put']
    action_roles = {
        'list': (ROLE_ADMIN,),
        'retrieve': ANYONE,
        'create': (ROLE_DOCTOR,),
        'update': (ROLE_DOCTOR,),
        'doctor': (ROLE_DOCTOR,),
        'mine': (ROLE_PATIENT,),
    }

    def _respond(self, queryset):
        return Response({'success': True, 'prescriptions': self.get_serializer(queryset, many=True).data})

    def list(self, request, *args, **kwargs):
        return self._respond(self.get_queryset())

    def retrieve(self, request, *args, **kwargs):
        prescription = services.get_prescription(kwargs.get('pk'))
        return Response({'success': True, 'prescription': self.get_serializer(prescription).data})

    def create(self, request, *args, **kwargs):
        prescription = services.create_prescription(request.user.id, request.data)
        return Response({
            'success': True,
            'message': 'Prescription created successfully',
            'prescription': self.get_serializer(services.get_prescription(prescription.pk)).data
        })

    def update(self, request, *args, **kwargs):
        prescription = services.update_prescription(
            services.get_prescription(kwargs.get('pk')), request.user.id, request.data
        )
        return Response({
            'success': True,
            'message': 'Prescription updated successfully',
            'prescription': self.get_serializer(services.get_prescription(prescription.pk)).data
        })

    @action(detail=False, methods=['get'])
    def doctor(self, request):
        """Prescriptions written by the logged-in doctor."""
        return self._respond(self.get_queryset().filter(doctor_id=request.user.id))

    @action(detail=False, methods=['get'])
    def mine(self, request):
        """Prescriptions issued to the logged-in patient."""
        return self._respond(self.get_queryset().filter(patient_id=request.user.id))
