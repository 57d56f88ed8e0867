import logging

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import filters, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from common.auth_backends import ROLE_ADMIN
from common.drf_auth import RolePermission

from . import services
from .filters import StaffFilter
from .models import Staff
from .serializers import (
    MarkAttendanceSerializer, StaffAttendanceSerializer, StaffCreateSerializer, StaffSerializer
)

logger = logging.getLogger(__name__)


@extend_schema_view(
    list=extend_schema(summary="List Staff", description="Filter with role, department, status", tags=['Staff']),
    retrieve=extend_schema(summary="Get Staff Member", tags=['Staff']),
    create=extend_schema(summary="Add Staff Member", request=StaffCreateSerializer, tags=['Staff']),
    update=extend_schema(summary="Update Staff Member", tags=['Staff']),
    destroy=extend_schema(summary="Delete Staff Member", tags=['Staff']),
)
class StaffViewSet(viewsets.ModelViewSet):
    queryset = Staff.objects.all()
    serializer_class = StaffSerializer
    permission_classes = [RolePermission]
    http_method_names = ['get', 'post', 'put', 'delete']
    default_roles = (ROLE_ADMIN,)

    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_class = StaffFilter
    search_fields = ['name', 'email', 'employee_id', 'department']
    ordering_fields = ['name', 'date_of_joining', 'experience']
    ordering = ['name']

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        return Response({'success': True, 'staff': self.get_serializer(queryset, many=True).data})

    def retrieve(self, request, *args, **kwargs):
        staff = services.get_staff(kwargs.get('pk'))
        return Response({'success': True, 'staff': self.get_serializer(staff).data})

    def create(self, request, *args, **kwargs):
        staff = services.add_staff(request.data)
        return Response({
            'success': True,
            'message': 'Staff member added successfully',
            'employee_id': staff.employee_id
        })

    def update(self, request, *args, **kwargs):
        staff = services.update_staff(services.get_staff(kwargs.get('pk')), request.data)
        return Response({'success': True, 'message': 'Staff updated successfully', 'staff': self.get_serializer(staff).data})

    def destroy(self, request, *args, **kwargs):
        staff = services.get_staff(kwargs.get('pk'))
        employee_id = staff.employee_id
        staff.delete()
        logger.info(f"Staff {employee_id} deleted")
        return Response({'success': True, 'message': 'Staff member deleted successfully'})

    @extend_schema(
        request=MarkAttendanceSerializer,
        parameters=[
            OpenApiParameter('month', OpenApiTypes.INT, description='1-12, used with year on GET'),
            OpenApiParameter('year', OpenApiTypes.INT),
        ],
        tags=['Staff'],
    )
    @action(detail=True, methods=['get', 'post'])
    def attendance(self, request, pk=None):
        """POST marks today's attendance; GET returns the history, optionally for one month."""
        staff = services.get_staff(pk)
        if request.method == 'POST':
            record = services.mark_attendance(
                staff,
                check_in=request.data.get('check_in'),
                check_out=request.data.get('check_out'),
                status=request.data.get('status'),
            )
            return Response({
                'success': True,
                'message': 'Attendance marked successfully',
                'attendance': StaffAttendanceSerializer(record).data
            })

        records = services.attendance_history(
            staff, request.query_params.get('month'), request.query_params.get('year')
        )
        return Response({
            'success': True,
            'staff': {'name': staff.name, 'employee_id': staff.employee_id},
            'attendance': StaffAttendanceSerializer(records, many=True).data
        })
