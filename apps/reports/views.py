from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from common.drf_auth import IsAdmin

from . import services


class ReportViewSet(viewsets.ViewSet):
    """Admin dashboard figures."""

    permission_classes = [IsAdmin]

    @extend_schema(
        parameters=[
            OpenApiParameter('date_range', OpenApiTypes.STR, enum=services.DATE_RANGES),
            OpenApiParameter('start_date', OpenApiTypes.DATE, description='custom range only'),
            OpenApiParameter('end_date', OpenApiTypes.DATE, description='custom range only'),
        ],
        tags=['Reports'],
    )
    @action(detail=False, methods=['get'])
    def dashboard(self, request):
        return Response({'success': True, 'data': services.dashboard(request.query_params)})

    @extend_schema(tags=['Reports'])
    @action(detail=False, methods=['get'])
    def export(self, request):
        """PDF / spreadsheet files are built by the admin client from the dashboard data."""
        return Response({'success': False, 'message': 'Report export is generated client-side'})
