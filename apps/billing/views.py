import logging

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import filters, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from common.auth_backends import ROLE_ADMIN, ROLE_PATIENT
from common.drf_auth import RolePermission

from . import services
from .filters import BillFilter
from .models import Bill
from .serializers import (
    BillCreateSerializer, BillSerializer, ProcessPaymentSerializer
)

logger = logging.getLogger(__name__)


@extend_schema_view(
    list=extend_schema(
        summary="List Bills",
        description="Filter with status, bill_type, start_date + end_date",
        tags=['Billing']
    ),
    retrieve=extend_schema(summary="Get Bill", tags=['Billing']),
    create=extend_schema(summary="Create Bill", request=BillCreateSerializer, tags=['Billing']),
    update=extend_schema(summary="Update Bill", tags=['Billing']),
    destroy=extend_schema(summary="Delete Bill", tags=['Billing']),
)
class BillViewSet(viewsets.ModelViewSet):
    """Bills, payments and the financial report. Admin only apart from the patient views."""

    queryset = Bill.objects.select_related('patient', 'doctor').prefetch_related('services', 'payments')
    serializer_class = BillSerializer
    permission_classes = [RolePermission]
    http_method_names = ['get', 'post', 'put', 'delete']
    default_roles = (ROLE_ADMIN,)
    action_roles = {
        'my_bills': (ROLE_PATIENT,),
        'pay': (ROLE_PATIENT,),
    }

    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_class = BillFilter
    search_fields = ['bill_number', 'patient_name', 'doctor_name']
    ordering_fields = ['billing_date', 'total_amount', 'due_date']
    ordering = ['-billing_date']

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        return Response({'success': True, 'bills': BillSerializer(queryset, many=True).data})

    def retrieve(self, request, *args, **kwargs):
        bill = services.get_bill(kwargs.get('pk'))
        return Response({'success': True, 'bill': BillSerializer(bill).data})

    def create(self, request, *args, **kwargs):
        bill = services.create_bill(request.data)
        return Response({
            'success': True,
            'message': 'Bill created successfully',
            'bill_id': bill.pk,
            'bill_number': bill.bill_number
        })

    def update(self, request, *args, **kwargs):
        bill = services.update_bill(services.get_bill(kwargs.get('pk')), request.data)
        return Response({'success': True, 'message': 'Bill updated successfully', 'bill': BillSerializer(bill).data})

    def destroy(self, request, *args, **kwargs):
        bill = services.get_bill(kwargs.get('pk'))
        bill_number = bill.bill_number
        bill.delete()
        logger.info(f"Bill {bill_number} deleted")
        return Response({'success': True, 'message': 'Bill deleted successfully'})

    @extend_schema(request=ProcessPaymentSerializer, tags=['Billing'])
    @action(detail=True, methods=['post', 'put'])
    def payment(self, request, pk=None):
        """Record a ledger payment, or set the payment status directly."""
        bill = services.get_bill(pk)
        message, payment_id = services.process_payment(bill, request.data)
        body = {'success': True, 'message': message}
        if payment_id:
            body['payment_id'] = payment_id
        return Response(body)

    @action(detail=False, methods=['get'], url_path=r'patient/(?P<patient_id>[^/.]+)')
    def patient(self, request, patient_id=None):
        bills = self.get_queryset().filter(patient_id=patient_id).order_by('-billing_date')
        return Response({'success': True, 'bills': BillSerializer(bills, many=True).data})

    @action(detail=False, methods=['get'], url_path='my-bills')
    def my_bills(self, request):
        bills = self.get_queryset().filter(patient_id=request.user.id).order_by('-billing_date')
        return Response({'success': True, 'bills': BillSerializer(bills, many=True).data})

    @action(detail=True, methods=['post'])
    def pay(self, request, pk=None):
        """Pay a whole bill from the patient portal."""
        bill = services.get_bill(pk)
        bill = services.pay_bill(bill, request.user.id, request.data.get('payment_method'))
        return Response({'success': True, 'message': 'Bill paid successfully', 'bill': BillSerializer(bill).data})

    @action(detail=False, methods=['get'])
    def report(self, request):
        """Financial report: revenue breakdown and pending payments."""
        return Response({'success': True, 'report': services.financial_report(request.query_params)})
