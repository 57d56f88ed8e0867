from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from common.auth_backends import ROLE_ADMIN, ROLE_DOCTOR, ROLE_PATIENT
from common.drf_auth import RolePermission

from . import services
from .models import TelemedicineSession
from .serializers import (
    AdminSessionCreateSerializer, ChatMessageSerializer, DirectSessionCreateSerializer,
    EndSessionSerializer, RateSessionSerializer, TelemedicineSessionSerializer
)


@extend_schema_view(
    list=extend_schema(summary="List All Sessions", description="Admin only", tags=['Telemedicine']),
    retrieve=extend_schema(summary="Get Session", tags=['Telemedicine']),
    create=extend_schema(
        summary="Create Session From Appointment",
        description="Admin only; marks the appointment as telemedicine",
        request=AdminSessionCreateSerializer,
        tags=['Telemedicine']
    ),
)
class TelemedicineSessionViewSet(viewsets.ModelViewSet):
    """Telemedicine sessions: requests, review, the live session and ratings."""

    queryset = TelemedicineSession.objects.select_related('patient', 'doctor', 'appointment')
    serializer_class = TelemedicineSessionSerializer
    permission_classes = [RolePermission]
    http_method_names = ['get', 'post']
    default_roles = (ROLE_ADMIN,)
    action_roles = {
        'retrieve': (ROLE_ADMIN, ROLE_DOCTOR, ROLE_PATIENT),
        'create_session': (ROLE_PATIENT,),
        'pending': (ROLE_ADMIN, ROLE_DOCTOR),
        'approve': (ROLE_ADMIN, ROLE_DOCTOR),
        'reject': (ROLE_ADMIN, ROLE_DOCTOR),
        'join': (ROLE_DOCTOR, ROLE_PATIENT),
        'end': (ROLE_DOCTOR,),
        'add_message': (ROLE_DOCTOR, ROLE_PATIENT),
        'patient_sessions': (ROLE_PATIENT,),
        'doctor_sessions': (ROLE_DOCTOR,),
        'rate': (ROLE_PATIENT,),
    }

    def _sessions(self, queryset):
        return Response({'success': True, 'sessions': self.get_serializer(queryset, many=True).data})

    def list(self, request, *args, **kwargs):
        return self._sessions(self.get_queryset())

    def retrieve(self, request, *args, **kwargs):
        session = services.get_session(kwargs.get('pk'))
        if request.user.role != ROLE_ADMIN:
            services.check_participant(session, request.user)
        return Response({'success': True, 'session': self.get_serializer(session).data})

    def create(self, request, *args, **kwargs):
        session = services.create_session_from_appointment(request.data)
        return Response({
            'success': True,
            'message': 'Telemedicine session created',
            'session': self.get_serializer(session).data
        })

    @extend_schema(request=DirectSessionCreateSerializer, tags=['Telemedicine'])
    @action(detail=False, methods=['post'], url_path='create-session')
    def create_session(self, request):
        """Request a session with a doctor; it waits in ``pending`` until reviewed."""
        session = services.create_direct_session(request.user.id, request.data)
        return Response({
            'success': True,
            'message': 'Telemedicine session created',
            'session': self.get_serializer(session).data
        })

    @action(detail=False, methods=['get'], url_path='pending-sessions')
    def pending(self, request):
        return self._sessions(services.pending_sessions(request.user))

    @action(detail=True, methods=['post'])
    def approve(self, request, pk=None):
        session = services.approve_session(services.get_session(pk), request.user)
        return Response({'success': True, 'message': 'Session approved successfully', 'session': self.get_serializer(session).data})

    @action(detail=True, methods=['post'])
    def reject(self, request, pk=None):
        session = services.reject_session(services.get_session(pk), request.user)
        return Response({'success': True, 'message': 'Session rejected', 'session': self.get_serializer(session).data})

    @action(detail=True, methods=['post'])
    def join(self, request, pk=None):
        session = services.join_session(services.get_session(pk), request.user)
        return Response({
            'success': True,
            'message': 'Joined session successfully',
            'room_id': session.room_id,
            'session_id': str(session.session_id)
        })

    @extend_schema(request=EndSessionSerializer, tags=['Telemedicine'])
    @action(detail=True, methods=['post'])
    def end(self, request, pk=None):
        services.end_session(services.get_session(pk), request.user.id, request.data)
        return Response({'success': True, 'message': 'Session ended successfully'})

    @extend_schema(request=ChatMessageSerializer, tags=['Telemedicine'])
    @action(detail=True, methods=['post'], url_path='add-message')
    def add_message(self, request, pk=None):
        services.add_chat_message(services.get_session(pk), request.user, request.data)
        return Response({'success': True, 'message': 'Message added successfully'})

    @action(detail=False, methods=['get'], url_path='patient-sessions')
    def patient_sessions(self, request):
        return self._sessions(self.get_queryset().filter(patient_id=request.user.id))

    @action(detail=False, methods=['get'], url_path='doctor-sessions')
    def doctor_sessions(self, request):
        return self._sessions(self.get_queryset().filter(doctor_id=request.user.id))

    @extend_schema(request=RateSessionSerializer, tags=['Telemedicine'])
    @action(detail=True, methods=['post'])
    def rate(self, request, pk=None):
        services.rate_session(
            services.get_session(pk),
            request.user.id,
            request.data.get('rating'),
            feedback=request.data.get('feedback'),
        )
        return Response({'success': True, 'message': 'Session rated successfully'})

    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        services.cancel_session(services.get_session(pk))
        return Response({'success': True, 'message': 'Session cancelled successfully'})
