import logging
from datetime import timedelta

from django.contrib.auth import authenticate, get_user_model
from django.contrib.auth.models import update_last_login
from django.utils import timezone
from rest_framework import exceptions, generics, status
from rest_framework.response import Response
from rest_framework.views import APIView

from core.exceptions import error_body
from core.throttling import LoginRateThrottle
from .gate import ADMIN, AUTHENTICATED, PUBLIC, GatedViewMixin
from .serializers import (
    LoginSerializer,
    PasswordUpdateSerializer,
    RegisterSerializer,
    RoleSerializer,
    UserSerializer,
)
from .tokens import issue_token

logger = logging.getLogger(__name__)

User = get_user_model()


class LoginView(GatedViewMixin, APIView):
    access = PUBLIC
    throttle_classes = [LoginRateThrottle]

    def post(self, request):
        creds = LoginSerializer(data=request.data)
        creds.is_valid(raise_exception=True)
        email = creds.validated_data['email'].strip().lower()
        user = authenticate(request, email=email, password=creds.validated_data['password'])
        if user is None:
            logger.info('failed login for %s', email)
            raise exceptions.AuthenticationFailed('Invalid credentials', code='invalid_credentials')

        update_last_login(None, user)
        logger.info('user %s logged in', user.pk)
        return Response({
            'success': True,
            'user': UserSerializer(user).data,
            'token': issue_token(user),
        })


class RegisterView(GatedViewMixin, APIView):
    access = PUBLIC
    throttle_classes = [LoginRateThrottle]

    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info('registered user %s', user.pk)
        return Response({
            'success': True,
            'user': UserSerializer(user).data,
            'token': issue_token(user),
        }, status=status.HTTP_201_CREATED)


class MeView(GatedViewMixin, APIView):
    access = AUTHENTICATED

    def get(self, request):
        return Response({'success': True, 'data': UserSerializer(request.user).data})


class PasswordUpdateView(GatedViewMixin, APIView):
    access = AUTHENTICATED

    def put(self, request):
        serializer = PasswordUpdateSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        user = request.user
        user.set_password(serializer.validated_data['new_password'])
        user.save(update_fields=['password'])
        return Response({
            'success': True,
            'message': 'Password updated successfully',
            'token': issue_token(user),
        })


class UserListView(GatedViewMixin, generics.ListAPIView):
    access = ADMIN
    queryset = User.objects.order_by('-date_joined', '-id')
    serializer_class = UserSerializer

    def list(self, request, *args, **kwargs):
        data = self.get_serializer(self.get_queryset(), many=True).data
        return Response({'success': True, 'count': len(data), 'data': data})


class UserDetailMixin(GatedViewMixin):
    access = ADMIN

    def get_user(self, pk):
        try:
            return User.objects.get(pk=pk)
        except User.DoesNotExist:
            raise exceptions.NotFound('User not found')

    def refuse_self(self, request, user, message):
        if user.pk == request.user.pk:
            return Response(error_body(message, reason='self_action'), status=status.HTTP_400_BAD_REQUEST)
        return None


class UserDetailView(UserDetailMixin, APIView):
    def get(self, request, pk):
        return Response({'success': True, 'data': UserSerializer(self.get_user(pk)).data})

    def delete(self, request, pk):
        user = self.get_user(pk)
        refused = self.refuse_self(request, user, 'You cannot delete your own account')
        if refused is not None:
            return refused
        user.delete()
        logger.info('admin %s deleted user %s', request.user.pk, pk)
        return Response({'success': True, 'message': 'User deleted successfully', 'data': {}})


class UserRoleView(UserDetailMixin, APIView):
    def put(self, request, pk):
        user = self.get_user(pk)
        serializer = RoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        role = serializer.validated_data['role']
        if role != user.role:
            refused = self.refuse_self(request, user, 'You cannot change your own role')
            if refused is not None:
                return refused
            user.role = role
            user.save(update_fields=['role'])
            logger.info('admin %s set role of user %s to %s', request.user.pk, pk, role)
        return Response({
            'success': True,
            'message': 'User role updated successfully',
            'data': UserSerializer(user).data,
        })


class UserStatsView(GatedViewMixin, APIView):
    access = ADMIN

    def get(self, request):
        users = User.objects.all()
        return Response({'success': True, 'data': {
            'total': users.count(),
            'active': users.filter(is_active=True).count(),
            'admins': users.filter(role='admin').count(),
            'moderators': users.filter(role='moderator').count(),
            'recent_users': users.filter(date_joined__gte=timezone.now() - timedelta(days=30)).count(),
        }})
