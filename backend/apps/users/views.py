"""
User views demonstrating best practices:
- ViewSets with per-action permissions
- Custom actions for account and role operations
- Business rules kept in the service layer
"""

from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny, IsAdminUser
from rest_framework_simplejwt.views import TokenObtainPairView

from apps.core.pagination import StandardResultsSetPagination
from . import services
from .serializers import (
    ChangePasswordSerializer,
    RoleAssignmentSerializer,
    RoleCreateSerializer,
    RoleSerializer,
    UserRegistrationSerializer,
    UserSerializer,
    UserUpdateSerializer,
)


class LoginView(TokenObtainPairView):
    """SimpleJWT token pair view that also records the login time."""

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        services.record_login(serializer.user)
        return Response(serializer.validated_data, status=status.HTTP_200_OK)


class UserViewSet(viewsets.GenericViewSet):
    """
    Accounts.

    Registration is public; profile actions need authentication; listing
    and moderation are admin only.
    """
    permission_classes = [IsAuthenticated]
    pagination_class = StandardResultsSetPagination
    serializer_class = UserSerializer
    lookup_value_regex = r'\d+'

    admin_actions = {'list', 'retrieve', 'assign_role', 'remove_role', 'lock', 'unlock', 'stats'}

    def get_queryset(self):
        params = self.request.query_params
        is_active = params.get('is_active')
        return services.search_users(
            search=params.get('search'),
            role=params.get('role'),
            is_active=None if is_active is None else is_active.lower() in ('1', 'true'),
        )

    def get_permissions(self):
        if self.action == 'create':
            return [AllowAny()]
        if self.action in self.admin_actions:
            return [IsAdminUser()]
        return super().get_permissions()

    def create(self, request):
        """
        Register a customer account.

        Endpoint: POST /api/v1/users/
        """
        serializer = UserRegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = services.register_user(dict(serializer.validated_data))
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)

    def list(self, request):
        """Endpoint: GET /api/v1/users/?search=&role=&is_active="""
        page = self.paginate_queryset(self.get_queryset())
        return self.get_paginated_response(UserSerializer(page, many=True).data)

    def retrieve(self, request, pk=None):
        return Response(UserSerializer(services.get_user(pk)).data)

    @action(detail=False, methods=['get'])
    def me(self, request):
        """
        Get current user profile.

        Custom action: /api/v1/users/me/
        """
        return Response(UserSerializer(request.user).data)

    @action(detail=False, methods=['put', 'patch'])
    def update_profile(self, request):
        """
        Update current user profile.

        Custom action: /api/v1/users/update_profile/
        """
        serializer = UserUpdateSerializer(
            request.user,
            data=request.data,
            partial=request.method == 'PATCH'
        )
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(UserSerializer(request.user).data)

    @action(detail=False, methods=['post'])
    def change_password(self, request):
        """
        Change user password.

        Custom action: /api/v1/users/change_password/
        """
        serializer = ChangePasswordSerializer(
            data=request.data,
            context={'request': request}
        )
        serializer.is_valid(raise_exception=True)
        serializer.save()

        return Response({
            'message': 'Password updated successfully.'
        }, status=status.HTTP_200_OK)

    @action(detail=False, methods=['get'])
    def stats(self, request):
        return Response(services.user_stats())

    @action(detail=True, methods=['post'], url_path='roles')
    def assign_role(self, request, pk=None):
        """Custom action: POST /api/v1/users/{id}/roles/"""
        serializer = RoleAssignmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = services.assign_role(pk, serializer.validated_data['role'])
        return Response(UserSerializer(user).data)

    @action(detail=True, methods=['delete'], url_path=r'roles/(?P<role>[^/]+)')
    def remove_role(self, request, pk=None, role=None):
        """Custom action: DELETE /api/v1/users/{id}/roles/{role}/"""
        user = services.remove_role(pk, role)
        return Response(UserSerializer(user).data)

    @action(detail=True, methods=['post'])
    def lock(self, request, pk=None):
        user = services.lock_user(pk, acting_user=request.user)
        return Response({'message': f'User {user.email} locked.', 'is_active': user.is_active})

    @action(detail=True, methods=['post'])
    def unlock(self, request, pk=None):
        user = services.unlock_user(pk)
        return Response({'message': f'User {user.email} unlocked.', 'is_active': user.is_active})


class RoleViewSet(viewsets.ViewSet):
    """Admin role management."""
    permission_classes = [IsAdminUser]

    def list(self, request):
        return Response(RoleSerializer(services.roles_with_counts(), many=True).data)

    def create(self, request):
        serializer = RoleCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        role = services.create_role(serializer.validated_data['name'])
        role.user_count = 0
        return Response(RoleSerializer(role).data, status=status.HTTP_201_CREATED)

    def destroy(self, request, pk=None):
        services.delete_role(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)
