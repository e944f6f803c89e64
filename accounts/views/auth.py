"""
Authentication views
"""
import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.tokens import RefreshToken

from accounts.serializers import LoginSerializer, UserSerializer

logger = logging.getLogger(__name__)


@api_view(['POST'])
@permission_classes([AllowAny])
def login_view(request):
    """
    POST /api/auth/login
    Login with email and password
    Returns: {accessToken, user: {id, email, fullName, role, mustChangePassword}}

    Status codes:
    - 200: Success
    - 400: Invalid request format (missing fields, invalid email format)
    - 401: Invalid credentials or disabled account
    """
    serializer = LoginSerializer(data=request.data)
    try:
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    except AuthenticationFailed as e:
        logger.info('Failed login for %s', request.data.get('email'))
        return Response(
            {'detail': str(e.detail), 'code': 'invalid_credentials'},
            status=status.HTTP_401_UNAUTHORIZED
        )

    user = serializer.validated_data['user']
    refresh = RefreshToken.for_user(user)
    response_data = {
        'accessToken': str(refresh.access_token),
        'refreshToken': str(refresh),
        'user': UserSerializer(user).data,
    }
    return Response(response_data, status=status.HTTP_200_OK)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout_view(request):
    """
    POST /api/auth/logout
    Tokens are stateless; the client drops its token.
    """
    return Response({'detail': 'Successfully logged out.'}, status=status.HTTP_200_OK)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def me_view(request):
    """
    GET /api/auth/me
    Returns: {id, email, fullName, role, groupId, mustChangePassword}
    """
    serializer = UserSerializer(request.user)
    return Response(serializer.data, status=status.HTTP_200_OK)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def change_password_view(request):
    """
    POST /api/auth/change-password
    Body: { currentPassword, newPassword }
    Change user password. Clears must_change_password on success.
    """
    current = request.data.get('currentPassword') or request.data.get('current_password')
    new_pw = request.data.get('newPassword') or request.data.get('new_password')

    if not current or not new_pw:
        return Response(
            {'detail': 'currentPassword and newPassword are required', 'code': 'validation_error'},
            status=status.HTTP_400_BAD_REQUEST,
        )
    if len(new_pw) < 8:
        return Response(
            {'detail': 'New password must be at least 8 characters', 'code': 'validation_error'},
            status=status.HTTP_400_BAD_REQUEST,
        )

    user = request.user
    if not user.check_password(current):
        return Response(
            {'detail': 'Current password is incorrect', 'code': 'validation_error'},
            status=status.HTTP_400_BAD_REQUEST,
        )

    user.set_password(new_pw)
    user.must_change_password = False
    user.save(update_fields=['password', 'must_change_password'])
    return Response({'detail': 'Password changed successfully'}, status=status.HTTP_200_OK)
