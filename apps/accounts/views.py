import logging
from datetime import timedelta

from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.serializers import CustomUserSerializer, SignupSerializer
from common.media.image_store import replace_image

logger = logging.getLogger(__name__)
CustomUser = get_user_model()

ACTIVE_WINDOW = timedelta(hours=1)


# SIGNUP View ----------------------------------------------------
class SignupView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = SignupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()

        refresh = RefreshToken.for_user(user)
        logger.info(f"[ACCOUNTS] signup user={user.id}")
        return Response(
            {
                "user": CustomUserSerializer(user).data,
                "access": str(refresh.access_token),
                "refresh": str(refresh),
            },
            status=status.HTTP_201_CREATED,
        )


# PROFILE View ---------------------------------------------------
class ProfileView(APIView):
    """
    GET  /accounts/me/   current user
    PUT  /accounts/me/   update fullName, job, universityName, profilePic
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(CustomUserSerializer(request.user).data)

    def put(self, request):
        user = request.user
        serializer = CustomUserSerializer(user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        new_pic = serializer.validated_data.pop('profile_pic', None)
        if new_pic is not None:
            user.profile_pic = replace_image(user.profile_pic, new_pic, folder="profiles") or ''

        serializer.save()
        return Response(CustomUserSerializer(user).data, status=status.HTTP_200_OK)


# ACTIVE USERS View ----------------------------------------------
class ActiveUsersCountView(APIView):
    """GET /accounts/active-count/   users seen within the last hour"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        since = timezone.now() - ACTIVE_WINDOW
        count = CustomUser.objects.filter(is_active=True, last_active__gte=since).count()
        return Response({"activeUsersCount": count}, status=status.HTTP_200_OK)
