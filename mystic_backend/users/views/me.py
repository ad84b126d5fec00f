# users/views/me.py

from drf_spectacular.utils import extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from permissions.roles import capabilities_for
from users.serializers import UserSerializer


class MeView(APIView):
    """
    Current user plus the capabilities the frontend uses to show or hide
    the chat console, wallet and back office.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: dict})
    def get(self, request):
        return Response(
            {
                "user": UserSerializer(request.user).data,
                "capabilities": sorted(capabilities_for(request.user)),
            }
        )
