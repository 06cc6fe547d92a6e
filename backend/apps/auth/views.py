from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from apps.api.schemas import ErrorResponseSerializer
from apps.api.utils import is_service_error, service_error_response
from apps.common import get_logger
from .container import build_registration_service
from .serializers import (
    LoginResponseSerializer,
    LoginTokenSerializer,
    RegisterRequestSerializer,
    RegisterResponseSerializer,
    UserSummarySerializer,
)

logger = get_logger(__name__).bind(component="auth", layer="view")


@extend_schema(tags=["Auth"])
class RegisterView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    service = build_registration_service()
    log = logger.bind(view="RegisterView")

    @extend_schema(
        summary="Register user",
        description="Creates an account, sends a welcome e-mail and returns a JWT pair.",
        request=RegisterRequestSerializer,
        responses={
            201: RegisterResponseSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        serializer = RegisterRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.log.info(
            "Processing registration request",
            username=serializer.validated_data.get("username"),
        )
        result = self.service.register(serializer.validated_data)
        if is_service_error(result):
            code, message, details = result
            self.log.warning("Registration failed", code=code, detail=message)
            return service_error_response(result)
        self.log.info("Registration completed", user_id=result["user"].id)
        return Response(
            {
                "message": "User registered successfully",
                "user": UserSummarySerializer(result["user"]).data,
                "access": result["access"],
                "refresh": result["refresh"],
            },
            status=status.HTTP_201_CREATED,
        )


@extend_schema(
    tags=["Auth"],
    summary="Login (JWT obtain pair)",
    responses={200: LoginResponseSerializer, 401: OpenApiResponse(response=ErrorResponseSerializer)},
)
class LoginView(TokenObtainPairView):
    permission_classes = [AllowAny]
    authentication_classes = []
    serializer_class = LoginTokenSerializer


@extend_schema(tags=["Auth"], summary="Refresh JWT")
class RefreshView(TokenRefreshView):
    permission_classes = [AllowAny]
    authentication_classes = []
