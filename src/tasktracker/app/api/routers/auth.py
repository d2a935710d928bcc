"""Routes handling registration, login and the current profile."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...deps import AuthServiceDependency, CurrentUserIdDependency
from ...schemas import AuthResponse, LoginRequest, RegisterRequest, UserPublic
from ...services import AuthResult

router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_response(result: AuthResult) -> AuthResponse:
    return AuthResponse(token=result.token.token, user=UserPublic.model_validate(result.user))


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user account",
)
async def register(payload: RegisterRequest, service: AuthServiceDependency) -> AuthResponse:
    result = await service.register(
        name=payload.name,
        email=payload.email,
        password=payload.password,
    )
    return _auth_response(result)


@router.post(
    "/login",
    response_model=AuthResponse,
    status_code=status.HTTP_200_OK,
    summary="Authenticate using email and password",
)
async def login(payload: LoginRequest, service: AuthServiceDependency) -> AuthResponse:
    result = await service.authenticate(email=payload.email, password=payload.password)
    return _auth_response(result)


@router.get("/me", response_model=UserPublic, summary="Return the authenticated user")
async def read_current_user(
    user_id: CurrentUserIdDependency,
    service: AuthServiceDependency,
) -> UserPublic:
    user = await service.get_profile(user_id)
    return UserPublic.model_validate(user)
