from __future__ import annotations

from fastapi import APIRouter, Depends, status

from src.application.dtos.auth_dto import (
    ProfileResponse,
    SessionResponse,
    SignInBody,
    SignInResponse,
    SignUpBody,
    SignUpResponse,
    UpdateNicknameBody,
)
from src.application.dtos.common_dto import ErrorResponse
from src.application.use_cases.session_sync import (
    RefreshSessionUseCase,
    SignInUseCase,
    SignOutUseCase,
)
from src.application.use_cases.sign_up import SignUpUseCase
from src.application.use_cases.update_nickname import UpdateNicknameUseCase
from src.infrastructure.api.dependencies import get_auth_adapter, get_profile_repo, get_session
from src.infrastructure.database.repositories.profile_repository import ProfileRepository
from src.infrastructure.database.supabase_client import SupabaseAuthAdapter

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
    responses={
        400: {"model": ErrorResponse, "description": "Validation Error - A required field is empty"},
        502: {"model": ErrorResponse, "description": "Store Error - Auth or database backend failed"},
    },
)


@router.post(
    "/signup",
    response_model=SignUpResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register Account",
    description="""
    Create an account with email, password and a unique nickname.

    - The nickname is checked before any credentials are created
    - When the account is usable immediately its profile is created with the nickname
    - When email confirmation is required the profile is created on first sign-in instead

    **Authentication required**: No
    """,
    responses={409: {"model": ErrorResponse, "description": "Conflict - Nickname already taken"}},
)
def sign_up(
    body: SignUpBody,
    auth: SupabaseAuthAdapter = Depends(get_auth_adapter),
    profiles: ProfileRepository = Depends(get_profile_repo),
):
    """Register a new account."""
    result = SignUpUseCase(auth, profiles).execute(body.email, body.password, body.nickname)
    return SignUpResponse(
        user_id=result.user.id if result.user else None,
        email=body.email.strip(),
        confirmation_required=result.confirmation_required,
    )


@router.post(
    "/signin",
    response_model=SignInResponse,
    summary="Sign In",
    description="""
    Password sign-in. Returns a bearer token and the session state to render.

    A blocked account gets no token: the session is revoked immediately and the
    response carries a notice and a redirect instead.

    **Authentication required**: No
    """,
    responses={401: {"model": ErrorResponse, "description": "Unauthorized - Invalid credentials"}},
)
def sign_in(
    body: SignInBody,
    auth: SupabaseAuthAdapter = Depends(get_auth_adapter),
    profiles: ProfileRepository = Depends(get_profile_repo),
):
    """Sign in with email and password."""
    session, state = SignInUseCase(auth, profiles).execute(body.email, body.password)
    return SignInResponse(
        access_token=session.access_token if session else None,
        session=SessionResponse.from_state(state),
    )


@router.post(
    "/signout",
    response_model=SessionResponse,
    summary="Sign Out",
    description="Revoke the current session. Always succeeds from the client's point of view.",
)
def sign_out(
    session=Depends(get_session),
    auth: SupabaseAuthAdapter = Depends(get_auth_adapter),
):
    """Sign out of the current session."""
    return SessionResponse.from_state(SignOutUseCase(auth).execute(session))


@router.get(
    "/session",
    response_model=SessionResponse,
    summary="Refresh Session State",
    description="""
    Current session state and the navigation to render for it.

    - Creates the profile for the signed-in identity when it is missing
    - Shows the admin link only for admins
    - Signs out blocked accounts and returns a notice and redirect

    Call after every sign-in, sign-out and sign-up.

    **Authentication required**: Optional (Bearer token)
    """,
)
def refresh_session(
    session=Depends(get_session),
    auth: SupabaseAuthAdapter = Depends(get_auth_adapter),
    profiles: ProfileRepository = Depends(get_profile_repo),
):
    """Get the session state for the navigation bar."""
    return SessionResponse.from_state(RefreshSessionUseCase(auth, profiles).execute(session))


@router.patch(
    "/profile",
    response_model=ProfileResponse,
    summary="Update Nickname",
    description="""
    Set or change the nickname of the signed-in user.

    **Authentication required**: Yes (Bearer token)
    **Access control**: Blocked accounts cannot rename themselves
    """,
    responses={
        401: {"model": ErrorResponse, "description": "Unauthorized - No active session"},
        403: {"model": ErrorResponse, "description": "Forbidden - Account is blocked"},
        409: {"model": ErrorResponse, "description": "Conflict - Nickname already taken"},
    },
)
def update_profile(
    body: UpdateNicknameBody,
    session=Depends(get_session),
    profiles: ProfileRepository = Depends(get_profile_repo),
):
    """Update the current user's nickname."""
    profile = UpdateNicknameUseCase(profiles).execute(session, body.nickname)
    return ProfileResponse.from_entity(profile)
