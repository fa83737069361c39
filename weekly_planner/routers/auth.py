"""Authentication router for the weekly planner."""
from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from weekly_planner.db.config import get_session
from weekly_planner.errors import PlannerError
from weekly_planner.middleware.auth import CurrentUser, create_access_token, get_current_user
from weekly_planner.schemas.auth import SignInRequest, SignUpRequest, TokenResponse, UserResponse
from weekly_planner.services.user_service import UserService

router = APIRouter(tags=["Authentication"])


def get_user_service(session: Session = Depends(get_session)) -> UserService:
    return UserService(session)


def _token_response(user) -> TokenResponse:
    return TokenResponse(
        token=create_access_token(user.id, user.email),
        user_id=user.id,
        email=user.email,
        username=user.username,
    )


@router.post("/sign-up", response_model=TokenResponse)
async def sign_up(request: SignUpRequest, service: UserService = Depends(get_user_service)):
    try:
        user = service.create(request.email, request.username, request.password)
    except PlannerError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return _token_response(user)


@router.post("/sign-in", response_model=TokenResponse)
async def sign_in(request: SignInRequest, service: UserService = Depends(get_user_service)):
    try:
        user = service.authenticate(request.email, request.password)
    except PlannerError as e:
        raise HTTPException(
            status_code=e.status_code,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _token_response(user)


@router.get("/me", response_model=UserResponse)
async def me(current_user: CurrentUser = Depends(get_current_user)):
    return UserResponse(user_id=current_user.user_id, email=current_user.email)
