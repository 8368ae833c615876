from fastapi import APIRouter, Depends
from cloud_tracker.database.supabase_client import get_supabase
from cloud_tracker.modules.auth.schemas import LoginRequest, TokenResponse, PasswordResetRequest
from cloud_tracker.modules.auth.service import AuthService
from cloud_tracker.core.dependencies import get_current_user_id, get_current_token
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login and get access token"""
    return service.login(login_data)


@router.post("/reset-password", status_code=202)
async def reset_password(
    request: PasswordResetRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Send a password reset email if the account exists"""
    service.send_password_reset(request.email)
    return {"message": "If an account exists for that email, a reset link has been sent"}


@router.post("/logout", status_code=200)
async def logout(
    token: str = Depends(get_current_token),
    service: AuthService = Depends(get_auth_service)
):
    """Logout and invalidate token"""
    service.logout(token)
    return {"message": "Logged out successfully"}


@router.get("/me")
async def get_current_user(current_user: Dict = Depends(get_current_user_id)):
    """Get current authenticated user"""
    return current_user
