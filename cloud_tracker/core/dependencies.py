"""
Core dependencies for route protection and ownership checks
"""

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from cloud_tracker.config import settings
from cloud_tracker.database.supabase_client import get_supabase
from cloud_tracker.modules.auth.service import AuthService
from supabase import Client
from typing import Dict, Any, List, Optional
import hmac
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_token(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    return credentials.credentials


def get_current_user_id(
    credentials: HTTPAuthorizationCredentials = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Extract current user info from JWT token"""
    token = credentials.credentials
    user_data = auth_service.get_current_user(token)
    return user_data


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(optional_security),
    auth_service: AuthService = Depends(get_auth_service)
) -> Optional[dict]:
    """Like get_current_user_id, but returns None instead of raising. Actions report 'Unauthorized' themselves."""
    if credentials is None:
        return None
    try:
        return auth_service.get_current_user(credentials.credentials)
    except HTTPException:
        return None


def verify_api_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(optional_security)
) -> bool:
    """Check the static API token used by the external (Claude Code) integration."""
    expected = settings.claude_code_api_token
    if not expected:
        logger.error("CLAUDE_CODE_API_TOKEN not configured")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    if credentials is None or not hmac.compare_digest(credentials.credentials, expected):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return True


def get_owned_application(
    application_id: str,
    user_data: dict,
    supabase: Client,
    columns: str = "*"
) -> Dict[str, Any]:
    """Return the application row if it exists and belongs to the user, else 404."""
    result = supabase.table("applications")\
        .select(columns)\
        .eq("id", application_id)\
        .eq("user_id", user_data["id"])\
        .limit(1)\
        .execute()
    if not result.data:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Application not found or access denied"
        )
    return result.data[0]


def check_application_access(
    application_id: str,
    user_data: dict = Depends(get_current_user_id),
    supabase: Client = Depends(get_supabase)
) -> dict:
    """Route dependency: the application in the path must belong to the caller"""
    get_owned_application(application_id, user_data, supabase, columns="id")
    return user_data


def get_user_application_ids(user_id: str, supabase: Client) -> List[str]:
    """Ids of every application owned by the user. Child tables are scoped through these."""
    result = supabase.table("applications")\
        .select("id")\
        .eq("user_id", user_id)\
        .execute()
    return [row["id"] for row in result.data or []]
