from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from typing import List

from campus_connect.services.auth_service import AuthService
from campus_connect.models.user import CurrentUser

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")

credentials_exception = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Could not validate credentials",
    headers={"WWW-Authenticate": "Bearer"},
)

def get_current_user(token: str = Depends(oauth2_scheme)) -> CurrentUser:
    """
    Dependency to get the current user from a JWT access token.
    The email and role travel inside the token, so no database
    round-trip is needed here.
    """
    token_data = AuthService().decode_token(token)

    if not token_data or token_data.type != "access":
        raise credentials_exception
    if not token_data.email or not token_data.role:
        raise credentials_exception

    try:
        return CurrentUser(
            user_id=token_data.user_id,
            email=token_data.email,
            role=token_data.role,
        )
    except ValueError:
        raise credentials_exception

# Role-Based Access Control (RBAC) Dependency
class RBAC:
    def __init__(self, roles: List[str]):
        self.roles = roles

    def __call__(self, current_user: CurrentUser = Depends(get_current_user)):
        """
        Checks if the current user's role is in the allowed roles list.
        """
        if current_user.role not in self.roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. User role '{current_user.role}' is not authorized.",
            )
        return current_user

# Specific role dependencies for convenience
StudentUser = Depends(RBAC(roles=["student"]))
TeacherUser = Depends(RBAC(roles=["teacher"]))
