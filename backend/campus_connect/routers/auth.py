from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from supabase import AsyncClient, AuthApiError

from campus_connect.database import get_db
from campus_connect.services.auth_service import AuthService
from campus_connect.models.token import Token, RefreshRequest, AccessTokenResponse
from campus_connect.dependencies import oauth2_scheme, credentials_exception

router = APIRouter(
    prefix="/api/auth",
    tags=["Authentication"]
)

@router.post("/login", response_model=Token)
async def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncClient = Depends(get_db)
):
    """
    Login endpoint. Uses Supabase Auth to verify credentials, finds the
    user's role from the profile tables, then issues our own JWTs.
    """
    auth_service = AuthService(db)
    try:
        # Step 1: Validate credentials with Supabase Auth
        user = await auth_service.sign_in(form_data.username, form_data.password)
        if not user:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid email or password.",
            )

        # Step 2: An auth account without a profile row has no portal to open
        user_role = await auth_service.resolve_role(user.email)
        if not user_role:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="No student, teacher or office staff profile found for this account.",
            )

        # Step 3: Create tokens
        access_token, refresh_token = auth_service.create_tokens(
            user_id=str(user.id),
            email=user.email,
            role=user_role
        )
        return {
            "access_token": access_token,
            "refresh_token": refresh_token,
            "token_type": "bearer",
            "user_role": user_role,
            "expires_in": int(auth_service.access_token_expires.total_seconds()),
        }

    except AuthApiError:
        # "Invalid login credentials" from Supabase Auth
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password.",
        )


@router.post("/refresh", response_model=AccessTokenResponse)
async def refresh_access_token(
    refresh_request: RefreshRequest,
    db: AsyncClient = Depends(get_db)
):
    """
    Refreshes an access token using a valid refresh token. The role is
    looked up again so a moved profile takes effect on refresh.
    """
    auth_service = AuthService(db)
    token_data = auth_service.decode_token(refresh_request.refresh_token)

    if not token_data or not token_data.email or token_data.type != "refresh":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token",
        )

    # A failed profile lookup raises DataServiceError (503)
    user_role = await auth_service.resolve_role(token_data.email)
    if not user_role:
        raise credentials_exception

    new_access_token = auth_service.create_access_token(
        token_data.user_id, token_data.email, user_role
    )
    return AccessTokenResponse(
        access_token=new_access_token,
        expires_in=int(auth_service.access_token_expires.total_seconds()),
    )


@router.post("/logout")
async def logout_user(token: str = Depends(oauth2_scheme)):
    """
    Client-side logout. In a stateless JWT system, the server can't
    do much. The client is responsible for deleting the token.
    """
    return {"message": "Logout successful. Client must delete tokens."}
