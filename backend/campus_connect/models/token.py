from pydantic import BaseModel
from typing import Literal, Optional

TokenType = Literal['access', 'refresh']

class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user_role: str
    expires_in: int  # seconds until the access token expires

class TokenData(BaseModel):
    """Claims read back from one of our JWTs. Refresh tokens carry no role."""
    user_id: str
    email: Optional[str] = None
    role: Optional[str] = None
    type: Optional[TokenType] = None

class RefreshRequest(BaseModel):
    refresh_token: str

class AccessTokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
