from datetime import datetime
from typing import Optional, Dict, Any
from pydantic import BaseModel


class SignInRequest(BaseModel):
    email: str
    password: str


class SignInResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    expires_at: datetime
    uid: str
    email: str
    role: Optional[str] = None


class CurrentUser(BaseModel):
    uid: str
    email: str
    display_name: Optional[str] = None
    email_verified: bool = False
    claims: Dict[str, Any] = {}
