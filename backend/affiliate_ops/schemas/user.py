from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime
from affiliate_ops.models.user import UserRole


class UserBase(BaseModel):
    name: str
    email: str
    role: UserRole = UserRole.USER


class UserCreate(UserBase):
    managed_accounts: List[str] = []


class UserUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[UserRole] = None
    managed_accounts: Optional[List[str]] = None


class User(UserBase):
    id: str
    managed_accounts: List[str] = []
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @classmethod
    def from_orm_user(cls, user) -> "User":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            role=user.role,
            managed_accounts=user.managed_account_ids,
            created_at=user.created_at,
        )
