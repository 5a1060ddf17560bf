from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from affiliate_ops.models.account import AccountStatus, PaymentDataStatus


class AccountBase(BaseModel):
    username: str
    email: Optional[str] = None
    phone: Optional[str] = None
    account_code: Optional[str] = None
    status: AccountStatus = AccountStatus.ACTIVE
    payment_data: PaymentDataStatus = PaymentDataStatus.BELUM_DIATUR
    category_id: Optional[str] = None


class AccountCreate(AccountBase):
    pass


class AccountUpdate(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    account_code: Optional[str] = None
    status: Optional[AccountStatus] = None
    payment_data: Optional[PaymentDataStatus] = None
    category_id: Optional[str] = None


class Account(AccountBase):
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
