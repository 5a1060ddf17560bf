from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import or_
from sqlalchemy.orm import Session
from affiliate_ops.core.database import get_db
from affiliate_ops.models.account import Account, AccountStatus, PaymentDataStatus
from affiliate_ops.models.category import Category
from affiliate_ops.schemas.account import Account as AccountSchema, AccountCreate, AccountUpdate

router = APIRouter(prefix="/api/accounts", tags=["accounts"])


def _get_account_or_404(db: Session, account_id: str) -> Account:
    account = db.query(Account).filter(Account.id == account_id).first()
    if not account:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Account not found")
    return account


def _check_category(db: Session, category_id: Optional[str]):
    if category_id and not db.query(Category).filter(Category.id == category_id).first():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Category does not exist")


@router.get("/", response_model=List[AccountSchema])
def list_accounts(
    search: Optional[str] = None,
    category_id: Optional[str] = None,
    account_status: Optional[AccountStatus] = Query(None, alias="status"),
    payment_data: Optional[PaymentDataStatus] = None,
    db: Session = Depends(get_db),
):
    """Accounts, newest first, with optional filters."""
    query = db.query(Account)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(
            Account.username.ilike(pattern),
            Account.email.ilike(pattern),
            Account.account_code.ilike(pattern),
        ))
    if category_id:
        query = query.filter(Account.category_id == category_id)
    if account_status:
        query = query.filter(Account.status == account_status.value)
    if payment_data:
        query = query.filter(Account.payment_data == payment_data.value)
    return query.order_by(Account.created_at.desc(), Account.username).all()


@router.get("/{account_id}", response_model=AccountSchema)
def get_account(account_id: str, db: Session = Depends(get_db)):
    return _get_account_or_404(db, account_id)


@router.post("/", response_model=AccountSchema, status_code=status.HTTP_201_CREATED)
def create_account(account_in: AccountCreate, db: Session = Depends(get_db)):
    if db.query(Account).filter(Account.username == account_in.username).first():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already exists")
    _check_category(db, account_in.category_id)

    data = account_in.model_dump()
    data["status"] = account_in.status.value
    data["payment_data"] = account_in.payment_data.value
    account = Account(**data)
    db.add(account)
    db.commit()
    db.refresh(account)
    return account


@router.put("/{account_id}", response_model=AccountSchema)
def update_account(account_id: str, account_update: AccountUpdate, db: Session = Depends(get_db)):
    account = _get_account_or_404(db, account_id)
    updates = account_update.model_dump(exclude_unset=True)

    if "username" in updates:
        clash = db.query(Account).filter(Account.username == updates["username"], Account.id != account_id).first()
        if clash:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already exists")
    if "category_id" in updates:
        _check_category(db, updates["category_id"])

    for field, value in updates.items():
        if isinstance(value, (AccountStatus, PaymentDataStatus)):
            value = value.value
        setattr(account, field, value)
    db.commit()
    db.refresh(account)
    return account


@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_account(account_id: str, db: Session = Depends(get_db)):
    """Delete an account together with its sales rows and team assignments."""
    account = _get_account_or_404(db, account_id)
    db.delete(account)
    db.commit()
