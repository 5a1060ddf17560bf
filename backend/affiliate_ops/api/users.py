"""Team management: directory users and the accounts each one manages."""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from affiliate_ops.api.deps import get_period
from affiliate_ops.core.database import get_db
from affiliate_ops.engine import PeriodSpec
from affiliate_ops.models.account import Account
from affiliate_ops.models.user import User, UserRole
from affiliate_ops.schemas.report import TeamMemberStats
from affiliate_ops.schemas.user import User as UserSchema, UserCreate, UserUpdate
from affiliate_ops.services.reports import ReportService

router = APIRouter(prefix="/api/users", tags=["users"])


def _get_user_or_404(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


def _resolve_accounts(db: Session, account_ids: List[str]) -> List[Account]:
    wanted = list(dict.fromkeys(account_ids))
    if not wanted:
        return []
    accounts = db.query(Account).filter(Account.id.in_(wanted)).all()
    found = {a.id for a in accounts}
    missing = [a for a in wanted if a not in found]
    if missing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown account ids: {', '.join(missing)}",
        )
    return accounts


@router.get("/", response_model=List[UserSchema])
def list_users(role: Optional[UserRole] = None, db: Session = Depends(get_db)):
    query = db.query(User)
    if role:
        query = query.filter(User.role == role.value)
    return [UserSchema.from_orm_user(u) for u in query.order_by(User.name).all()]


@router.get("/stats", response_model=List[TeamMemberStats])
def team_stats(period: PeriodSpec = Depends(get_period), db: Session = Depends(get_db)):
    """Managed accounts and their totals per team member."""
    return ReportService(db).team_stats(period)


@router.get("/{user_id}", response_model=UserSchema)
def get_user(user_id: str, db: Session = Depends(get_db)):
    return UserSchema.from_orm_user(_get_user_or_404(db, user_id))


@router.post("/", response_model=UserSchema, status_code=status.HTTP_201_CREATED)
def create_user(user_in: UserCreate, db: Session = Depends(get_db)):
    if db.query(User).filter(User.email == user_in.email).first():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")

    user = User(name=user_in.name, email=user_in.email, role=user_in.role.value)
    user.managed_accounts = _resolve_accounts(db, user_in.managed_accounts)
    db.add(user)
    db.commit()
    db.refresh(user)
    return UserSchema.from_orm_user(user)


@router.put("/{user_id}", response_model=UserSchema)
def update_user(user_id: str, user_update: UserUpdate, db: Session = Depends(get_db)):
    user = _get_user_or_404(db, user_id)
    updates = user_update.model_dump(exclude_unset=True)

    if "email" in updates:
        clash = db.query(User).filter(User.email == updates["email"], User.id != user_id).first()
        if clash:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")

    managed = updates.pop("managed_accounts", None)
    for field, value in updates.items():
        if isinstance(value, UserRole):
            value = value.value
        setattr(user, field, value)
    if managed is not None:
        user.managed_accounts = _resolve_accounts(db, managed)

    db.commit()
    db.refresh(user)
    return UserSchema.from_orm_user(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: str, db: Session = Depends(get_db)):
    user = _get_user_or_404(db, user_id)
    db.delete(user)
    db.commit()
