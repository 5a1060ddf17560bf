from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response
from sqlalchemy.orm import Session
from affiliate_ops.api.deps import get_period
from affiliate_ops.core.database import get_db
from affiliate_ops.engine import IncentiveCalculation, PeriodSpec
from affiliate_ops.schemas.incentive import (
    IncentivePeriodOptions,
    IncentiveRule as IncentiveRuleSchema,
    IncentiveRuleCreate,
    IncentiveRuleUpdate,
    IncentiveSummary,
)
from affiliate_ops.services.exceptions import NotFoundError
from affiliate_ops.services.exports import incentive_csv, incentive_export_filename
from affiliate_ops.services.incentives import IncentiveService

router = APIRouter(prefix="/api/incentives", tags=["incentives"])


# ── Rules ────────────────────────────────────────────────────────────────────

@router.get("/rules", response_model=List[IncentiveRuleSchema])
def list_rules(db: Session = Depends(get_db)):
    return IncentiveService(db).list_rules()


@router.post("/rules", response_model=IncentiveRuleSchema, status_code=status.HTTP_201_CREATED)
def create_rule(rule_in: IncentiveRuleCreate, db: Session = Depends(get_db)):
    return IncentiveService(db).create_rule(rule_in.model_dump())


@router.get("/rules/{rule_id}", response_model=IncentiveRuleSchema)
def get_rule(rule_id: str, db: Session = Depends(get_db)):
    try:
        return IncentiveService(db).get_rule(rule_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.put("/rules/{rule_id}", response_model=IncentiveRuleSchema)
def update_rule(rule_id: str, rule_update: IncentiveRuleUpdate, db: Session = Depends(get_db)):
    try:
        return IncentiveService(db).update_rule(rule_id, rule_update.model_dump(exclude_unset=True))
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.delete("/rules/{rule_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_rule(rule_id: str, db: Session = Depends(get_db)):
    try:
        IncentiveService(db).delete_rule(rule_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


# ── Calculations ─────────────────────────────────────────────────────────────

@router.get("/calculations", response_model=List[IncentiveCalculation])
def list_calculations(
    user_id: Optional[str] = None,
    period: PeriodSpec = Depends(get_period),
    db: Session = Depends(get_db),
):
    """Incentive standing of every team member (or one) for the period."""
    try:
        return IncentiveService(db).calculate(period, user_id=user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("/summary", response_model=IncentiveSummary)
def incentive_summary(period: PeriodSpec = Depends(get_period), db: Session = Depends(get_db)):
    service = IncentiveService(db)
    return service.summarize(service.calculate(period))


@router.get("/periods", response_model=IncentivePeriodOptions)
def incentive_periods(
    year: Optional[int] = Query(None, description="List months with data for this year"),
    db: Session = Depends(get_db),
):
    return IncentiveService(db).period_options(year)


@router.get("/export")
def export_calculations(period: PeriodSpec = Depends(get_period), db: Session = Depends(get_db)):
    calculations = IncentiveService(db).calculate(period)
    filename = incentive_export_filename(period)
    return Response(
        content=incentive_csv(calculations),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
