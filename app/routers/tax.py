import logging
from typing import Dict, Optional

from fastapi import APIRouter, Depends, HTTPException

from app.core.config import settings
from app.core.security import get_current_user_id
from app.db import dynamo
from app.models.tax import TaxCalculationRequest, TaxProfile, TaxProfileUpdate
from app.utils.tax_calculator import compute_tax

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/calculate")
def calculate_tax(request: TaxCalculationRequest, user_id: str = Depends(get_current_user_id)) -> Dict:
    """
    Compare old and new regime tax for the given income and deductions.
    """
    result = compute_tax(request.grossIncome, request.deductions.model_dump())
    logger.info(f"Tax calculated for user {user_id}: recommendation={result.recommended_regime}")
    return result.to_dict()


@router.get("/data", response_model=TaxProfile)
def get_tax_data(
    financialYear: Optional[str] = None,
    user_id: str = Depends(get_current_user_id),
):
    """
    Stored tax profile for the financial year, or an all-zero profile.
    """
    financial_year = financialYear or settings.DEFAULT_FINANCIAL_YEAR
    item = dynamo.get_tax_data(user_id, financial_year)
    if not item:
        return TaxProfile(financialYear=financial_year)

    return TaxProfile(
        grossIncome=item.get("gross_income", 0),
        deductions=item.get("deductions", {}),
        financialYear=financial_year,
    )


@router.put("/data")
def update_tax_data(update: TaxProfileUpdate, user_id: str = Depends(get_current_user_id)) -> Dict:
    financial_year = update.financialYear or settings.DEFAULT_FINANCIAL_YEAR
    deductions = update.deductions.model_dump()

    success = dynamo.put_tax_data({
        "user_id": user_id,
        "financial_year": financial_year,
        "gross_income": update.grossIncome,
        "deductions": deductions,
    })
    if not success:
        raise HTTPException(status_code=500, detail="Failed to save tax data")

    profile = TaxProfile(grossIncome=update.grossIncome, deductions=deductions, financialYear=financial_year)
    return {
        **profile.model_dump(),
        "calculation": compute_tax(update.grossIncome, deductions).to_dict(),
    }
