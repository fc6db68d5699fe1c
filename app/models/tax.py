from typing import Optional

from pydantic import BaseModel, Field


class Deductions(BaseModel):
    section80C: float = Field(default=0, ge=0)
    section80D: float = Field(default=0, ge=0)
    hra: float = Field(default=0, ge=0)
    homeLoanInterest: float = Field(default=0, ge=0)
    other: float = Field(default=0, ge=0)


class TaxCalculationRequest(BaseModel):
    grossIncome: float = Field(ge=0)
    deductions: Deductions = Field(default_factory=Deductions)


class TaxProfileUpdate(TaxCalculationRequest):
    financialYear: Optional[str] = None


class TaxProfile(BaseModel):
    grossIncome: float = 0
    deductions: Deductions = Field(default_factory=Deductions)
    financialYear: str
