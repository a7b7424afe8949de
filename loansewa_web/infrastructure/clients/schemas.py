"""Pydantic schemas for decoding backend API responses"""

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

ResidenceType = Literal["Owned", "Rented", "Mortgage"]
LoanPurpose = Literal["Education", "Home", "Auto", "Personal"]
LoanType = Literal["Unsecured", "Secured"]
ApplicationStatus = Literal["Pending", "Approved", "Rejected", "Under Review"]


class BackendModel(BaseModel):
    """Base for server-issued records: unknown fields are ignored"""

    model_config = ConfigDict(extra="ignore")


class Identity(BackendModel):
    """Signed-in user or admin profile"""

    id: str
    full_name: str = ""
    email: str = ""
    mobile_number: str = ""
    aadhar: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value):
        return str(value) if isinstance(value, int) else value


class LoanApplication(BackendModel):
    """Loan application with its server-computed assessment"""

    id: str
    user_id: Optional[str] = None

    age: Optional[int] = None
    income: Optional[float] = None
    loan_amount: float = 0
    loan_tenure_months: Optional[int] = None
    avg_dpd_per_delinquency: Optional[float] = None
    delinquency_ratio: Optional[float] = None
    credit_utilization_ratio: Optional[float] = None
    num_open_accounts: Optional[int] = None
    loan_to_income_ratio: Optional[float] = None

    residence_type: Optional[ResidenceType] = None
    loan_purpose: Optional[LoanPurpose] = None
    loan_type: Optional[LoanType] = None

    credit_score: int = Field(..., ge=300, le=900)
    rating: Optional[str] = None
    default_probability: float = Field(0.0, ge=0.0, le=1.0)

    status: ApplicationStatus = "Pending"
    created_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    disbursed_amount: Optional[float] = None
    repaid_amount: Optional[float] = None

    # Present on admin listings
    user_name: Optional[str] = None
    user_email: Optional[str] = None

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def _coerce_ids(cls, value):
        return str(value) if isinstance(value, int) else value


class LoanApplicationForm(BaseModel):
    """Borrower input submitted to POST /loan/apply"""

    age: int = Field(28, ge=18, le=100)
    income: float = Field(1_200_000, ge=0)
    loan_amount: float = Field(2_560_000, ge=0)
    loan_tenure_months: int = Field(36, ge=0)
    avg_dpd_per_delinquency: float = Field(20, ge=0)
    delinquency_ratio: float = Field(30, ge=0, le=100)
    credit_utilization_ratio: float = Field(30, ge=0, le=100)
    num_open_accounts: int = Field(2, ge=0)
    residence_type: ResidenceType = "Owned"
    loan_purpose: LoanPurpose = "Education"
    loan_type: LoanType = "Unsecured"


class Suggestion(BackendModel):
    """Single credit improvement recommendation"""

    icon: str = ""
    priority: str = "Low"
    title: str
    description: str = ""


class ImprovementReport(BackendModel):
    """Response of GET /credit/improvement/{user_id}"""

    success: bool
    credit_score: int = 0
    suggestions: List[Suggestion] = Field(default_factory=list)
    message: Optional[str] = None


class CounterModel(BackendModel):
    """Aggregates where the server sends null for an empty set; null reads as the field default"""

    @field_validator("*", mode="before")
    @classmethod
    def _null_as_default(cls, value, info: ValidationInfo):
        if value is None:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        return value


class DashboardStats(CounterModel):
    """Admin KPI counters; absent or null counters read as zero"""

    total_users: int = 0
    approved_count: int = 0
    rejected_count: int = 0
    pending_count: int = 0
    total_disbursed: float = 0
    total_repaid: float = 0
    total_applications: int = 0


class RiskDistribution(CounterModel):
    low_risk: int = 0
    medium_risk: int = 0
    high_risk: int = 0


class DisbursedVsRepaid(CounterModel):
    total_disbursed: float = 0
    total_repaid: float = 0
    outstanding: float = 0


class ActiveVsClosed(CounterModel):
    active: int = 0
    closed: int = 0


class Insights(CounterModel):
    """Response of GET /admin/analytics/insights"""

    risk_distribution: RiskDistribution = Field(default_factory=RiskDistribution)
    disbursed_vs_repaid: DisbursedVsRepaid = Field(default_factory=DisbursedVsRepaid)
    credit_score_distribution: Dict[str, int] = Field(default_factory=dict)
    active_vs_closed: ActiveVsClosed = Field(default_factory=ActiveVsClosed)
    loan_purpose_distribution: Dict[str, int] = Field(default_factory=dict)
    loan_type_distribution: Dict[str, int] = Field(default_factory=dict)
