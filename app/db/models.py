from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class CommissionPaymentStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Row(BaseModel):
    # Tables carry many more columns than the toolkit reads
    model_config = ConfigDict(extra="allow")


class Booking(Row):
    id: str
    provider_id: Optional[str] = None
    customer_id: Optional[str] = None
    service_id: Optional[str] = None
    status: BookingStatus = BookingStatus.PENDING
    proposed_price: Optional[float] = None
    final_price: Optional[float] = None
    commission_amount: Optional[float] = None
    cancellation_reason: Optional[str] = None
    cancelled_by: Optional[str] = None
    created_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None


class ProviderProfile(Row):
    user_id: str
    business_name: Optional[str] = None
    verified: bool = False
    admin_approved: bool = False
    verified_pro: bool = False
    banned: bool = False
    rating: Optional[float] = None
    total_jobs: int = 0
    total_earnings: float = 0
    total_commission: float = 0
    completed_jobs_since_commission: int = 0
    commission_reminder_active: bool = False
    last_commission_paid_at: Optional[datetime] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class CommissionPayment(Row):
    id: Optional[str] = None
    provider_id: str
    amount: float
    payment_method: str
    screenshot_url: Optional[str] = None
    booking_count: Optional[int] = None
    status: CommissionPaymentStatus = CommissionPaymentStatus.PENDING
    submitted_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None


class PaymentMethod(Row):
    id: str
    name: str
    account_details: Optional[str] = None
    is_active: bool = True


class ProBadgeRequest(Row):
    id: Optional[str] = None
    provider_id: str
    request_message: Optional[str] = None
    status: str = "pending"
    requested_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    admin_notes: Optional[str] = None
    rejection_reason: Optional[str] = None


class ContentSection(Row):
    section_key: str
    title: Optional[str] = None
    content: Optional[str] = None
    content_type: str = "text"


class RealtimeStat(Row):
    stat_type: str
    stat_name: str
    stat_value: float = 0
    stat_trend: Optional[float] = None
    time_period: str = "current"


class Notification(Row):
    id: str
    user_id: str
    title: str
    message: Optional[str] = None
    type: Optional[str] = None
    read: bool = False
    created_at: Optional[datetime] = None
