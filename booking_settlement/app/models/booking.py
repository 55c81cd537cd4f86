"""
Booking database model.

The booking record is owned by the storefront; the settlement core reads
its pricing fields and moves its status to REFUNDED.
"""

from sqlalchemy import Column, Integer, BigInteger, String, ForeignKey, DateTime, Enum
from sqlalchemy.sql import func
from booking_settlement.app.core.config import settings
from booking_settlement.app.db.session import Base
from booking_settlement.app.models.settlement_enums import BookingStatus


class Booking(Base):
    """
    Booking model.
    
    `price` and `taxes` are per passenger, in minor units of `currency_code`.
    Every passenger (adult, child, infant) is charged the same fare.
    """
    __tablename__ = "bookings"
    
    id = Column(String(64), primary_key=True)
    user_id = Column(String(64), nullable=False, index=True)
    
    # Flight details
    flight_number = Column(String(32), nullable=False)
    creator_id = Column(String(64), nullable=True, index=True)  # Flight creator (affiliate)
    departure_at = Column(DateTime(timezone=True), nullable=True)
    commission_model_id = Column(String(32), ForeignKey('commission_models.id'), nullable=True)
    refund_policy_id = Column(String(32), ForeignKey('refund_policies.id'), nullable=True)
    
    # Pricing
    price = Column(BigInteger, nullable=False)
    taxes = Column(BigInteger, nullable=False, default=0)
    currency_code = Column(String(8), nullable=False, default=settings.default_currency)
    
    # Passengers
    adults = Column(Integer, nullable=False, default=1)
    children = Column(Integer, nullable=False, default=0)
    infants = Column(Integer, nullable=False, default=0)
    
    status = Column(Enum(BookingStatus), default=BookingStatus.CONFIRMED, nullable=False, index=True)
    
    booked_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    
    @property
    def passenger_count(self) -> int:
        return self.adults + self.children + self.infants
    
    @property
    def base_price_total(self) -> int:
        return self.price * self.passenger_count
    
    @property
    def taxes_total(self) -> int:
        return self.taxes * self.passenger_count
    
    @property
    def total_price(self) -> int:
        return self.base_price_total + self.taxes_total
    
    def __repr__(self):
        return f"<Booking(id='{self.id}', status='{self.status.value}', total={self.total_price})>"
