from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()
metadata = Base.metadata

APPOINTMENT_STATUSES = ("PENDING", "CONFIRMED", "CANCELED", "COMPLETED", "NO_SHOW")


class Businesses(Base):
    __tablename__ = 'businesses'

    id = Column(Integer, primary_key=True)
    name = Column(Text, nullable=False)
    timezone = Column(Text, nullable=False, server_default=text("'UTC'"))
    created_at = Column(DateTime, server_default=text('CURRENT_TIMESTAMP'))

    working_days = relationship('WorkingDays', back_populates='business', order_by='WorkingDays.day_of_week')
    services = relationship('Services', back_populates='business')
    customers = relationship('Customers', back_populates='business')
    appointments = relationship('Appointments', back_populates='business')
    absences = relationship('Absences', back_populates='business')


class WorkingDays(Base):
    __tablename__ = 'working_days'
    __table_args__ = (
        UniqueConstraint('business_id', 'day_of_week'),
    )

    id = Column(Integer, primary_key=True)
    business_id = Column(ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False)
    day_of_week = Column(Integer, nullable=False)  # 0 = Monday, 6 = Sunday
    is_open = Column(Boolean, nullable=False, server_default=text('1'))
    start_time = Column(Text, nullable=False)  # "HH:MM"
    end_time = Column(Text, nullable=False)  # "HH:MM"

    business = relationship('Businesses', back_populates='working_days')


class Services(Base):
    __tablename__ = 'services'

    id = Column(Integer, primary_key=True)
    business_id = Column(ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False)
    name = Column(Text, nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    price = Column(Float, nullable=False)
    active = Column(Boolean, nullable=False, server_default=text('1'))

    business = relationship('Businesses', back_populates='services')
    appointments = relationship('Appointments', back_populates='service')


class Customers(Base):
    __tablename__ = 'customers'
    __table_args__ = (
        UniqueConstraint('business_id', 'phone'),
    )

    id = Column(Integer, primary_key=True)
    business_id = Column(ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False)
    name = Column(Text, nullable=False)
    phone = Column(Text, nullable=False)

    business = relationship('Businesses', back_populates='customers')
    appointments = relationship('Appointments', back_populates='customer')


class Appointments(Base):
    __tablename__ = 'appointments'
    __table_args__ = (
        Index('ix_appointments_business_window', 'business_id', 'start_at', 'end_at'),
    )

    id = Column(Integer, primary_key=True)
    business_id = Column(ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False)
    customer_id = Column(ForeignKey('customers.id'), nullable=False)
    service_id = Column(ForeignKey('services.id'), nullable=False)
    start_at = Column(DateTime, nullable=False)
    end_at = Column(DateTime, nullable=False)
    status = Column(
        Enum(*APPOINTMENT_STATUSES, name='appointment_status'),
        nullable=False,
        server_default=text("'CONFIRMED'"),
    )
    created_at = Column(DateTime, server_default=text('CURRENT_TIMESTAMP'))

    business = relationship('Businesses', back_populates='appointments')
    customer = relationship('Customers', back_populates='appointments')
    service = relationship('Services', back_populates='appointments')


class Absences(Base):
    __tablename__ = 'absences'

    id = Column(Integer, primary_key=True)
    business_id = Column(ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime)
    reason = Column(Text)
    created_at = Column(DateTime, server_default=text('CURRENT_TIMESTAMP'))

    business = relationship('Businesses', back_populates='absences')
