# backend/agenda/schemas/customers.py

import re

from .base import ApiModel


def normalize_phone(value: str) -> str:
    """Drop everything except digits, keeping a leading +."""
    value = value.strip()
    digits = re.sub(r"\D", "", value)
    if len(digits) < 5:
        raise ValueError("Phone number must contain at least 5 digits")
    return "+" + digits if value.startswith("+") else digits


class CustomerRead(ApiModel):
    id: int
    business_id: int
    name: str
    phone: str
