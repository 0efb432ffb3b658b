"""Shared validation utilities"""

import re
from typing import Optional

TIME_OF_DAY_PATTERN = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)(:[0-5]\d)?$")


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    # Basic email validation pattern
    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("E-mail inválido")

    return email


def validate_time_of_day(value: str) -> str:
    """
    Validate an HH:MM (or HH:MM:SS) time of day.

    Returns:
        The time normalized to zero-padded HH:MM

    Raises:
        ValueError: If the value is not a valid time of day
    """
    if value is None:
        raise ValueError("Horário é obrigatório")

    match = TIME_OF_DAY_PATTERN.match(str(value).strip())
    if not match:
        raise ValueError(f"Horário inválido: {value}")

    return f"{int(match.group(1)):02d}:{match.group(2)}"


def only_digits(value: Optional[str]) -> Optional[str]:
    """Strip formatting from CPF, CEP and phone numbers"""
    if not value:
        return value
    return re.sub(r"\D", "", value)

