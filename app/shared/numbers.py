"""Decimal field types rendered as JSON numbers"""

from decimal import Decimal
from typing import Annotated

from pydantic import PlainSerializer

# Currency and percentages are computed as Decimal and sent to the panel as numbers
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
Percent = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
