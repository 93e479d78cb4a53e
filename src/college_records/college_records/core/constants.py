"""Constants and defaults."""

from decimal import Decimal

DEFAULT_SESSION_DAYS = 7
MIN_PASSWORD_LENGTH = 6

# Money and marks are stored as DECIMAL(12,2) and DECIMAL(6,2)
CENT = Decimal("0.01")
MAX_MONEY = Decimal("9999999999.99")
MAX_MARKS = Decimal("9999.99")
