"""
Application-wide constants and configuration values.

This module centralizes the magic numbers, literals and defaults used
throughout the application to provide a single source of truth.
"""

from typing import List


# =================== QUOTATION NUMBERING ===================

QUOTATION_NUMBER_PREFIX = "QUO"
QUOTATION_NUMBER_DATE_FORMAT = "%Y%m%d"
QUOTATION_NUMBER_SUFFIX_DIGITS = 3
QUOTATION_NUMBER_PATTERN = r"^[A-Z]+-\d{8}-\d{3}$"

# Random suffix collisions tolerated before the request fails
MAX_NUMBER_ATTEMPTS = 10


# =================== MONETARY CONSTANTS ===================

DEFAULT_TAX_RATE = 18.0  # GST percent
DEFAULT_CURRENCY = "INR"
AMOUNT_TOLERANCE = 0.01  # one paisa
MAX_TAX_RATE = 100.0


# =================== QUOTATION LIFECYCLE ===================

STATUS_DRAFT = "DRAFT"
STATUS_SENT = "SENT"
STATUS_ACCEPTED = "ACCEPTED"
STATUS_REJECTED = "REJECTED"
STATUS_EXPIRED = "EXPIRED"

QUOTATION_STATUSES: List[str] = [
    STATUS_DRAFT,
    STATUS_SENT,
    STATUS_ACCEPTED,
    STATUS_REJECTED,
    STATUS_EXPIRED,
]


# =================== CATALOG ===================

DEFAULT_PRODUCT_UNIT = "piece"


# =================== CUSTOMERS ===================

RECENT_CUSTOMER_QUOTATIONS = 5


# =================== PAGINATION ===================

DEFAULT_PAGE_SIZE = 20
DEFAULT_CUSTOMER_PAGE_SIZE = 50
MAX_PAGE_SIZE = 200


# =================== LIST ORDERING ===================

QUOTATION_SORT_FIELDS = (
    "createdAt",
    "quotationNumber",
    "customerName",
    "totalAmount",
    "status",
    "validUntil",
)
SORT_ORDERS = ("asc", "desc")
DEFAULT_SORT_FIELD = "createdAt"
