"""
Centralized Constants - SINGLE SOURCE OF TRUTH

Pagination defaults, price bucket boundaries, and groupable fields for the
sales dashboard. Import from here; do not duplicate these values.
"""

import math

# =============================================================================
# PAGINATION
# =============================================================================

DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 10
MAX_PER_PAGE = 100

# Keeps (page - 1) * perPage well inside the database integer range
MAX_PAGE = 1_000_000

# =============================================================================
# PRICE BUCKETS (bar chart)
# =============================================================================

# Lower-inclusive, upper-exclusive: [0,100), [100,200), ..., [900, +inf)
PRICE_BUCKET_BOUNDARIES = [0, 100, 200, 300, 400, 500, 600, 700, 800, 900, math.inf]

# Bucket id for prices outside the boundaries (negative prices)
DEFAULT_BUCKET_ID = 'other'

# =============================================================================
# GROUPING (pie chart)
# =============================================================================

GROUPABLE_FIELDS = ('category', 'sold')

# =============================================================================
# MONTHS
# =============================================================================

MIN_MONTH = 1
MAX_MONTH = 12
MIN_YEAR = 1
MAX_YEAR = 9999
