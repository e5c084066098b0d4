"""
Application-level constants for hardcoded business logic.

These values represent core application behavior and should NEVER be changed
via environment variables or configuration. They define protocol details,
safety limits, and internal timing.

For configurable values (connection pools, page sizes, worker intervals,
etc.), see catalog/settings.py where values can be overridden via
environment variables.
"""

# ============================================================================
# HTTP API
# ============================================================================

# Common prefix of all REST resources
API_PREFIX = "/api"

# Total number of elements of a paginated collection
TOTAL_COUNT_HEADER = "X-Total-Count"

# RFC 5988 pagination links (next/prev/last/first)
LINK_HEADER = "Link"


# ============================================================================
# Pagination Safety Limits
# ============================================================================

# Maximum allowed page size to prevent excessive database loads
# Hard safety limit regardless of what client requests
# For default page size, see catalog/settings.py (DEFAULT_PAGE_SIZE)
MAX_PAGE_SIZE = 1000


# ============================================================================
# Background Task Behavior
# ============================================================================

# Backoff delay (seconds) when a task iteration encounters an error
TASK_ERROR_BACKOFF_SECONDS = 1

# Index writes per task before giving up on an entity that keeps changing;
# the task stays pending and is retried later
SEARCH_INDEX_MAX_APPLY_PASSES = 3


# ============================================================================
# Logging
# ============================================================================

# Maximum size of a single JSON log line accepted by Loki
LOKI_MAX_LOG_SIZE_BYTES = 256 * 1024


# ============================================================================
# Entities
# ============================================================================

# Width of the author.name column
AUTHOR_NAME_MAX_LENGTH = 255
