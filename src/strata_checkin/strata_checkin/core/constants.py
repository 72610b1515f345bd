"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SYNC_INTERVAL_SECONDS = 60
DEFAULT_HTTP_TIMEOUT_SECONDS = 15
DEFAULT_QUORUM_RATIO = "0.25"
DEFAULT_QUEUE_PATH = ".cache/submission_queue.json"

# How long the strata plan list stays cached on the device (6 hours).
PLAN_CACHE_SECONDS = 6 * 60 * 60

# Placeholder the API uses for "no representative".
NO_REP = "N/A"
