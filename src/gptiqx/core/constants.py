"""Constants and configuration values for GPTIQX."""

# Insight Thresholds
class InsightConstants:
    """Thresholds used by the insight selectors."""

    # Ranked insight list
    MAX_INSIGHTS = 3  # cards shown at once
    TREND_SURGE_POINTS = 10  # week-over-week gain that counts as a surge
    TREND_DROP_POINTS = -10  # week-over-week loss that counts as a decline
    CLARITY_DEPTH_GAP = 20  # |clarity - depth| above this points at the weaker one
    LOW_SYNERGY = 60  # synergy below this raises an alert
    HIGH_CONTEXT_FLOW = 85  # gpt flow above this is praised
    BASELINE_CONVERSATIONS = 5  # conversations needed for trend analysis
    EXPERT_AVERAGE = 85  # composite mean for expert-level recognition

    # Primary insight confidence (gap between weakest and second weakest)
    HIGH_CONFIDENCE_GAP = 15
    MODERATE_CONFIDENCE_GAP = 5
    STRONG_FACTOR = 80  # weakest factor at or above this means "doing great"

    # Status summary bands (composite mean)
    STATUS_EXCELLENT = 85
    STATUS_GOOD = 70
    STATUS_AVERAGE = 55
    STATUS_LIMITING_FACTOR = 65

    # Improvement focus priority bands
    FOCUS_CRITICAL = 50
    FOCUS_MODERATE = 70

    # Learning timeline
    TAKEAWAY_CHANGE_POINTS = 5  # per-factor delta that counts as a change
    BALANCED_STRONGEST = 80
    BALANCED_WEAKEST = 70
    STANDOUT_STRENGTH = 85
    FOCUS_NEEDED = 50

# Missing sub-score defaults.
# Primary insight and improvement focus treat a missing value as strong,
# status summary and timeline takeaways treat it as zero.
class DefaultScoreConstants:
    """Per-component fallback for absent sub-scores."""

    PRIMARY_INSIGHT_MISSING = 100
    FOCUS_AREA_MISSING = 100
    STATUS_SUMMARY_MISSING = 0
    TAKEAWAY_MISSING = 0

# Trend Constants
class TrendConstants:
    """Constants for week-over-week trend windows."""

    WINDOW_DAYS = 7  # length of one comparison window
    TIMELINE_LIMIT = 3  # conversations shown in the learning timeline
    PROFILE_WINDOW = 3  # first/last conversations compared on the profile
    MILESTONE_SCORE = 80  # first ConversationIQ at or above this is a milestone
    DATE_RANGES = {"7d": 7, "30d": 30, "all": None}

# Prompt Constants
class PromptConstants:
    """Constants for the scoring prompt."""

    # Prompt Versions (for cache invalidation)
    SCORING_PROMPT_VERSION = "v1.0"

# Mock Data Constants
class MockDataConstants:
    """Constants for offline mock scoring."""

    MOCK_SCORE_MIN = 70  # lowest mock score
    MOCK_SCORE_SPAN = 30  # mock scores fall in [MIN, MIN + SPAN)

# Error Handling Constants
class ErrorConstants:
    """Constants for error handling and retries."""

    RATE_LIMIT_STATUS = 429
    PAYMENT_REQUIRED_STATUS = 402
    BAD_REQUEST_STATUS = 400
    SERVER_ERROR_STATUS = 500

    RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again later."
    PAYMENT_REQUIRED_MESSAGE = "Payment required. Please add credits to your workspace."
    EMPTY_TRANSCRIPT_MESSAGE = "Please enter a conversation transcript"
    NO_RESPONSE_MESSAGE = "No response from AI"
    INVALID_JSON_MESSAGE = "Invalid JSON response from AI"

# File and Path Constants
class FileConstants:
    """Constants for file operations."""

    CACHE_KEY_LENGTH = 8  # length of cache key for logging
    METRIC_DEFINITIONS_FILE = "metric_definitions.yaml"  # under the package config/ directory
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    EXPORT_VERSION = "1.0.0"
