"""Scoring constants: sentinels, accepted response types, and slug format."""

# Interpretation label used when a total falls outside every configured band
UNKNOWN_INTERPRETATION = "Unknown"

# Wire names for question response types
# likert = 4-point, likert_5 = 5-point
RESPONSE_TYPES = ("likert", "likert_5", "binary", "multiple_choice")

# Assessment type slugs: lowercase letters, digits, underscores
ASSESSMENT_TYPE_PATTERN = r"^[a-z0-9_]+$"

# Suffix appended to a duplicated assessment's name
DUPLICATE_NAME_SUFFIX = " (Copy)"
