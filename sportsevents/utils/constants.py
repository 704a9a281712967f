"""
Constants used across the event management system.
"""

import string

# Join codes
JOIN_CODE_LENGTH = 8
JOIN_CODE_ALPHABET = string.ascii_uppercase + string.digits

# Alerts
ALERT_PREVIEW_LENGTH = 100  # Announcement content shown in an alert
ALERT_PREVIEW_SUFFIX = "..."

# Accounts
MIN_PASSWORD_LENGTH = 8
DEFAULT_SESSION_EXPIRATION_HOURS = 24 * 7
