"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EXPIRING_SOON_DAYS = 30
MAX_IMAGE_BYTES = 5 * 1024 * 1024

PROFILE_IMAGE_BUCKET = "employee-profiles"
FAMILY_IMAGE_BUCKET = "family-profiles"

PROFILES_TABLE = "employee_profiles"
PASSES_TABLE = "employee_passes"
HEALTH_TABLE = "health_records"
FAMILY_TABLE = "family_members"
DUTIES_TABLE = "duty_assignments"
AUTH_USERS_TABLE = "auth_users"

MIN_PASSWORD_LENGTH = 6
MIN_PHONE_LENGTH = 10
MIN_ADDRESS_LENGTH = 10
