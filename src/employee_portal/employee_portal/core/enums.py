from __future__ import annotations

from enum import Enum


class Cadre(str, Enum):
    """Staff grade of an employee."""

    OFFICER = "Officer"
    SUPERVISOR = "Supervisor"
    SKILLED = "Skilled"
    SEMI_SKILLED = "Semi-skilled"
    UNSKILLED = "Unskilled"


class Department(str, Enum):
    OPERATIONS = "Operations"
    ENGINEERING = "Engineering"
    SIGNAL_TELECOM = "Signal & Telecom"
    ELECTRICAL = "Electrical"
    COMMERCIAL = "Commercial"
    PERSONNEL = "Personnel"
    ACCOUNTS = "Accounts"
    MEDICAL = "Medical"
    SECURITY = "Security"
    STORES = "Stores"


class Division(str, Enum):
    """Zonal railway the employee is posted to."""

    CENTRAL = "Central Railway"
    EASTERN = "Eastern Railway"
    NORTHERN = "Northern Railway"
    NORTH_EASTERN = "North Eastern Railway"
    NORTHEAST_FRONTIER = "Northeast Frontier Railway"
    SOUTHERN = "Southern Railway"
    SOUTH_CENTRAL = "South Central Railway"
    SOUTH_EASTERN = "South Eastern Railway"
    SOUTH_EAST_CENTRAL = "South East Central Railway"
    WESTERN = "Western Railway"
    WEST_CENTRAL = "West Central Railway"
    NORTH_WESTERN = "North Western Railway"
    NORTH_CENTRAL = "North Central Railway"
    EAST_CENTRAL = "East Central Railway"
    EAST_COAST = "East Coast Railway"
    SOUTH_WESTERN = "South Western Railway"


class PassStatus(str, Enum):
    ACTIVE = "active"
    EXPIRED = "expired"
    REVOKED = "revoked"


class PassType(str, Enum):
    PRIVILEGE = "Privilege"
    SCHOOL = "School"
    PTO = "PTO"
    OTHER = "Other"


class TrainType(str, Enum):
    LOCAL = "Local"
    EXPRESS = "Express"
    MAIL = "Mail"
    RAJDHANI = "Rajdhani"
    SHATABDI = "Shatabdi"
    OTHER = "Other"


class Relation(str, Enum):
    SPOUSE = "spouse"
    SON = "son"
    DAUGHTER = "daughter"
    FATHER = "father"
    MOTHER = "mother"
    OTHER = "other"


class SessionState(str, Enum):
    """Lifecycle of the process-wide session.

    UNKNOWN is the only state in which the session is still loading.
    """

    UNKNOWN = "unknown"
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


class ErrorKind(str, Enum):
    """Machine-readable kinds carried by remote collaborator errors."""

    NO_ROWS = "no_rows"
    CONFLICT = "conflict"
    CONSTRAINT = "constraint"
    INVALID_REQUEST = "invalid_request"
    BACKEND = "backend"
    INVALID_CREDENTIALS = "invalid_credentials"
    USER_EXISTS = "user_already_exists"
    OBJECT_EXISTS = "object_exists"
    OBJECT_NOT_FOUND = "object_not_found"
