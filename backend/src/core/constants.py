"""Application constants and configuration values."""

# Database field lengths
MAX_NAME_LENGTH = 100
MAX_GENDER_LENGTH = 10
MAX_PHONE_LENGTH = 20
MAX_ADDRESS_LINE_LENGTH = 100  # street, city, country
MAX_POSTAL_CODE_LENGTH = 20
MAX_ACTOR_LENGTH = 100
MAX_USERNAME_LENGTH = 150

# Database connection settings
DB_POOL_RECYCLE_SECONDS = 300  # 5 minutes

# Audit actor used when a write happens outside an authenticated request
SYSTEM_ACTOR = "System"

# Access tokens
JWT_ALGORITHM = "HS256"
TOKEN_LIFETIME_HOURS = 3
MIN_JWT_SECRET_BYTES = 32  # HS256 needs a key of at least 256 bits
