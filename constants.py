from os import environ

# Throttling: 100 requests per minute per client, shared per scope
LIMIT_VALUE_AUTH = environ.get("LIMIT_VALUE_AUTH", "100/minute")
LIMIT_VALUE_NOTES = environ.get("LIMIT_VALUE_NOTES", "100/minute")
LIMIT_VALUE_USERS = environ.get("LIMIT_VALUE_USERS", "100/minute")

SCOPE_AUTH = "auth"
SCOPE_NOTES = "notes"
SCOPE_USERS = "users"

MIN_PASSWORD_LENGTH = 6
MAX_TITLE_LENGTH = 255
