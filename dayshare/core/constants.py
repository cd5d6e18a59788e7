"""Global constants for the dayshare application."""

# Collection names
USERS_COLLECTION = "users"
GROUPS_COLLECTION = "groups"
ENTRIES_COLLECTION = "entries"
DRAFTS_COLLECTION = "drafts"
INVITATIONS_COLLECTION = "invitations"
NOTIFICATIONS_COLLECTION = "notifications"
AI_CHATS_COLLECTION = "ai_chats"

# Firestore caps a batch at 500 writes
FIRESTORE_BATCH_LIMIT = 400

# Entry queries
DEFAULT_ENTRIES_LIMIT = 50
MAX_ENTRIES_LIMIT = 100

# Notification queries
DEFAULT_NOTIFICATIONS_LIMIT = 50
MAX_NOTIFICATIONS_LIMIT = 100

# Invitations
INVITE_TTL_DAYS = 7
INVITE_CODE_LENGTH = 12
INVITE_CODE_ALPHABET = "abcdefghijklmnopqrstuvwxyz0123456789"
INVITE_CODE_MAX_ATTEMPTS = 5

# AI assistant
AI_HISTORY_WINDOW = 10
AI_MAX_TOKENS = 300
AI_TEMPERATURE = 0.7
PERSONAL_CHAT_KEY = "personal"

# Storage
PHOTO_STORAGE_PREFIX = "entry_photos"
UPLOAD_URL_TTL_MINUTES = 15

# Fallback display name for users without a profile name
ANONYMOUS_NAME = "Someone"
