"""
utils/constants.py

Purpose: Centralized static content

- All user-facing notification texts
- Error codes shared by services and API
- Reusable limits

(Prevents hardcoding across the codebase)
"""

# ============================================================
# FILE UPLOAD
# ============================================================

FILE_LOADED_MESSAGE = "{count} contacts found"
FILE_EMPTY_MESSAGE = "The file contains no data rows. Make sure it has a header row and at least one contact."
FILE_UNREADABLE_MESSAGE = "Unable to read the spreadsheet. Make sure the file is a valid Excel or CSV file."
FILE_TOO_LARGE_MESSAGE = "The file is too large. Maximum size is {max_mb} MB."
FILE_TYPE_MESSAGE = "Unsupported file type. Upload an .xlsx, .xls or .csv file."
FILE_DUPLICATE_HEADERS_MESSAGE = "Column headers must be unique. Duplicated: {headers}"
FILE_TOO_MANY_ROWS_MESSAGE = "The file has too many rows to store. Split it into smaller files."

SUPPORTED_EXTENSIONS = (".xlsx", ".xls", ".csv")

# ============================================================
# COLUMN MAPPING
# ============================================================

MAPPING_UPDATED_MESSAGE = "{count} contacts after updating the columns"
PHONE_COLUMN_REQUIRED_MESSAGE = "Select the phone number column"
ROWS_SKIPPED_WARNING = "{count} rows were skipped because of invalid phone numbers"

# ============================================================
# SENDING
# ============================================================

MISSING_API_KEY_MESSAGE = "API key is required. Add your gateway API key in settings."
MISSING_MESSAGE_MESSAGE = "Message text is required"
NO_CONTACTS_MESSAGE = "No contacts to send to. Upload a file that contains contacts."
NO_VALID_NUMBERS_MESSAGE = "No valid phone numbers"
SEND_IN_PROGRESS_MESSAGE = "A send is already in progress for this upload"
SEND_SUCCESS_MESSAGE = "{count} messages sent successfully"
SEND_SKIPPED_SUFFIX = " ({count} skipped)"
SEND_FAILED_MESSAGE = "Failed to send messages"
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred while sending messages"

# Error codes
MISSING_API_KEY = "MISSING_API_KEY"
MISSING_MESSAGE = "MISSING_MESSAGE"
NO_CONTACTS = "NO_CONTACTS"
NO_VALID_NUMBERS = "NO_VALID_NUMBERS"
SEND_IN_PROGRESS = "SEND_IN_PROGRESS"

# ============================================================
# ACCOUNT
# ============================================================

ACCOUNT_HEADER = "X-Account-ID"
MISSING_ACCOUNT_MESSAGE = "Unauthorized - please sign in"
UPLOAD_NOT_FOUND_MESSAGE = "Upload not found or expired"

# ============================================================
# SMS
# ============================================================

NAME_PLACEHOLDER = "{name}"
SMS_SEGMENT_LENGTH = 70
SMS_LOG_TEMPLATE_LIMIT = 255
