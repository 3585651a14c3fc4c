"""
Client-facing response messages.
"""

UNAUTHORIZED = "Unauthorized Access"
INTERNAL_SERVER_ERROR = "Internal server error."
REQUIRED_DATA = "Please fill all required data."
SUCCESSFULLY_DONE = "Data found successfully."
SUCCESSFULLY_UPDATE = "Data updated successfully."
WENT_WRONG = "Something went wrong"
NOT_FOUND = "No data found."
DELETE = "deleted successfully."
FORBIDDEN = "Unauthorized Access - You do not have permission to access this resource."

EMAIL_NOT_PROVIDED = "Email not provided by identity provider"
ACCOUNT_DISABLED = "This account has been deleted"
LOGIN_FAILED = "Could not complete login"
