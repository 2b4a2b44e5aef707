# =============================================================================
# core/models/contact.py - Contact Message Schemas
# =============================================================================
# - ContactCreate: public contact form submission
# - ContactUpdate: admin read/unread toggle
#
# Length limits and sanitization are applied by ContactService so that
# each failure maps to its own error code.
# =============================================================================

from pydantic import BaseModel, ConfigDict


# Maximum lengths accepted from the public form
MAX_NAME_LENGTH = 100
MAX_EMAIL_LENGTH = 100
MAX_MESSAGE_LENGTH = 2000


class ContactCreate(BaseModel):
    """
    Contact form submission.

    Example:
        {
            "name": "Ana",
            "company": "Bodega Ana",
            "email": "ana@example.com",
            "phone": "+51 999 999 999",
            "message": "Quisiera una cotización de baldes."
        }
    """

    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    company: str | None = None
    email: str | None = None
    phone: str | None = None
    message: str | None = None


class ContactUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    is_read: bool = True
