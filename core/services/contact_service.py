# =============================================================================
# core/services/contact_service.py - Contact Message Business Logic
# =============================================================================
# Public contact form submissions and the admin inbox.
#
# Submissions are validated in this order, each step a possible 400:
#   required fields -> email syntax -> lengths -> sanitize -> non-empty again
# and only then inserted.
# =============================================================================

import logging
from typing import Any

from app.exceptions import (
    ContactNotFoundError,
    FieldTooLongError,
    InvalidEmailFormatError,
    MissingFieldsError,
)
from core.models.contact import (
    MAX_EMAIL_LENGTH,
    MAX_MESSAGE_LENGTH,
    MAX_NAME_LENGTH,
    ContactCreate,
)
from lib.supabase_client import SupabaseClient
from lib.utils import (
    is_valid_email,
    missing_fields,
    normalize_email,
    sanitize_input,
    sanitize_phone,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "email", "message")


class ContactService:
    """Service for contact messages."""

    @staticmethod
    def build_submission(request: ContactCreate) -> dict[str, Any]:
        """
        Validate and sanitize a contact form submission.

        Returns:
            The row to insert

        Raises:
            MissingFieldsError, InvalidEmailFormatError, FieldTooLongError
        """
        raw = request.model_dump()

        missing = missing_fields(raw, REQUIRED_FIELDS)
        if missing:
            raise MissingFieldsError(missing)

        if not is_valid_email(raw["email"]):
            raise InvalidEmailFormatError()

        too_long = [
            field
            for field, limit in (
                ("name", MAX_NAME_LENGTH),
                ("email", MAX_EMAIL_LENGTH),
                ("message", MAX_MESSAGE_LENGTH),
            )
            if len(raw[field]) > limit
        ]
        if too_long:
            raise FieldTooLongError(too_long)

        row = {
            "name": sanitize_input(raw["name"]),
            "company": sanitize_input(raw.get("company")),
            "email": normalize_email(raw["email"]),
            "phone": sanitize_phone(raw.get("phone")),
            "message": sanitize_input(raw["message"], max_length=MAX_MESSAGE_LENGTH),
        }

        # e.g. a name made only of "<>" is empty once sanitized
        emptied = missing_fields(row, REQUIRED_FIELDS)
        if emptied:
            raise MissingFieldsError(emptied, message="Campos obligatorios inválidos después de validación")

        return row

    @staticmethod
    def submit(request: ContactCreate) -> dict[str, Any]:
        """Validate, sanitize and store a contact message."""
        row = ContactService.build_submission(request)

        client = SupabaseClient.get_client()
        rows = SupabaseClient.run(
            client.table("contacts").insert(row),
            "save contact",
            message="Error al enviar el mensaje",
        )
        logger.info(f"Stored contact message {rows[0].get('id') if rows else '?'}")
        return rows[0] if rows else row

    # -------------------------------------------------------------------------
    # Admin Inbox
    # -------------------------------------------------------------------------

    @staticmethod
    def list_contacts() -> list[dict[str, Any]]:
        """All messages, newest first."""
        client = SupabaseClient.get_client()
        query = client.table("contacts").select("*").order("created_at", desc=True)
        return SupabaseClient.run(query, "list contacts") or []

    @staticmethod
    def get_contact(contact_id: str) -> dict[str, Any]:
        client = SupabaseClient.get_client()
        contact = SupabaseClient.run_single(
            client.table("contacts").select("*").eq("id", contact_id).single(),
            "get contact",
        )
        if not contact:
            raise ContactNotFoundError(contact_id)
        return contact

    @staticmethod
    def set_read(contact_id: str, is_read: bool = True) -> dict[str, Any]:
        """
        Mark a message read (or unread).

        Raises:
            ContactNotFoundError: If no message has this id
        """
        client = SupabaseClient.get_client()
        rows = SupabaseClient.run(
            client.table("contacts").update({"is_read": is_read}).eq("id", contact_id),
            "update contact",
            message="Error al actualizar el mensaje",
        )
        if not rows:
            raise ContactNotFoundError(contact_id)
        return rows[0]

    @staticmethod
    def delete_contact(contact_id: str) -> None:
        client = SupabaseClient.get_client()
        SupabaseClient.run(
            client.table("contacts").delete().eq("id", contact_id),
            "delete contact",
            message="Error al eliminar el mensaje",
        )
        logger.info(f"Deleted contact message: {contact_id}")
