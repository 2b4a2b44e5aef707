# =============================================================================
# app/routers/contacts.py - Contact Form and Admin Inbox
# =============================================================================
# POST /api/contact is public and rate limited per IP. It only ever returns
# a confirmation, never the stored row.
# =============================================================================

import logging
from typing import Any

from fastapi import APIRouter, Depends

from app.auth import AdminDep
from app.auth.models import MessageResponse
from app.dependencies import IdParam
from app.rate_limit import contact_rate_limit
from core.models.contact import ContactCreate, ContactUpdate
from core.services.contact_service import ContactService

logger = logging.getLogger(__name__)

router = APIRouter()
admin_router = APIRouter()


@router.post("/contact", response_model=MessageResponse, dependencies=[Depends(contact_rate_limit)])
def submit_contact(request: ContactCreate) -> MessageResponse:
    """
    Submit the public contact form.

    Requires name, email and message. Text is sanitized before storage.
    """
    ContactService.submit(request)
    return MessageResponse(message="Mensaje enviado correctamente")


# =============================================================================
# Admin Inbox
# =============================================================================

@admin_router.get("/contacts")
def list_contacts(admin: AdminDep) -> list[dict[str, Any]]:
    """All contact messages, newest first."""
    return ContactService.list_contacts()


@admin_router.get("/contacts/{id}")
def get_contact(id: IdParam, admin: AdminDep) -> dict[str, Any]:
    return ContactService.get_contact(id)


@admin_router.put("/contacts/{id}/read")
def mark_contact_read(id: IdParam, admin: AdminDep) -> dict[str, Any]:
    return ContactService.set_read(id, True)


@admin_router.put("/contacts/{id}")
def update_contact(id: IdParam, admin: AdminDep, request: ContactUpdate) -> dict[str, Any]:
    """Set the read flag explicitly ({"is_read": false} marks it unread)."""
    return ContactService.set_read(id, request.is_read)


@admin_router.delete("/contacts/{id}", response_model=MessageResponse)
def delete_contact(id: IdParam, admin: AdminDep) -> MessageResponse:
    ContactService.delete_contact(id)
    return MessageResponse(message="Mensaje eliminado")
