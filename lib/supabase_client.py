# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides the shared Supabase client and the two helpers every
# service uses to run a query:
# - run(): execute a query, converting any driver failure to an upstream error
# - run_single(): same for .single() lookups, mapping "no rows" to None
#
# The client is a singleton created on first use with the service key
# (falls back to the anon key when no service key is configured).
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   client = SupabaseClient.get_client()
#   rows = SupabaseClient.run(client.table("brands").select("*"), "list brands")
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from supabase import create_client, Client

from app.config import settings
from app.exceptions import UpstreamError

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST code returned by .single() when the filter matched zero rows
NO_ROWS_CODE = "PGRST116"


class SupabaseClientError(UpstreamError):
    """
    Error during Supabase operations.

    The driver message is logged and kept on `cause`; the client-facing
    message stays generic.
    """

    def __init__(
        self,
        action: str,
        cause: str,
        message: str = "Error en el servidor",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message=message, cause=f"{action}: {cause}")
        self.action = action
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.action}: {self.cause}"


class SupabaseClient:
    """
    Shared Supabase client plus query helpers.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        client = SupabaseClient.get_client()
        query = client.table("admins").select("id, email, name").eq("id", admin_id).single()
        admin = SupabaseClient.run_single(query, "fetch admin")
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Returns:
            Client: Supabase client instance

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.supabase_key,
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    action="create client",
                    cause=f"{e} (check SUPABASE_URL and SUPABASE_SERVICE_KEY)",
                )
        return cls._instance

    # -------------------------------------------------------------------------
    # Query Execution
    # -------------------------------------------------------------------------

    @classmethod
    def execute(cls, query: Any, action: str, message: str = "Error en el servidor") -> Any:
        """
        Execute a query builder and return the raw API response.

        Args:
            query: A postgrest request builder (anything with .execute())
            action: Short description for logs, e.g. "list products"
            message: Client-facing message if the call fails

        Raises:
            SupabaseClientError: If the driver raises for any reason
        """
        try:
            return query.execute()
        except Exception as e:
            logger.error(f"Supabase call failed ({action}): {e}")
            raise SupabaseClientError(action=action, cause=str(e), message=message)

    @classmethod
    def run(cls, query: Any, action: str, message: str = "Error en el servidor") -> Any:
        """
        Execute a query and return response.data.

        Returns:
            The response payload (list for multi-row queries, dict for .single())
        """
        return cls.execute(query, action, message).data

    @classmethod
    def run_single(cls, query: Any, action: str, message: str = "Error en el servidor") -> dict[str, Any] | None:
        """
        Execute a .single() query, returning None when no row matched.

        Any other failure raises SupabaseClientError.
        """
        try:
            response = query.execute()
        except Exception as e:
            if NO_ROWS_CODE in str(e):
                return None
            logger.error(f"Supabase call failed ({action}): {e}")
            raise SupabaseClientError(action=action, cause=str(e), message=message)
        return response.data or None

    @classmethod
    def count(cls, query: Any, action: str) -> int:
        """Execute a head/count query and return the exact count (0 if absent)."""
        return cls.execute(query, action).count or 0
