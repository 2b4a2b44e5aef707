# =============================================================================
# core/services/catalog_service.py - Category and Brand Business Logic
# =============================================================================
# Categories and brands are small lookup tables with the same lifecycle:
# list by name, create/update with a slug derived from the name, delete.
# Categories additionally carry a single CDN image.
# =============================================================================

import logging
from typing import Any

from pydantic import BaseModel

from app.exceptions import MissingFieldsError, NotFoundError
from lib.cdn import ImageCDN, CATEGORY_IMAGE
from lib.supabase_client import SupabaseClient
from lib.utils import blank_fields, missing_fields, slugify

logger = logging.getLogger(__name__)


class LookupTableService:
    """CRUD for a name/slug lookup table. Subclasses set the table and labels."""

    table: str = ""
    entity: str = ""
    label: str = ""
    not_found_message: str = ""
    not_found_code: str = ""

    @classmethod
    def _not_found(cls, row_id: str) -> NotFoundError:
        return NotFoundError(cls.not_found_message, code=cls.not_found_code, details={"id": row_id})

    @classmethod
    def list_all(cls) -> list[dict[str, Any]]:
        client = SupabaseClient.get_client()
        query = client.table(cls.table).select("*").order("name", desc=False)
        return SupabaseClient.run(query, f"list {cls.table}") or []

    @classmethod
    def create(cls, request: BaseModel) -> dict[str, Any]:
        """
        Insert a row; slug is derived from name.

        Raises:
            MissingFieldsError: If a required field is empty
        """
        data = request.model_dump(exclude_none=True)
        missing = missing_fields(data, getattr(request, "REQUIRED", ()))
        if missing:
            raise MissingFieldsError(missing)

        data["slug"] = slugify(data["name"])

        client = SupabaseClient.get_client()
        rows = SupabaseClient.run(
            client.table(cls.table).insert(data),
            f"create {cls.entity}",
            message=f"Error al crear {cls.label}",
        )
        logger.info(f"Created {cls.entity}: {rows[0].get('id')} ({data['slug']})")
        return rows[0]

    @classmethod
    def update(cls, row_id: str, request: BaseModel) -> dict[str, Any]:
        """
        Partial update. The slug is regenerated when a name is sent.

        Raises:
            MissingFieldsError: If name is sent blank
            NotFoundError: If no row has this id
        """
        data = request.model_dump(exclude_unset=True)
        blank = blank_fields(data, ("name",))
        if blank:
            raise MissingFieldsError(blank)
        if data.get("name"):
            data["slug"] = slugify(data["name"])

        client = SupabaseClient.get_client()
        if not data:
            row = SupabaseClient.run_single(
                client.table(cls.table).select("*").eq("id", row_id).single(),
                f"get {cls.entity}",
            )
            if not row:
                raise cls._not_found(row_id)
            return row

        rows = SupabaseClient.run(
            client.table(cls.table).update(data).eq("id", row_id),
            f"update {cls.entity}",
            message=f"Error al actualizar {cls.label}",
        )
        if not rows:
            raise cls._not_found(row_id)

        logger.info(f"Updated {cls.entity}: {row_id}")
        return rows[0]

    @classmethod
    def delete(cls, row_id: str) -> None:
        client = SupabaseClient.get_client()
        SupabaseClient.run(
            client.table(cls.table).delete().eq("id", row_id),
            f"delete {cls.entity}",
            message=f"Error al eliminar {cls.label}",
        )
        logger.info(f"Deleted {cls.entity}: {row_id}")


class CategoryService(LookupTableService):
    table = "categories"
    entity = "category"
    label = "la categoría"
    not_found_message = "Categoría no encontrada"
    not_found_code = "CATEGORY_NOT_FOUND"

    @classmethod
    def set_image(cls, category_id: str, content: bytes, filename: str | None = None) -> dict[str, Any]:
        """
        Upload a category image and store its URL on the category.

        Raises:
            NotFoundError: If no category has this id (the upload has
                already happened by then)
        """
        url = ImageCDN.upload(content, CATEGORY_IMAGE, filename=filename)

        client = SupabaseClient.get_client()
        rows = SupabaseClient.run(
            client.table(cls.table).update({"image_url": url}).eq("id", category_id),
            "set category image",
            message="Error al guardar la imagen",
        )
        if not rows:
            raise cls._not_found(category_id)
        return rows[0]


class BrandService(LookupTableService):
    table = "brands"
    entity = "brand"
    label = "la marca"
    not_found_message = "Marca no encontrada"
    not_found_code = "BRAND_NOT_FOUND"
