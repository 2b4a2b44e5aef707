# =============================================================================
# tests/test_catalog.py - Category, Brand and Stats Endpoint Tests
# =============================================================================

from unittest.mock import patch

import pytest

from tests.conftest import CATEGORY_ID, NIL_UUID

BRAND_ID = "2d3c4b5a-6f7e-4d8c-9b0a-1f2e3d4c5b6a"


class TestCategories:

    def test_public_list_ordered_by_name(self, client, fake_db):
        fake_db.respond("categories", data=[{"id": CATEGORY_ID, "name": "Baldes"}])

        resp = client.get("/api/categories")

        assert resp.status_code == 200
        assert resp.json() == [{"id": CATEGORY_ID, "name": "Baldes"}]
        assert fake_db.queries[0].called("order") == [(("name",), {"desc": False})]

    def test_create_derives_slug(self, client, fake_db, auth_headers):
        fake_db.respond("categories", data=[{"id": CATEGORY_ID, "slug": "colgadores"}])

        resp = client.post(
            "/api/admin/categories",
            headers=auth_headers,
            json={"name": "Colgadores", "icon": "Hook", "color": "#8B4513", "slug": "ignored"},
        )

        assert resp.status_code == 200
        [(args, _)] = fake_db.queries[0].called("insert")
        assert args[0] == {"name": "Colgadores", "icon": "Hook", "color": "#8B4513", "slug": "colgadores"}

    def test_create_requires_name(self, client, fake_db, auth_headers):
        resp = client.post("/api/admin/categories", headers=auth_headers, json={"icon": "Hook"})

        assert resp.status_code == 400
        assert resp.json()["code"] == "MISSING_FIELDS"
        assert fake_db.queries == []

    def test_update_not_found(self, client, fake_db, auth_headers):
        fake_db.respond("categories", data=[])

        resp = client.put(f"/api/admin/categories/{NIL_UUID}", headers=auth_headers, json={"name": "X"})

        assert resp.status_code == 404
        assert resp.json()["code"] == "CATEGORY_NOT_FOUND"

    def test_update_rejects_blank_name(self, client, fake_db, auth_headers):
        resp = client.put(f"/api/admin/categories/{CATEGORY_ID}", headers=auth_headers, json={"name": ""})

        assert resp.status_code == 400
        assert resp.json()["code"] == "MISSING_FIELDS"
        assert fake_db.queries == []

    def test_delete(self, client, fake_db, auth_headers):
        resp = client.delete(f"/api/admin/categories/{CATEGORY_ID}", headers=auth_headers)

        assert resp.status_code == 200
        assert resp.json()["message"] == "Categoría eliminada"

    def test_invalid_id(self, client, fake_db):
        resp = client.put("/api/admin/categories/baldes", json={"name": "X"})

        assert resp.status_code == 400
        assert fake_db.queries == []

    def test_upload_image(self, client, fake_db, auth_headers):
        fake_db.respond("categories", data=[{"id": CATEGORY_ID, "image_url": "https://cdn/c.webp"}])

        with patch("lib.cdn.cloudinary.uploader.upload", return_value={"secure_url": "https://cdn/c.webp"}) as upload:
            resp = client.post(
                f"/api/admin/categories/{CATEGORY_ID}/image",
                headers=auth_headers,
                files={"image": ("c.webp", b"RIFF0000WEBP", "image/webp")},
            )

        assert resp.status_code == 200
        assert resp.json()["image_url"] == "https://cdn/c.webp"
        assert upload.call_args.kwargs["folder"] == "interplast/categories"
        assert upload.call_args.kwargs["transformation"][0]["width"] == 500
        [(args, _)] = fake_db.queries[0].called("update")
        assert args[0] == {"image_url": "https://cdn/c.webp"}


class TestBrands:

    def test_public_list(self, client, fake_db):
        fake_db.respond("brands", data=[{"id": BRAND_ID, "name": "Kossodo"}])
        assert client.get("/api/brands").json()[0]["name"] == "Kossodo"

    def test_update_regenerates_slug(self, client, fake_db, auth_headers):
        fake_db.respond("brands", data=[{"id": BRAND_ID}])

        client.put(f"/api/admin/brands/{BRAND_ID}", headers=auth_headers, json={"name": "Rey Plast"})

        [(args, _)] = fake_db.queries[0].called("update")
        assert args[0] == {"name": "Rey Plast", "slug": "rey-plast"}

    @pytest.mark.parametrize("name", ["", "  "])
    def test_update_rejects_blank_name(self, client, fake_db, auth_headers, name):
        resp = client.put(f"/api/admin/brands/{BRAND_ID}", headers=auth_headers, json={"name": name})

        assert resp.status_code == 400
        assert resp.json()["details"]["fields"] == ["name"]
        assert fake_db.queries == []

    def test_update_without_name_keeps_slug(self, client, fake_db, auth_headers):
        fake_db.respond("brands", data=[{"id": BRAND_ID}])

        client.put(f"/api/admin/brands/{BRAND_ID}", headers=auth_headers, json={"description": "Hogar"})

        [(args, _)] = fake_db.queries[0].called("update")
        assert args[0] == {"description": "Hogar"}

    def test_delete(self, client, fake_db, auth_headers):
        resp = client.delete(f"/api/admin/brands/{BRAND_ID}", headers=auth_headers)
        assert resp.json() == {"success": True, "message": "Marca eliminada"}


class TestStats:

    def test_counts(self, client, fake_db, auth_headers):
        fake_db.respond("products", count=40)
        fake_db.respond("products", count=31)
        fake_db.respond("categories", count=8)
        fake_db.respond("brands", count=5)
        fake_db.respond("contacts", count=3)

        resp = client.get("/api/admin/stats", headers=auth_headers)

        assert resp.status_code == 200
        assert resp.json() == {
            "totalProducts": 40,
            "availableProducts": 31,
            "outOfStock": 9,
            "totalCategories": 8,
            "totalBrands": 5,
            "unreadMessages": 3,
        }

    def test_uses_head_only_exact_counts(self, client, fake_db, auth_headers):
        client.get("/api/admin/stats", headers=auth_headers)

        for query in fake_db.queries:
            assert query.called("select") == [(("*",), {"count": "exact", "head": True})]
        [unread] = fake_db.queries_for("contacts")
        assert unread.called("eq") == [(("is_read", False), {})]

    def test_missing_counts_are_zero(self, client, fake_db, auth_headers):
        resp = client.get("/api/admin/stats", headers=auth_headers)
        assert resp.json()["totalProducts"] == 0
