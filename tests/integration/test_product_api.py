"""Integration tests for Product API endpoints.

Covers:
- CRUD operations via /products.
- Lookup by slug, list filters, derived stock fields.
- Variant and image sub-resources.
- Domain exception mapping (400, 404, 409).
"""

from __future__ import annotations

from decimal import Decimal

import pytest
import uuid6

from modules.categories.models import CategoryModel
from modules.products.models import ProductImageModel, ProductModel, ProductVariantModel

pytestmark = pytest.mark.integration


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def payload(category):
    return {
        "name": "Test Product",
        "price": 29.99,
        "categoryId": str(category.id),
        "variants": [{"sku": "TEST-001-M", "size": "M", "stock": 10}],
    }


@pytest.fixture()
def created(api_client, payload):
    response = api_client.post("/products", payload, format="json")
    assert response.status_code == 201, response.data
    return response.data


# ===========================================================================
# CREATE
# ===========================================================================


class TestProductCreate:
    def test_create_with_variants(self, api_client, payload):
        response = api_client.post("/products", payload, format="json")

        assert response.status_code == 201
        data = response.data
        assert data["name"] == "Test Product"
        assert data["slug"] == "test-product"
        assert data["price"] == Decimal("29.99")
        assert data["totalStock"] == 10
        assert data["hasStock"] is True
        assert data["variants"][0]["sku"] == "TEST-001-M"
        assert data["variants"][0]["size"] == "M"
        assert data["images"] == []
        assert {"id", "categoryId", "purchasePrice", "imageUrl", "createdAt", "updatedAt"} <= set(data)

    def test_create_with_images(self, api_client, payload):
        payload["images"] = [
            {"url": "https://cdn.example.com/back.png", "sortOrder": 2},
            {"url": "https://cdn.example.com/front.png", "sortOrder": 1, "isPrimary": True, "altText": "Front"},
        ]
        response = api_client.post("/products", payload, format="json")

        assert response.status_code == 201
        assert response.data["imageUrl"] == "https://cdn.example.com/front.png"
        assert [i["sortOrder"] for i in response.data["images"]] == [1, 2]
        assert response.data["images"][0]["altText"] == "Front"

    def test_size_is_normalised(self, api_client, payload):
        payload["variants"][0]["size"] = " m "
        response = api_client.post("/products", payload, format="json")
        assert response.data["variants"][0]["size"] == "M"

    def test_invalid_size_returns_400(self, api_client, payload):
        payload["variants"][0]["size"] = "XXXL"
        response = api_client.post("/products", payload, format="json")
        assert response.status_code == 400
        assert not ProductModel.objects.exists()

    def test_zero_price_returns_400(self, api_client, payload):
        payload["price"] = 0
        response = api_client.post("/products", payload, format="json")
        assert response.status_code == 400

    def test_missing_fields_return_400(self, api_client):
        response = api_client.post("/products", {}, format="json")
        assert response.status_code == 400

    def test_unknown_category_returns_400(self, api_client, payload):
        payload["categoryId"] = str(uuid6.uuid7())
        response = api_client.post("/products", payload, format="json")
        assert response.status_code == 400
        assert not ProductModel.objects.exists()

    def test_duplicate_name_returns_409(self, api_client, payload, created):
        payload["variants"] = []
        response = api_client.post("/products", payload, format="json")
        assert response.status_code == 409

    def test_duplicate_sku_returns_409(self, api_client, payload, created):
        payload["name"] = "Another Product"
        response = api_client.post("/products", payload, format="json")
        assert response.status_code == 409
        assert ProductModel.objects.count() == 1

    def test_duplicate_sku_in_request_returns_400(self, api_client, payload):
        payload["variants"].append({"sku": "TEST-001-M", "size": "L"})
        response = api_client.post("/products", payload, format="json")
        assert response.status_code == 400

    @pytest.mark.parametrize(
        "overrides",
        [
            {"imageUrl": "https://"},
            {"images": [{"url": "http://not a url", "isPrimary": True}]},
        ],
    )
    def test_malformed_urls_return_400(self, api_client, payload, overrides):
        payload.update(overrides)
        response = api_client.post("/products", payload, format="json")
        assert response.status_code == 400
        assert not ProductModel.objects.exists()
        assert not ProductImageModel.objects.exists()


# ===========================================================================
# LIST / RETRIEVE
# ===========================================================================


class TestProductRead:
    def test_list_empty(self, api_client):
        response = api_client.get("/products")
        assert response.status_code == 200
        assert response.data == []

    def test_list_returns_array(self, api_client, created):
        response = api_client.get("/products")
        assert response.status_code == 200
        assert isinstance(response.data, list)
        assert response.data[0]["id"] == created["id"]
        assert len(response.data[0]["variants"]) == 1

    def test_list_filters(self, api_client, created):
        assert len(api_client.get("/products", {"size": "M"}).data) == 1
        assert api_client.get("/products", {"size": "L"}).data == []
        assert api_client.get("/products", {"min_price": "30"}).data == []
        assert len(api_client.get("/products", {"name": "test"}).data) == 1

    def test_size_filter_is_normalised(self, api_client, created):
        assert len(api_client.get("/products", {"size": "m"}).data) == 1
        assert len(api_client.get("/products", {"size": " M "}).data) == 1

    def test_unknown_size_filter_returns_400(self, api_client):
        assert api_client.get("/products", {"size": "XXXL"}).status_code == 400

    def test_list_invalid_filter_returns_400(self, api_client):
        response = api_client.get("/products", {"category": "not-a-uuid"})
        assert response.status_code == 400

    def test_retrieve_by_id(self, api_client, created):
        response = api_client.get(f"/products/{created['id']}")
        assert response.status_code == 200
        assert response.data["id"] == created["id"]

    def test_retrieve_by_slug(self, api_client, created):
        response = api_client.get(f"/products/slug/{created['slug']}")
        assert response.status_code == 200
        assert response.data["slug"] == "test-product"

    def test_retrieve_unknown_id_returns_404(self, api_client):
        assert api_client.get("/products/non-existent-id").status_code == 404
        assert api_client.get(f"/products/{uuid6.uuid7()}").status_code == 404

    def test_retrieve_unknown_slug_returns_404(self, api_client):
        response = api_client.get("/products/slug/non-existent-slug")
        assert response.status_code == 404

    def test_product_without_variants_has_no_stock(self, api_client, payload):
        payload["variants"] = []
        response = api_client.post("/products", payload, format="json")
        assert response.data["totalStock"] == 0
        assert response.data["hasStock"] is False


# ===========================================================================
# UPDATE
# ===========================================================================


class TestProductUpdate:
    def test_put_with_children_returns_400(self, api_client, created):
        response = api_client.put(
            f"/products/{created['id']}",
            {"variants": [{"sku": "NEW-SKU", "size": "L", "stock": 5}]},
            format="json",
        )
        assert response.status_code == 400
        assert ProductVariantModel.objects.filter(product_id=created["id"]).count() == 1
        assert not ProductVariantModel.objects.filter(sku="NEW-SKU").exists()

    def test_patch_with_malformed_image_url_returns_400(self, api_client, created):
        response = api_client.patch(
            f"/products/{created['id']}", {"imageUrl": "http://not a url"}, format="json"
        )
        assert response.status_code == 400
        assert ProductModel.objects.get(id=created["id"]).image_url is None

    def test_patch_price_only(self, api_client, created):
        response = api_client.patch(f"/products/{created['id']}", {"price": 9.5}, format="json")
        assert response.status_code == 200
        assert response.data["price"] == Decimal("9.50")
        assert response.data["name"] == "Test Product"
        assert response.data["totalStock"] == 10

    def test_rename_changes_slug(self, api_client, created):
        response = api_client.put(
            f"/products/{created['id']}", {"name": "Renamed Product"}, format="json"
        )
        assert response.status_code == 200
        assert response.data["slug"] == "renamed-product"
        assert api_client.get("/products/slug/renamed-product").status_code == 200

    def test_clear_description(self, api_client, created):
        api_client.patch(f"/products/{created['id']}", {"description": "text"}, format="json")
        response = api_client.patch(
            f"/products/{created['id']}", {"description": None}, format="json"
        )
        assert response.data["description"] is None

    def test_invalid_price_returns_400(self, api_client, created):
        response = api_client.patch(f"/products/{created['id']}", {"price": -1}, format="json")
        assert response.status_code == 400

    def test_rename_to_existing_returns_409(self, api_client, payload, created):
        payload.update(name="Other Product", variants=[])
        other = api_client.post("/products", payload, format="json").data
        response = api_client.patch(
            f"/products/{other['id']}", {"name": "Test Product"}, format="json"
        )
        assert response.status_code == 409

    def test_move_to_unknown_category_returns_400(self, api_client, created):
        response = api_client.patch(
            f"/products/{created['id']}", {"categoryId": str(uuid6.uuid7())}, format="json"
        )
        assert response.status_code == 400

    def test_update_unknown_returns_404(self, api_client):
        response = api_client.patch(f"/products/{uuid6.uuid7()}", {"price": 1}, format="json")
        assert response.status_code == 404


# ===========================================================================
# DELETE
# ===========================================================================


class TestProductDelete:
    def test_delete_cascades(self, api_client, created):
        api_client.post(
            f"/products/{created['id']}/images",
            {"url": "https://cdn.example.com/a.png"},
            format="json",
        )
        response = api_client.delete(f"/products/{created['id']}")

        assert response.status_code == 204
        assert api_client.get(f"/products/{created['id']}").status_code == 404
        assert not ProductVariantModel.objects.exists()
        assert not ProductImageModel.objects.exists()

    def test_delete_unknown_returns_404(self, api_client):
        assert api_client.delete(f"/products/{uuid6.uuid7()}").status_code == 404

    def test_category_with_products_cannot_be_deleted(self, api_client, created, category):
        response = api_client.delete(f"/categories/{category.id}")
        assert response.status_code == 409
        assert CategoryModel.objects.filter(id=category.id).exists()
        assert ProductModel.objects.filter(id=created["id"]).exists()


# ===========================================================================
# VARIANTS / IMAGES
# ===========================================================================


class TestVariantEndpoints:
    def test_add_variant(self, api_client, created):
        response = api_client.post(
            f"/products/{created['id']}/variants",
            {"sku": "TEST-001-L", "size": "l", "stock": 3, "price": 31.5},
            format="json",
        )
        assert response.status_code == 201
        assert response.data["size"] == "L"
        assert api_client.get(f"/products/{created['id']}").data["totalStock"] == 13

    def test_add_duplicate_sku_returns_409(self, api_client, created):
        response = api_client.post(
            f"/products/{created['id']}/variants",
            {"sku": "TEST-001-M", "size": "M"},
            format="json",
        )
        assert response.status_code == 409

    def test_add_variant_invalid_size_returns_400(self, api_client, created):
        response = api_client.post(
            f"/products/{created['id']}/variants", {"sku": "X", "size": "huge"}, format="json"
        )
        assert response.status_code == 400

    def test_add_variant_to_unknown_product_returns_404(self, api_client):
        response = api_client.post(
            f"/products/{uuid6.uuid7()}/variants", {"sku": "X", "size": "M"}, format="json"
        )
        assert response.status_code == 404

    def test_remove_variant(self, api_client, created):
        variant_id = created["variants"][0]["id"]
        response = api_client.delete(f"/products/{created['id']}/variants/{variant_id}")
        assert response.status_code == 204
        assert api_client.get(f"/products/{created['id']}").data["hasStock"] is False

    def test_remove_unknown_variant_returns_404(self, api_client, created):
        response = api_client.delete(f"/products/{created['id']}/variants/{uuid6.uuid7()}")
        assert response.status_code == 404


class TestImageEndpoints:
    def test_new_primary_image_demotes_previous(self, api_client, created):
        url = f"/products/{created['id']}/images"
        api_client.post(url, {"url": "https://x/1.png", "isPrimary": True}, format="json")
        response = api_client.post(
            url, {"url": "https://x/2.png", "isPrimary": True, "sortOrder": 1}, format="json"
        )
        assert response.status_code == 201

        product = api_client.get(f"/products/{created['id']}").data
        assert [i["isPrimary"] for i in product["images"]] == [False, True]
        assert product["imageUrl"] == "https://x/2.png"

    def test_remove_primary_image_clears_image_url(self, api_client, created):
        image = api_client.post(
            f"/products/{created['id']}/images",
            {"url": "https://x/1.png", "isPrimary": True},
            format="json",
        ).data
        response = api_client.delete(f"/products/{created['id']}/images/{image['id']}")

        assert response.status_code == 204
        assert api_client.get(f"/products/{created['id']}").data["imageUrl"] is None

    def test_invalid_image_url_returns_400(self, api_client, created):
        response = api_client.post(
            f"/products/{created['id']}/images", {"url": "not-a-url"}, format="json"
        )
        assert response.status_code == 400

    def test_remove_unknown_image_returns_404(self, api_client, created):
        response = api_client.delete(f"/products/{created['id']}/images/{uuid6.uuid7()}")
        assert response.status_code == 404
