"""Unit tests for the Product DTOs (pydantic)."""

from __future__ import annotations

from decimal import Decimal

import pytest
import uuid6
from pydantic import ValidationError

from modules.products.dtos import (
    CreateImageDTO,
    CreateProductDTO,
    CreateVariantDTO,
    UpdateProductDTO,
)

pytestmark = pytest.mark.unit


def _payload(**overrides):
    data = {
        "name": "Test Product",
        "price": 29.99,
        "categoryId": str(uuid6.uuid7()),
        "variants": [{"sku": "TEST-001-M", "size": "M", "stock": 10}],
    }
    data.update(overrides)
    return data


class TestCreateProductDTO:
    def test_camel_case_payload(self):
        dto = CreateProductDTO.model_validate(
            _payload(purchasePrice="10.00", imageUrl="https://cdn.example.com/a.png")
        )
        assert dto.name == "Test Product"
        assert dto.price == Decimal("29.99")
        assert dto.purchase_price == Decimal("10.00")
        assert dto.image_url == "https://cdn.example.com/a.png"
        assert dto.variants[0].sku == "TEST-001-M"
        assert dto.variants[0].stock == 10

    def test_snake_case_names_accepted(self):
        data = _payload()
        data["category_id"] = data.pop("categoryId")
        assert CreateProductDTO.model_validate(data).category_id

    def test_children_default_to_empty(self):
        dto = CreateProductDTO.model_validate(_payload(variants=[]))
        assert dto.variants == []
        assert dto.images == []

    def test_dto_is_frozen(self):
        dto = CreateProductDTO.model_validate(_payload())
        with pytest.raises(ValidationError):
            dto.name = "Other"

    @pytest.mark.parametrize("price", [0, "0.00", -5, "0.001"])
    def test_price_below_minimum_rejected(self, price):
        with pytest.raises(ValidationError):
            CreateProductDTO.model_validate(_payload(price=price))

    def test_minimum_price_accepted(self):
        assert CreateProductDTO.model_validate(_payload(price="0.01")).price == Decimal("0.01")

    @pytest.mark.parametrize("name", ["", "   ", "!!!"])
    def test_name_without_slug_characters_rejected(self, name):
        with pytest.raises(ValidationError):
            CreateProductDTO.model_validate(_payload(name=name))

    def test_category_must_be_uuid(self):
        with pytest.raises(ValidationError):
            CreateProductDTO.model_validate(_payload(categoryId="not-a-uuid"))

    def test_duplicate_skus_in_request_rejected(self):
        variants = [
            {"sku": "DUP", "size": "S"},
            {"sku": "DUP", "size": "M"},
        ]
        with pytest.raises(ValidationError, match="Duplicate SKUs"):
            CreateProductDTO.model_validate(_payload(variants=variants))

    def test_more_than_one_primary_image_rejected(self):
        images = [
            {"url": "https://x/1.png", "isPrimary": True},
            {"url": "https://x/2.png", "isPrimary": True},
        ]
        with pytest.raises(ValidationError, match="primary"):
            CreateProductDTO.model_validate(_payload(images=images))


class TestCreateVariantDTO:
    def test_size_is_normalised(self):
        assert CreateVariantDTO.model_validate({"sku": "A", "size": " xl "}).size == "XL"

    def test_unknown_size_rejected(self):
        with pytest.raises(ValidationError, match="Invalid product size"):
            CreateVariantDTO.model_validate({"sku": "A", "size": "XXXL"})

    def test_stock_defaults_to_zero(self):
        assert CreateVariantDTO.model_validate({"sku": "A", "size": "ONE"}).stock == 0

    def test_negative_stock_rejected(self):
        with pytest.raises(ValidationError):
            CreateVariantDTO.model_validate({"sku": "A", "size": "M", "stock": -1})

    def test_blank_sku_rejected(self):
        with pytest.raises(ValidationError):
            CreateVariantDTO.model_validate({"sku": "  ", "size": "M"})

    def test_price_override_optional(self):
        dto = CreateVariantDTO.model_validate({"sku": "A", "size": "M"})
        assert dto.price is None
        assert dto.purchase_price is None


class TestCreateImageDTO:
    def test_defaults(self):
        dto = CreateImageDTO.model_validate({"url": "https://x/a.png"})
        assert dto.alt_text is None
        assert dto.sort_order == 0
        assert dto.is_primary is False

    def test_camel_case_fields(self):
        dto = CreateImageDTO.model_validate(
            {"url": "https://x/a.png", "altText": "Front", "sortOrder": 2, "isPrimary": True}
        )
        assert (dto.alt_text, dto.sort_order, dto.is_primary) == ("Front", 2, True)

    def test_non_http_url_rejected(self):
        with pytest.raises(ValidationError):
            CreateImageDTO.model_validate({"url": "ftp://x/a.png"})

    @pytest.mark.parametrize("url", ["https://", "http://not a url", "cdn.example.com/a.png"])
    def test_malformed_url_rejected(self, url):
        with pytest.raises(ValidationError):
            CreateImageDTO.model_validate({"url": url})

    def test_url_is_kept_as_string(self):
        dto = CreateImageDTO.model_validate({"url": "https://cdn.example.com/a.png"})
        assert dto.url == "https://cdn.example.com/a.png"
        assert isinstance(dto.url, str)

    def test_overlong_url_rejected(self):
        url = "https://cdn.example.com/" + "a" * 1024
        with pytest.raises(ValidationError):
            CreateImageDTO.model_validate({"url": url})


class TestUpdateProductDTO:
    def test_changes_only_include_supplied_fields(self):
        dto = UpdateProductDTO.model_validate({"price": "15.00"})
        assert dto.changes() == {"price": Decimal("15.00")}

    def test_empty_payload_has_no_changes(self):
        assert UpdateProductDTO.model_validate({}).changes() == {}

    def test_nullable_fields_can_be_cleared(self):
        dto = UpdateProductDTO.model_validate({"description": None, "imageUrl": None})
        assert dto.changes() == {"description": None, "image_url": None}

    @pytest.mark.parametrize("field", ["name", "price", "categoryId"])
    def test_required_fields_cannot_be_nulled(self, field):
        with pytest.raises(ValidationError):
            UpdateProductDTO.model_validate({field: None})

    def test_price_below_minimum_rejected(self):
        with pytest.raises(ValidationError):
            UpdateProductDTO.model_validate({"price": 0})

    def test_image_url_change_is_a_string(self):
        dto = UpdateProductDTO.model_validate({"imageUrl": "https://cdn.example.com/a.png"})
        assert dto.changes() == {"image_url": "https://cdn.example.com/a.png"}

    def test_malformed_image_url_rejected(self):
        with pytest.raises(ValidationError):
            UpdateProductDTO.model_validate({"imageUrl": "https://"})

    @pytest.mark.parametrize(
        "payload",
        [
            {"variants": [{"sku": "X", "size": "M"}]},
            {"images": [{"url": "https://x/a.png"}]},
            {"colour": "red"},
        ],
    )
    def test_unknown_fields_rejected(self, payload):
        with pytest.raises(ValidationError, match="Extra inputs are not permitted"):
            UpdateProductDTO.model_validate(payload)
