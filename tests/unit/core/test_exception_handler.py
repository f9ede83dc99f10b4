"""Unit tests for the uniform API error payload."""

from __future__ import annotations

import pytest
from rest_framework import exceptions

from modules.categories.exceptions import CategoryInUse
from modules.core.exceptions import api_exception_handler
from modules.products.exceptions import InvalidSize, ProductNotFound
from modules.upload.exceptions import UploadError

pytestmark = pytest.mark.unit


class TestDomainErrors:
    @pytest.mark.parametrize(
        ("exc", "status_code"),
        [
            (InvalidSize("bad size"), 400),
            (ProductNotFound("missing"), 404),
            (CategoryInUse("in use"), 409),
            (UploadError("not an image"), 400),
        ],
    )
    def test_status_mapping(self, exc, status_code):
        response = api_exception_handler(exc, {})
        assert response.status_code == status_code
        assert response.data["errors"][0]["code"] == exc.__class__.__name__
        assert response.data["errors"][0]["detail"] == str(exc)

    def test_invalid_argument_is_validation_error(self):
        response = api_exception_handler(InvalidSize("bad"), {})
        assert response.data["type"] == "validation_error"


class TestFrameworkErrors:
    def test_nested_validation_errors_are_flattened(self):
        exc = exceptions.ValidationError({"variants": [{"sku": ["required"]}]})
        response = api_exception_handler(exc, {})
        assert response.status_code == 400
        assert response.data["type"] == "validation_error"
        assert response.data["errors"] == [
            {"code": "invalid", "detail": "required", "attr": "variants.sku"}
        ]

    def test_parse_error(self):
        response = api_exception_handler(exceptions.ParseError(), {})
        assert response.status_code == 400
        assert response.data["errors"][0]["code"] == "parse_error"

    def test_unhandled_exception_returns_none(self):
        assert api_exception_handler(RuntimeError("boom"), {}) is None
