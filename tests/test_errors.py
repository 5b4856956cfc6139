"""Tests for error types and store error translation."""

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from app.core.errors import (
    MalformedIdentifier, NotFound, PermissionDenied, StoreError, ValidationError,
    translate_store_errors,
)


class TestErrorBodies:
    """Test error status codes and JSON bodies."""

    def test_status_codes(self):
        assert ValidationError().status_code == 400
        assert MalformedIdentifier().status_code == 400
        assert PermissionDenied().status_code == 403
        assert NotFound().status_code == 404
        assert StoreError().status_code == 500

    def test_field_errors(self):
        error = ValidationError.for_field("title", "Title cannot be empty")
        assert error.to_dict() == {
            "message": "Title cannot be empty",
            "errors": ["title: Title cannot be empty"],
        }

    def test_request_errors_use_field_prefix(self):
        error = ValidationError.from_request_errors([
            {"loc": ("body", "visibility"), "msg": "Input should be 'public', 'private' or 'role'"},
            {"loc": ("query", "limit"), "msg": "Input should be greater than or equal to 1"},
            {"loc": ("body",), "msg": "Field required"},
        ])
        assert error.status_code == 400
        assert error.to_dict() == {
            "message": "Validation failed",
            "errors": [
                "visibility: Input should be 'public', 'private' or 'role'",
                "limit: Input should be greater than or equal to 1",
                "body: Field required",
            ],
        }

    def test_body_without_field_errors(self):
        assert NotFound("User not found").to_dict() == {"message": "User not found"}


class TestTranslateStoreErrors:
    """Test translate_store_errors()."""

    @pytest.mark.asyncio
    async def test_integrity_error_becomes_validation_error(self):
        with pytest.raises(ValidationError):
            async with translate_store_errors("insert"):
                raise IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))

    @pytest.mark.asyncio
    async def test_other_failures_become_store_error(self):
        with pytest.raises(StoreError) as exc_info:
            async with translate_store_errors("select"):
                raise OperationalError("SELECT", {}, Exception("connection refused"))
        assert exc_info.value.message == "An unexpected error occurred"

    @pytest.mark.asyncio
    async def test_domain_errors_pass_through(self):
        with pytest.raises(NotFound):
            async with translate_store_errors("lookup"):
                raise NotFound("Document not found")
