"""
Tests for the ApiResponse envelope factories.
"""
from typing import List

from app.models.api_response import ApiResponse


def test_ok_with_default_message():
    response = ApiResponse[str].ok("session-123")

    assert response.success is True
    assert response.message == "Success"
    assert response.data == "session-123"
    assert response.errors is None
    assert response.code is None


def test_ok_with_custom_message():
    response = ApiResponse[List[int]].ok([1, 2], message="Loaded.")

    assert response.message == "Loaded."
    assert response.data == [1, 2]


def test_fail_without_detailed_errors():
    response = ApiResponse[int].fail("Validation failed.")

    assert response.success is False
    assert response.message == "Validation failed."
    assert response.data is None
    assert response.errors == ["Validation failed."]
    assert response.code == "INTERNAL_ERROR"


def test_fail_with_detailed_errors():
    technical = ["DB connection lost", "Null reference"]

    response = ApiResponse[bool].fail("A system error occurred.", errors=technical, code="INTERNAL_ERROR")

    assert response.success is False
    assert response.message == "A system error occurred."
    assert response.data is None
    assert response.errors == technical


def test_fail_with_empty_error_list_falls_back_to_message():
    response = ApiResponse[str].fail("Not found.", errors=[], code="NOT_FOUND")

    assert response.errors == ["Not found."]
    assert response.code == "NOT_FOUND"
