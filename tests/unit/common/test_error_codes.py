"""Unit tests for error codes and the exception taxonomy."""

import pytest

from deployment_storage.common.error_codes import (
    AUTH_ERRORS,
    COMMON_ERRORS,
    ERROR_CODES,
    STORAGE_ERRORS,
    AuthError,
    DownloadTimeoutError,
    ErrorCode,
    ErrorComponent,
    NotInitializedError,
    StorageClientError,
    UnsupportedAuthError,
    ValidationError,
)


class TestErrorCode:
    def test_format(self):
        code = ErrorCode("Storage", "504", "00", "Blob download timed out")

        assert code.code == "Deploy-Storage-504-00"
        assert str(code) == "Deploy-Storage-504-00: Blob download timed out"

    def test_codes_are_unique(self):
        codes = [error_code.code for error_code in ERROR_CODES.values()]

        assert len(codes) == len(set(codes))

    @pytest.mark.parametrize(
        "catalogue, component",
        [
            (AUTH_ERRORS, ErrorComponent.AUTH),
            (STORAGE_ERRORS, ErrorComponent.STORAGE),
            (COMMON_ERRORS, ErrorComponent.COMMON),
        ],
    )
    def test_codes_carry_component(self, catalogue, component):
        for error_code in catalogue.values():
            assert error_code.code.startswith(f"Deploy-{component.value}-")


class TestExceptions:
    @pytest.mark.parametrize(
        "exception_cls",
        [
            AuthError,
            UnsupportedAuthError,
            ValidationError,
            NotInitializedError,
            DownloadTimeoutError,
        ],
    )
    def test_taxonomy(self, exception_cls):
        error = exception_cls("something went wrong")

        assert isinstance(error, StorageClientError)
        assert str(error).startswith(error.error_code.code)
        assert "something went wrong" in str(error)

    def test_explicit_code(self):
        error = AuthError("no keys", AUTH_ERRORS["ACCOUNT_KEY_ERROR"])

        assert error.error_code is AUTH_ERRORS["ACCOUNT_KEY_ERROR"]

    def test_timeout_is_builtin_timeout(self):
        error = DownloadTimeoutError("too slow")

        assert isinstance(error, TimeoutError)
        assert error.error_code is STORAGE_ERRORS["DOWNLOAD_TIMEOUT_ERROR"]
