"""
Faults and service results.
"""

import pytest

from showroom.faults import (
    INTERNAL_ERROR_MESSAGE,
    DatabaseConnectionFault,
    ErrorKind,
    Fault,
    FaultDomain,
    QueryFault,
    ServiceResult,
    Severity,
    TokenFault,
    UnsupportedMediaTypeFault,
    UploadFault,
)
from showroom.mail import MailSendFault


# ============================================================================
# ServiceResult
# ============================================================================


class TestServiceResult:

    def test_success(self):
        result = ServiceResult.success(id=7)
        assert result.ok
        assert result.kind is None
        assert result.error_code == 0
        assert result.error_message == ""
        assert result.get("id") == 7
        assert result.get("missing", "x") == "x"

    @pytest.mark.parametrize(
        "factory, kind, code",
        [
            (ServiceResult.invalid, ErrorKind.VALIDATION_FAILED, 400),
            (ServiceResult.unauthorized, ErrorKind.UNAUTHORIZED, 401),
            (ServiceResult.not_found, ErrorKind.NOT_FOUND, 404),
            (ServiceResult.conflict, ErrorKind.CONFLICT, 409),
        ],
    )
    def test_failures(self, factory, kind, code):
        result = factory("nope")
        assert not result.ok
        assert result.kind is kind
        assert result.error_code == code
        assert result.error_message == "nope"

    def test_internal_hides_cause(self):
        result = ServiceResult.internal()
        assert result.error_code == 500
        assert result.error_message == INTERNAL_ERROR_MESSAGE == "Error Occurs"

    def test_to_dict(self):
        assert ServiceResult.success(menu=[]).to_dict() == {
            "errorCode": 0,
            "errorMessage": "",
            "menu": [],
        }
        assert ServiceResult.conflict("Brand already exists").to_dict() == {
            "errorCode": 409,
            "errorMessage": "Brand already exists",
        }

    def test_repr(self):
        assert "NOT_FOUND" in repr(ServiceResult.not_found("No brand found"))
        assert "ok" in repr(ServiceResult.success(id=1))


# ============================================================================
# Fault types
# ============================================================================


class TestFaults:

    def test_fault_requires_code_message_domain(self):
        with pytest.raises(TypeError):
            Fault(code="X")

    def test_domain_defaults(self):
        fault = QueryFault(model="Brand", operation="insert", reason="disk full")
        assert fault.domain is FaultDomain.STORAGE
        assert fault.severity is Severity.ERROR
        assert fault.retryable is True
        assert fault.metadata["reason"] == "disk full"
        assert "Brand" in str(fault)

    def test_connection_fault_is_fatal(self):
        fault = DatabaseConnectionFault(url="sqlite:///x", reason="locked")
        assert fault.severity is Severity.FATAL

    def test_unsupported_media_type_message(self):
        fault = UnsupportedMediaTypeFault("image/gif")
        assert fault.message == "Invalid mime type!"
        assert fault.public
        assert fault.metadata == {"content_type": "image/gif"}

    def test_upload_fault(self):
        fault = UploadFault("no space", filename="products/a.png")
        assert fault.code == "IMAGE_UPLOAD_FAILED"
        assert fault.metadata == {"filename": "products/a.png"}

    def test_token_fault(self):
        fault = TokenFault("Token expired")
        assert fault.domain is FaultDomain.SECURITY
        assert fault.message == "Token expired"

    def test_mail_send_fault_transient(self):
        transient = MailSendFault("try later", provider="smtp")
        permanent = MailSendFault("rejected", provider="smtp", transient=False)
        assert transient.code == "MAIL_SEND_TRANSIENT"
        assert transient.retryable
        assert permanent.code == "MAIL_SEND_PERMANENT"
        assert not permanent.retryable
        assert permanent.domain.name == "mail"
