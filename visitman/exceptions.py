"""Visitman exceptions."""


class BaseError(Exception):
    """
    Structured exception with a stable code.

    Subclasses declare `_default_messages` keyed by code. Extra keyword
    arguments are kept in `data` and exposed through as_dict().
    """

    _default_messages: dict[str, str] = {}

    def __init__(self, code: str, message: str | None = None, **data):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(f"[{code}] {self.message}")

    def as_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "data": self.data}


class VisitmanError(BaseError):
    """
    Structured exception for visit and shop operations.

    Usage:
        try:
            VisitService.direct_check_in(customer, "shop_1", "4521")
        except VisitmanError as e:
            if e.code == "DUPLICATE_VISIT":
                handle_duplicate()
    """

    default_code = "VISITMAN_ERROR"

    _default_messages = {
        "SHOP_NOT_FOUND": "Shop not found",
        "MEMBER_NOT_FOUND": "Member not found",
        "INVALID_CODE": "Invalid secret code",
        "DUPLICATE_VISIT": "A visit is already recorded for this shop on this date",
        "VALIDATION_ERROR": "Missing or invalid field",
        "VISIT_DATE_IN_FUTURE": "Visit date cannot be in the future",
        "INVALID_SCAN_TOKEN": "Not a loyalty scan code",
        "INVALID_TRANSITION": "Verification transition not allowed",
        "PERMISSION_DENIED": "Action not allowed for this role",
        "STORAGE_UNAVAILABLE": "Record storage unavailable",
    }

    def __init__(self, code: str | None = None, message: str | None = None, **data):
        super().__init__(code or self.default_code, message, **data)


class ShopNotFound(VisitmanError):
    default_code = "SHOP_NOT_FOUND"


class MemberNotFound(VisitmanError):
    default_code = "MEMBER_NOT_FOUND"


class InvalidCode(VisitmanError):
    default_code = "INVALID_CODE"


class DuplicateVisit(VisitmanError):
    default_code = "DUPLICATE_VISIT"


class ValidationError(VisitmanError):
    """Missing required field or rejected input (also bad tokens and transitions)."""

    default_code = "VALIDATION_ERROR"


class PermissionDenied(VisitmanError):
    default_code = "PERMISSION_DENIED"


class StorageUnavailable(VisitmanError):
    default_code = "STORAGE_UNAVAILABLE"
