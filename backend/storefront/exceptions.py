"""
Storefront Catalog - Exception Hierarchy
==========================================

What:  Application exceptions that map one-to-one onto catalog error responses.
How:   Each exception carries the HTTP status, a stable error code, a
       user-facing message and the request field that caused it. Global
       handlers registered in main.py render them as:

           {"error": {"status": 404, "code": "DEP_02",
                      "message": "...", "field": "department_id"}}

Exception Hierarchy:
    CatalogError (base)               → 500
    ├── NotFoundError                 → 404 (resource-specific code)
    ├── MissingParameterError         → 404 USR_10
    └── InvalidParameterError         → 400 USR_11

Persistence failures are deliberately absent: SQLAlchemy errors propagate
unchanged to the catch-all handler.
"""

from typing import Any, Dict, Optional


class CatalogError(Exception):
    """
    Base exception for all catalog errors.

    Attributes:
        status:   HTTP status code used in the response and the error body
        code:     Stable machine-readable error code (e.g. "PRD_01")
        message:  User-facing error description
        field:    Name of the offending request parameter, if any
        context:  Extra debug info (logged, never returned to the client)
    """

    status: int = 500
    default_code: str = "internal_server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        code: Optional[str] = None,
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code or self.default_code
        self.field = field
        self.context = context or {}
        super().__init__(self.message)

    def to_body(self) -> Dict[str, Any]:
        """Render the uniform error envelope."""
        return {
            "error": {
                "status": self.status,
                "code": self.code,
                "message": self.message,
                "field": self.field,
            }
        }


class NotFoundError(CatalogError):
    """
    A referenced entity id does not resolve, or a filtered listing is empty.

    The code and field are resource-specific, e.g. ATR_01/attribute_id for
    an unknown attribute or PRD_02/category_id when listing by category.
    """

    status = 404
    default_code = "not_found"

    def __init__(
        self,
        code: str,
        message: str,
        field: str,
        value: Any = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if value is not None:
            ctx["value"] = value
        super().__init__(message=message, code=code, field=field, context=ctx)


class MissingParameterError(CatalogError):
    """
    A required query parameter was not supplied.

    Reported as 404 to keep the published contract of the search endpoint.
    """

    status = 404
    default_code = "USR_10"

    def __init__(
        self,
        field: str,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message or f"{field} is required",
            field=field,
            context=context,
        )


class InvalidParameterError(CatalogError):
    """A query parameter was supplied with a value outside its allowed set."""

    status = 400
    default_code = "USR_11"

    def __init__(
        self,
        field: str,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message or f"{field} has an invalid value",
            field=field,
            context=context,
        )
