"""
Storefront Catalog - Error Message Catalog
============================================

What:  Explicit mapping from error code to message template.
How:   Templates use a single `{value}` placeholder that is filled with the
       offending identifier. The catalog is passed to CatalogService at
       construction time, so tests and deployments can swap the wording
       without touching query code.
"""

from typing import Any, Dict, Mapping, Optional

from storefront.exceptions import InvalidParameterError, MissingParameterError, NotFoundError

DEFAULT_MESSAGES: Dict[str, str] = {
    "ATR_01": "Don't exist attribute with this ID: {value}",
    "ATR_02": "Don't exist attributes for product with this ID: {value}",
    "CAT_01": "Don't exist category with this ID: {value}",
    "CAT_02": "Don't exist categories for product with this ID: {value}",
    "DEP_02": "Don't exist department with this ID: {value}",
    "PRD_01": "Don't exist product with this ID: {value}",
    "PRD_02": "Don't exist products in category with this ID: {value}",
    "PRD_03": "Don't exist products in department with this ID: {value}",
    "REV_01": "Don't exist reviews for product with this ID: {value}",
    "USR_10": "The field {value} is required",
    "USR_11": "The field {value} has an invalid value",
}


class ErrorCatalog:
    """Looks up message templates by error code and builds catalog errors."""

    def __init__(self, templates: Optional[Mapping[str, str]] = None):
        self._templates: Dict[str, str] = dict(
            DEFAULT_MESSAGES if templates is None else templates
        )

    def message(self, code: str, value: Any = None) -> str:
        """
        Render the message for `code`.

        Unknown codes fall back to the bare code so a missing template never
        turns a 404 into a 500.
        """
        template = self._templates.get(code)
        if template is None:
            return code if value is None else f"{code}: {value}"
        return template.format(value="" if value is None else value)

    def not_found(self, code: str, field: str, value: Any) -> NotFoundError:
        return NotFoundError(
            code=code,
            message=self.message(code, value),
            field=field,
            value=value,
        )

    def missing(self, field: str) -> MissingParameterError:
        return MissingParameterError(field=field, message=self.message("USR_10", field))

    def invalid(self, field: str, detail: Optional[str] = None) -> InvalidParameterError:
        message = self.message("USR_11", field)
        if detail:
            message = f"{message}: {detail}"
        return InvalidParameterError(field=field, message=message)
