"""Core exception class carrying a structured ErrorDetail."""

from __future__ import annotations

from typing import Any

from dispatch_common.models.error_models import ErrorDetail


class DispatchError(Exception):
    """Exception wrapping an ErrorDetail.

    The message shown by ``str()`` is ``"[CODE] message"``; everything else is
    available through the detail and the convenience properties.
    """

    def __init__(self, error_detail: ErrorDetail) -> None:
        super().__init__(f"[{error_detail.error_code.value}] {error_detail.message}")
        self.error_detail = error_detail

    @property
    def correlation_id(self) -> str:
        return str(self.error_detail.correlation_id)

    @property
    def error_code(self) -> str:
        return self.error_detail.error_code.value

    @property
    def service(self) -> str:
        return self.error_detail.service

    @property
    def operation(self) -> str:
        return self.error_detail.operation

    def to_dict(self) -> dict[str, Any]:
        return self.error_detail.model_dump(mode="json")
