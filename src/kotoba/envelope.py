"""The `{resultCode, msg, data}` wrapper used by every JSON API response."""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from kotoba.exceptions import MissingDataError

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """Generic response envelope.

    `data` is optional on the wire; use `require_data()` where the caller
    cannot continue without it.
    """

    model_config = ConfigDict(populate_by_name=True)

    result_code: str = Field(..., alias="resultCode")
    msg: str = ""
    data: T | None = None

    @property
    def status_code(self) -> int | None:
        """Numeric status carried in the result code (`"200-1"` -> 200)."""
        head = self.result_code.split("-", 1)[0]
        return int(head) if head.isdigit() else None

    @property
    def is_success(self) -> bool:
        """Whether the result code is in the 2xx range."""
        code = self.status_code
        return code is not None and 200 <= code < 300

    @property
    def has_data(self) -> bool:
        return self.data is not None

    def require_data(self) -> T:
        """Return `data` or raise if the server sent none."""
        if self.data is None:
            raise MissingDataError(self.msg or "No data available")
        return self.data

    def data_or(self, default: T) -> T:
        """Return `data`, or `default` when absent."""
        return default if self.data is None else self.data
