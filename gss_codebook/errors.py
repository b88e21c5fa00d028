"""Exceptions raised by the codebook pipeline."""

from typing import Optional


class CodebookError(Exception):
    """Base class for pipeline errors."""


class ConfigError(CodebookError):
    """Unknown source or invalid source configuration."""


class FetchError(CodebookError):
    """A codebook page could not be retrieved or loaded."""

    def __init__(self, page: int, reason: str):
        self.page = page
        self.reason = reason
        super().__init__(f"page {page}: {reason}")


class MalformedRecordError(CodebookError):
    """A variable container does not have the shape its layout requires."""

    def __init__(
        self,
        reason: str,
        page: Optional[int] = None,
        container_index: Optional[int] = None,
        record_id: Optional[str] = None,
    ):
        self.reason = reason
        self.page = page
        self.container_index = container_index
        self.record_id = record_id
        super().__init__(self._describe())

    def _describe(self) -> str:
        where = []
        if self.page is not None:
            where.append(f"page {self.page}")
        if self.container_index is not None:
            where.append(f"container {self.container_index}")
        if self.record_id:
            where.append(f"id {self.record_id}")
        prefix = ", ".join(where)
        return f"{prefix}: {self.reason}" if prefix else self.reason

    def locate(
        self,
        page: Optional[int] = None,
        container_index: Optional[int] = None,
        record_id: Optional[str] = None,
    ) -> "MalformedRecordError":
        """Fill in location fields that are still unknown and return self."""
        if self.page is None:
            self.page = page
        if self.container_index is None:
            self.container_index = container_index
        if not self.record_id:
            self.record_id = record_id
        self.args = (self._describe(),)
        return self
