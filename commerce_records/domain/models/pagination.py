import json
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from commerce_records.core.logging import get_logger

logger = get_logger(__name__)


class PaginationState(BaseModel):
    """
    Immutable snapshot of the pagination metadata of one listing response.

    A new snapshot replaces the adapter's previous one after every listing
    request; snapshots themselves are never mutated.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    page: int = 1
    total_pages: int = 0
    total_records: int = 0
    limit: Optional[int] = None

    @classmethod
    def from_header(
        cls,
        raw: Optional[str],
        params: Optional[Mapping[str, Any]] = None
    ) -> Optional["PaginationState"]:
        """
        Build a snapshot from the JSON pagination header.

        Args:
            raw: Raw header value, a JSON object
            params: Query params of the request, used for the implicit
                    page and limit when the header omits them

        Returns:
            The snapshot, or None if the header is absent or unreadable
        """
        if not raw:
            return None

        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning(f"Ignoring malformed pagination header: {raw!r}")
            return None

        if not isinstance(data, dict):
            logger.warning(f"Ignoring non-object pagination header: {raw!r}")
            return None

        params = params or {}
        data.setdefault("page", params.get("page", 1))
        if params.get("limit") is not None:
            data.setdefault("limit", params["limit"])

        try:
            return cls(**data)
        except ValidationError as e:
            logger.warning(f"Ignoring invalid pagination header {raw!r}: {e}")
            return None
