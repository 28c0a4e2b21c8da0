from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class OutcomeKind(str, Enum):
    """Tagged variants of an adapter call result."""
    OK = "ok"
    NOT_FOUND = "not_found"
    VALIDATION_FAILED = "validation_failed"
    TRANSPORT_ERROR = "transport_error"


@dataclass(frozen=True)
class Outcome:
    """
    Explicit result of an adapter call.

    Truthy only for ``OK`` so write operations keep their boolean contract:

        if not client.PriceList.save(price_list):
            print(price_list.errors.full_messages())
    """

    kind: OutcomeKind
    record: Any = None
    errors: Dict[str, List[str]] = field(default_factory=dict)
    error: Optional[Exception] = None
    status_code: Optional[int] = None

    def __bool__(self) -> bool:
        return self.kind is OutcomeKind.OK

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.OK

    @classmethod
    def success(cls, record: Any = None, status_code: Optional[int] = None) -> "Outcome":
        return cls(OutcomeKind.OK, record=record, status_code=status_code)

    @classmethod
    def not_found(cls, error: Exception, status_code: Optional[int] = None) -> "Outcome":
        return cls(OutcomeKind.NOT_FOUND, error=error, status_code=status_code)

    @classmethod
    def validation_failed(cls, record: Any, errors: Dict[str, List[str]]) -> "Outcome":
        return cls(OutcomeKind.VALIDATION_FAILED, record=record, errors=errors, status_code=422)

    @classmethod
    def transport_error(cls, error: Exception, status_code: Optional[int] = None) -> "Outcome":
        return cls(OutcomeKind.TRANSPORT_ERROR, error=error, status_code=status_code)
