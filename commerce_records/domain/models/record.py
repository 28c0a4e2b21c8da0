"""
Record base class and attribute declarations.

A record is a mutable attribute bag for one remote entity. Resource types
subclass ``Record`` and declare their attributes:

    class PriceList(Record):
        name = Attribute(str)
        status = Attribute(str, readonly=True)
        is_default = Attribute(bool)

Readonly attributes are accepted from API responses but never sent back.
"""
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterator, List, Mapping, Optional

from commerce_records.core.exceptions import ConfigError
from commerce_records.domain.naming import camelize, pluralize, singularize, underscore


class Attribute:
    """Typed attribute descriptor storing its value in ``record.attributes``."""

    def __init__(self, type_: type = str, readonly: bool = False, writeable_on: Optional[str] = None):
        if writeable_on not in (None, "create", "update"):
            raise ConfigError(f"writeable_on must be 'create' or 'update', got {writeable_on!r}")
        self.type = type_
        self.readonly = readonly
        self.writeable_on = writeable_on
        self.name: Optional[str] = None

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, instance: Optional["Record"], owner: type) -> Any:
        if instance is None:
            return self
        return instance.attributes.get(self.name)

    def __set__(self, instance: "Record", value: Any) -> None:
        instance.attributes[self.name] = self.coerce(value)

    def coerce(self, value: Any) -> Any:
        if value is None or self.type is object:
            return value
        if self.type is bool:
            if isinstance(value, str):
                return value.strip().lower() in ("true", "1", "yes", "t")
            return bool(value)
        if self.type is Decimal:
            try:
                return value if isinstance(value, Decimal) else Decimal(str(value))
            except InvalidOperation:
                raise ValueError(f"{self.name}: {value!r} is not a decimal")
        if self.type is datetime:
            if isinstance(value, datetime):
                return value
            return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        if self.type is date:
            if isinstance(value, datetime):
                return value.date()
            if isinstance(value, date):
                return value
            return date.fromisoformat(str(value)[:10])
        if self.type is list:
            return list(value)
        return self.type(value)

    def serialize(self, value: Any) -> Any:
        if isinstance(value, (datetime, date)):
            return value.isoformat()
        if isinstance(value, Decimal):
            return str(value)
        return value

    def writable(self, record: "Record") -> bool:
        if self.readonly:
            return False
        if self.writeable_on == "create":
            return not record.persisted
        if self.writeable_on == "update":
            return record.persisted
        return True


class BelongsTo:
    """
    Declares ``<name>_id`` and a lazy accessor resolving the parent record
    through its own adapter's identity map.
    """

    def __init__(self, class_name: Optional[str] = None, readonly: bool = False, writeable_on: Optional[str] = None):
        self.class_name = class_name
        self.readonly = readonly
        self.writeable_on = writeable_on
        self.name: Optional[str] = None

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name
        self.class_name = self.class_name or camelize(name)
        key = Attribute(object, readonly=self.readonly, writeable_on=self.writeable_on)
        key.__set_name__(owner, f"{name}_id")
        setattr(owner, f"{name}_id", key)

    def __get__(self, instance: Optional["Record"], owner: type) -> Any:
        if instance is None:
            return self
        foreign_id = instance.attributes.get(f"{self.name}_id")
        if not foreign_id:
            return None
        return instance.adapter_for(self.class_name).find(foreign_id)


class HasMany:
    """Declares ``<singular>_ids`` and a lazy accessor using ``find_many``."""

    def __init__(self, class_name: Optional[str] = None):
        self.class_name = class_name
        self.name: Optional[str] = None
        self.key: Optional[str] = None

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name
        singular = singularize(name)
        self.class_name = self.class_name or camelize(singular)
        self.key = f"{singular}_ids"
        ids = Attribute(list, readonly=True)
        ids.__set_name__(owner, self.key)
        setattr(owner, self.key, ids)

    def __get__(self, instance: Optional["Record"], owner: type) -> Any:
        if instance is None:
            return self
        ids = instance.attributes.get(self.key) or []
        if not ids:
            return []
        return instance.adapter_for(self.class_name).find_many(ids)


def belongs_to(class_name: Optional[str] = None, **options: Any) -> BelongsTo:
    return BelongsTo(class_name, **options)


def has_many(class_name: Optional[str] = None) -> HasMany:
    return HasMany(class_name)


class ValidationErrors:
    """Per-field validation messages populated from a 422 response."""

    def __init__(self) -> None:
        self._messages: Dict[str, List[str]] = {}

    def add(self, field: str, message: str) -> None:
        self._messages.setdefault(field, []).append(message)

    def from_response(self, errors: Any) -> None:
        """
        Merge the ``errors`` object of a 422 body.

        Accepts ``{"field": ["msg", ...]}``, ``{"field": "msg"}`` and a bare
        list of messages (filed under ``base``).
        """
        if not errors:
            return
        if isinstance(errors, Mapping):
            for field, messages in errors.items():
                if isinstance(messages, (list, tuple)):
                    for message in messages:
                        self.add(str(field), str(message))
                else:
                    self.add(str(field), str(messages))
        elif isinstance(errors, (list, tuple)):
            for message in errors:
                self.add("base", str(message))
        else:
            self.add("base", str(errors))

    def clear(self) -> None:
        self._messages.clear()

    def full_messages(self) -> List[str]:
        return [
            message if field == "base" else f"{field} {message}"
            for field, messages in self._messages.items()
            for message in messages
        ]

    def to_dict(self) -> Dict[str, List[str]]:
        return {field: list(messages) for field, messages in self._messages.items()}

    def __getitem__(self, field: str) -> List[str]:
        return list(self._messages.get(field, []))

    def __contains__(self, field: object) -> bool:
        return field in self._messages

    def __iter__(self) -> Iterator[str]:
        return iter(self._messages)

    def __len__(self) -> int:
        return sum(len(messages) for messages in self._messages.values())

    def __bool__(self) -> bool:
        return bool(self._messages)

    def __repr__(self) -> str:
        return f"ValidationErrors({self._messages!r})"


class Record:
    """Base class for every resource record."""

    id = Attribute(object, readonly=True)
    created_at = Attribute(datetime, readonly=True)
    updated_at = Attribute(datetime, readonly=True)

    # Overridable naming; derived from the class name when unset
    json_root: str = ""
    plural_path: str = ""

    _declared: Dict[str, Attribute] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        declared: Dict[str, Attribute] = {}
        for klass in reversed(cls.__mro__):
            for name, value in vars(klass).items():
                if isinstance(value, Attribute):
                    declared[name] = value
        cls._declared = declared
        if "json_root" not in vars(cls):
            cls.json_root = underscore(cls.__name__)
        if "plural_path" not in vars(cls):
            cls.plural_path = pluralize(cls.json_root)

    def __init__(self, client: Any = None, attributes: Optional[Mapping[str, Any]] = None, **kwargs: Any):
        self.client = client
        self.attributes: Dict[str, Any] = {}
        self.errors = ValidationErrors()
        self.assign_attributes({**(attributes or {}), **kwargs})

    @classmethod
    def model_name(cls) -> str:
        return cls.__name__

    @classmethod
    def declared_attributes(cls) -> Dict[str, Attribute]:
        return dict(cls._declared)

    def assign_attributes(self, values: Mapping[str, Any]) -> None:
        """Merge values into the record, coercing declared attributes."""
        for name, value in values.items():
            attribute = self._declared.get(name)
            if attribute is not None:
                attribute.__set__(self, value)
            else:
                # Undeclared keys are kept verbatim but never sent back
                self.attributes[name] = value

    @property
    def persisted(self) -> bool:
        return self.id is not None and self.id != ""

    def valid(self) -> bool:
        return not self.errors

    def as_json(self) -> Dict[str, Any]:
        """Request body for create/update: writable, assigned attributes under the JSON root."""
        body = {
            name: attribute.serialize(self.attributes[name])
            for name, attribute in self._declared.items()
            if name in self.attributes and attribute.writable(self)
        }
        return {self.json_root: body}

    def adapter_for(self, model_name: str) -> Any:
        if self.client is None:
            raise ConfigError(f"{self.model_name()} record is not attached to a client")
        return self.client.adapter_for(model_name)

    def save(self, idempotency_key: Optional[str] = None) -> Any:
        return self.adapter_for(self.model_name()).save(self, idempotency_key=idempotency_key)

    def destroy(self, idempotency_key: Optional[str] = None) -> Any:
        return self.adapter_for(self.model_name()).delete(self, idempotency_key=idempotency_key)

    def __repr__(self) -> str:
        shown = ", ".join(f"{k}={v!r}" for k, v in self.attributes.items() if k != "id")
        return f"<{self.model_name()} id={self.id!r}{' ' + shown if shown else ''}>"


# Record itself is usable for schema-less resources
Record._declared = {name: value for name, value in vars(Record).items() if isinstance(value, Attribute)}
Record.json_root = "record"
Record.plural_path = "records"
