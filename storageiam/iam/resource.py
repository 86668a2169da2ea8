from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

DiffSuppressFunc = Callable[[str, str, str, 'ResourceData'], bool]

DEFAULT_TIMEOUT_SECONDS = 20 * 60


@dataclass(frozen=True)
class SchemaField:
    type: type = str
    required: bool = False
    force_new: bool = False
    diff_suppress: Optional[DiffSuppressFunc] = None

    def zero_value(self) -> Any:
        return self.type()


Schema = Mapping[str, SchemaField]


class TimeoutKey(str, Enum):
    CREATE = 'create'
    READ = 'read'
    UPDATE = 'update'
    DELETE = 'delete'


@dataclass
class Timeouts:
    create: float = DEFAULT_TIMEOUT_SECONDS
    read: float = DEFAULT_TIMEOUT_SECONDS
    update: float = DEFAULT_TIMEOUT_SECONDS
    delete: float = DEFAULT_TIMEOUT_SECONDS

    def get(self, key: TimeoutKey) -> float:
        return getattr(self, key.value)


class ResourceData:
    """The live configuration and state of one managed resource.

    Field values are checked against the resource schema on every write. The
    id is the persisted primary key; it is empty until the resource has been
    created or imported.
    """

    def __init__(self,
                 schema: Schema,
                 values: Optional[Mapping[str, Any]] = None,
                 *,
                 id: str = '',  # pylint: disable=redefined-builtin
                 timeouts: Optional[Timeouts] = None,
                 module_name: Optional[str] = None):
        self.schema = schema
        self._values: Dict[str, Any] = {}
        self._id = id
        self.timeouts = timeouts or Timeouts()
        self.module_name = module_name
        for key, value in (values or {}).items():
            self.set(key, value)

    def _field(self, key: str) -> SchemaField:
        try:
            return self.schema[key]
        except KeyError:
            raise KeyError(f'{key!r} is not a field of this resource') from None

    def get(self, key: str) -> Any:
        field = self._field(key)
        return self._values.get(key, field.zero_value())

    def get_ok(self, key: str) -> Tuple[Any, bool]:
        value = self.get(key)
        return value, value != self._field(key).zero_value()

    def set(self, key: str, value: Any) -> None:
        if key not in self.schema:
            raise ValueError(f'Invalid address to set: {key!r}')
        field = self.schema[key]
        if not isinstance(value, field.type):
            raise ValueError(f'{key}: expected {field.type.__name__}, got {type(value).__name__}: {value!r}')
        self._values[key] = value

    @property
    def id(self) -> str:
        return self._id

    def set_id(self, id: str) -> None:  # pylint: disable=redefined-builtin
        self._id = id

    def timeout(self, key: TimeoutKey) -> float:
        return self.timeouts.get(key)

    def suppresses_diff(self, key: str, old: str, new: str) -> bool:
        field = self._field(key)
        if field.diff_suppress is None:
            return old == new
        return field.diff_suppress(key, old, new, self)

    def __repr__(self) -> str:
        return f'ResourceData(id={self._id!r}, values={self._values!r})'
