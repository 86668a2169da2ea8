"""Typed IAM policy documents.

The storage API speaks the same policy format as Cloud Resource Manager:

    {
      "version": 3,
      "etag": "CAE=",
      "bindings": [
        {"role": "roles/storage.objectViewer", "members": ["user:a@example.com"],
         "condition": {"title": "...", "expression": "..."}}
      ],
      "auditConfigs": [...]
    }

Conversion drops keys the typed form does not model (`kind`, `resourceId`).
When producing JSON, empty lists, empty strings and a zero version are
omitted; `etag` and `condition` are omitted only when None, so an empty
etag or an empty condition survives a round trip.
"""
import dataclasses
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar

from ..exceptions import ConversionError

T = TypeVar('T')


def _check_mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ConversionError(f'Cannot convert a policy to a resource manager policy: '
                              f'expected {what} to be an object, found: {data!r}')
    return data


def _get(data: Mapping[str, Any], key: str, typ: Type[T], what: str, default: T) -> T:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, typ) or (typ is int and isinstance(value, bool)):
        raise ConversionError(f'Cannot convert a policy to a resource manager policy: '
                              f'{what}.{key} must be {typ.__name__}, found: {value!r}')
    return value


def _get_strings(data: Mapping[str, Any], key: str, what: str) -> List[str]:
    values = _get(data, key, list, what, [])
    for value in values:
        if not isinstance(value, str):
            raise ConversionError(f'Cannot convert a policy to a resource manager policy: '
                                  f'{what}.{key} must contain only strings, found: {value!r}')
    return list(values)


def _omit_empty(data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if v}


@dataclass
class Expr:
    expression: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None

    @staticmethod
    def from_json(data: Any) -> 'Expr':
        data = _check_mapping(data, 'condition')
        return Expr(**{f.name: _get(data, f.name, str, 'condition', None) for f in dataclasses.fields(Expr)})

    def to_json(self) -> Dict[str, Any]:
        return {k: v for k, v in dataclasses.asdict(self).items() if v is not None}


@dataclass
class Binding:
    role: str
    members: List[str] = field(default_factory=list)
    condition: Optional[Expr] = None

    @staticmethod
    def from_json(data: Any) -> 'Binding':
        data = _check_mapping(data, 'binding')
        condition = data.get('condition')
        return Binding(
            role=_get(data, 'role', str, 'binding', ''),
            members=_get_strings(data, 'members', 'binding'),
            condition=Expr.from_json(condition) if condition is not None else None,
        )

    def to_json(self) -> Dict[str, Any]:
        data = _omit_empty({'role': self.role, 'members': list(self.members)})
        if self.condition is not None:
            data['condition'] = self.condition.to_json()
        return data


@dataclass
class AuditLogConfig:
    log_type: str = ''
    exempted_members: List[str] = field(default_factory=list)

    @staticmethod
    def from_json(data: Any) -> 'AuditLogConfig':
        data = _check_mapping(data, 'auditLogConfig')
        return AuditLogConfig(
            log_type=_get(data, 'logType', str, 'auditLogConfig', ''),
            exempted_members=_get_strings(data, 'exemptedMembers', 'auditLogConfig'),
        )

    def to_json(self) -> Dict[str, Any]:
        return _omit_empty({'logType': self.log_type, 'exemptedMembers': list(self.exempted_members)})


@dataclass
class AuditConfig:
    service: str = ''
    audit_log_configs: List[AuditLogConfig] = field(default_factory=list)

    @staticmethod
    def from_json(data: Any) -> 'AuditConfig':
        data = _check_mapping(data, 'auditConfig')
        return AuditConfig(
            service=_get(data, 'service', str, 'auditConfig', ''),
            audit_log_configs=[
                AuditLogConfig.from_json(c) for c in _get(data, 'auditLogConfigs', list, 'auditConfig', [])
            ],
        )

    def to_json(self) -> Dict[str, Any]:
        return _omit_empty({
            'service': self.service,
            'auditLogConfigs': [c.to_json() for c in self.audit_log_configs],
        })


@dataclass
class Policy:
    bindings: List[Binding] = field(default_factory=list)
    audit_configs: List[AuditConfig] = field(default_factory=list)
    etag: Optional[str] = None
    version: int = 0

    @staticmethod
    def from_json(data: Any) -> 'Policy':
        data = _check_mapping(data, 'policy')
        return Policy(
            bindings=[Binding.from_json(b) for b in _get(data, 'bindings', list, 'policy', [])],
            audit_configs=[AuditConfig.from_json(c) for c in _get(data, 'auditConfigs', list, 'policy', [])],
            etag=_get(data, 'etag', str, 'policy', None),
            version=_get(data, 'version', int, 'policy', 0),
        )

    def to_json(self) -> Dict[str, Any]:
        for binding in self.bindings:
            if not binding.role:
                raise ConversionError(f'Cannot convert a resource manager policy to a policy: binding without role: {binding!r}')
        data = _omit_empty({
            'bindings': [b.to_json() for b in self.bindings],
            'auditConfigs': [c.to_json() for c in self.audit_configs],
            'version': self.version,
        })
        if self.etag is not None:
            data['etag'] = self.etag
        return data


def _unconditional_binding_index(policy: Policy, role: str) -> Optional[int]:
    for i, binding in enumerate(policy.bindings):
        if binding.role == role and binding.condition is None:
            return i
    return None


def add_member(policy: Policy, role: str, member: str) -> Policy:
    """A copy of `policy` with `member` granted `role` unconditionally."""
    bindings = [dataclasses.replace(b, members=list(b.members)) for b in policy.bindings]
    result = dataclasses.replace(policy, bindings=bindings)
    i = _unconditional_binding_index(result, role)
    if i is None:
        bindings.append(Binding(role=role, members=[member]))
    elif member not in bindings[i].members:
        bindings[i].members.append(member)
    return result


def remove_member(policy: Policy, role: str, member: str) -> Policy:
    """A copy of `policy` without the unconditional grant of `role` to `member`.

    A binding left without members is dropped.
    """
    bindings = [dataclasses.replace(b, members=list(b.members)) for b in policy.bindings]
    result = dataclasses.replace(policy, bindings=bindings)
    i = _unconditional_binding_index(result, role)
    if i is not None and member in bindings[i].members:
        bindings[i].members.remove(member)
        if not bindings[i].members:
            del bindings[i]
    return result
