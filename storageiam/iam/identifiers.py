import abc
from typing import Dict, Iterable, Optional, Sequence

from ..exceptions import ParseError


def _is_segment(value: str) -> bool:
    return bool(value) and '/' not in value


class IdentifierPattern(abc.ABC):
    @abc.abstractmethod
    def match(self, identifier: str) -> Optional[Dict[str, str]]:
        """The captured fields if `identifier` has this form, otherwise None."""
        raise NotImplementedError


class PrefixedPattern(IdentifierPattern):
    """`<prefix>/<value>`, where value is one non-empty path segment."""

    def __init__(self, prefix: str, field: str):
        assert _is_segment(prefix), prefix
        self.prefix = prefix
        self.field = field

    def match(self, identifier: str) -> Optional[Dict[str, str]]:
        prefix, sep, value = identifier.partition('/')
        if sep and prefix == self.prefix and _is_segment(value):
            return {self.field: value}
        return None

    def __str__(self) -> str:
        return f'{self.prefix}/{{{self.field}}}'

    def __repr__(self) -> str:
        return f'PrefixedPattern({self.prefix!r}, {self.field!r})'


class BarePattern(IdentifierPattern):
    """A single non-empty path segment."""

    def __init__(self, field: str):
        self.field = field

    def match(self, identifier: str) -> Optional[Dict[str, str]]:
        if _is_segment(identifier):
            return {self.field: identifier}
        return None

    def __str__(self) -> str:
        return f'{{{self.field}}}'

    def __repr__(self) -> str:
        return f'BarePattern({self.field!r})'


STORAGE_BUCKET_ID_PATTERNS: Sequence[IdentifierPattern] = (
    PrefixedPattern('b', 'bucket'),
    BarePattern('bucket'),
)


def parse_import_id(patterns: Iterable[IdentifierPattern], identifier: str) -> Dict[str, str]:
    patterns = list(patterns)
    for pattern in patterns:
        fields = pattern.match(identifier)
        if fields is not None:
            return fields
    raise ParseError(identifier, [str(p) for p in patterns])


def resource_name_from_self_link(link: str) -> str:
    return link.rsplit('/', 1)[-1]


def compare_resource_names(old: str, new: str) -> bool:
    return resource_name_from_self_link(old) == resource_name_from_self_link(new)
