import abc
import re
from typing import Callable

from .policy import Policy
from .resource import ResourceData
from ..config.provider import ProviderConfig

TEMPLATE_VARIABLE_RE = re.compile(r'\{\{(\w+)\}\}')


class ResourceIamUpdater(abc.ABC):
    """A resource whose IAM policy can be read and replaced as a whole.

    Callers that read, modify and write back a policy must hold the lock
    named by `mutex_key` for the whole cycle.
    """

    @abc.abstractmethod
    async def fetch_policy(self) -> Policy:
        raise NotImplementedError

    @abc.abstractmethod
    async def replace_policy(self, policy: Policy) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    def resource_id(self) -> str:
        raise NotImplementedError

    @abc.abstractmethod
    def mutex_key(self) -> str:
        raise NotImplementedError

    @abc.abstractmethod
    def describe_resource(self) -> str:
        raise NotImplementedError


ResourceIamUpdaterProducer = Callable[[ResourceData, ProviderConfig], ResourceIamUpdater]
ResourceIdParser = Callable[[ResourceData, ProviderConfig], None]


def generate_user_agent(d: ResourceData, base_user_agent: str) -> str:
    if d.module_name:
        return f'{base_user_agent} {d.module_name}'
    return base_user_agent


def replace_vars(d: ResourceData, config: ProviderConfig, template: str) -> str:
    base_paths = config.base_paths()

    def replacement(m: re.Match) -> str:
        name = m.group(1)
        if name in base_paths:
            return base_paths[name]
        if name not in d.schema:
            raise ValueError(f'unknown variable {name!r} in URL template {template!r}')
        value, ok = d.get_ok(name)
        if not ok:
            raise ValueError(f'variable {name!r} in URL template {template!r} is not set')
        return str(value)

    return TEMPLATE_VARIABLE_RE.sub(replacement, template)
