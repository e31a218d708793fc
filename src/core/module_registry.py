import logging
from types import MappingProxyType
from typing import Any, List, Mapping

from abstractions.module_registry import ModuleRegistry
from contracts.probe_config import ProbeConfiguration
from core.errors import UnknownModule

logger = logging.getLogger(__name__)


def freeze(value: Any) -> Any:
    """
    Return a read-only copy of a raw module value: mappings become
    MappingProxyType and lists become tuples, all the way down.
    """
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    return value


class StaticModuleRegistry(ModuleRegistry):
    """
    In-memory module table fixed at startup.
    """

    def __init__(self, modules: Mapping[str, Mapping[str, Any]]):
        """
        Initialize the registry, validating every module definition up front.

        Args:
            modules: Mapping of module name to raw module definition.

        Raises:
            pydantic.ValidationError: If any module definition is invalid.
        """
        for name, raw in modules.items():
            ProbeConfiguration.from_module(raw)
            logger.debug(f"Module '{name}' validated")
        self._modules = MappingProxyType(
            {name: freeze(raw) for name, raw in modules.items()}
        )
        logger.info(f"Module registry loaded with modules: {self.list_modules()}")

    def resolve(self, name: str) -> Mapping[str, Any]:
        try:
            return self._modules[name]
        except KeyError:
            raise UnknownModule(name) from None

    def list_modules(self) -> List[str]:
        return sorted(self._modules)
