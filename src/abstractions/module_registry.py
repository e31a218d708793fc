from abc import ABC, abstractmethod
from typing import Any, List, Mapping


class ModuleRegistry(ABC):
    """
    Abstract base class for the read-only table of probe modules.
    """

    @abstractmethod
    def resolve(self, name: str) -> Mapping[str, Any]:
        """
        Return the raw definition of a module.

        Args:
            name (str): Module name, matched exactly and case-sensitively.

        Returns:
            Mapping[str, Any]: The module's raw configuration fields.

        Raises:
            UnknownModule: If no module has this name.
        """

    @abstractmethod
    def list_modules(self) -> List[str]:
        """
        Return the names of all configured modules.

        Returns:
            List[str]: Sorted module names.
        """
