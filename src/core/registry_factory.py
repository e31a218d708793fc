"""
Registry factory for creating the probe module table.
"""
import json
import logging
from typing import Any, Dict, Optional

from abstractions.module_registry import ModuleRegistry
from config.config import Config
from core.module_registry import StaticModuleRegistry

logger = logging.getLogger(__name__)

# Built-in modules, used when no module file is configured
DEFAULT_MODULES: Dict[str, Dict[str, Any]] = {
    "http_get_2xx": {
        "method": "GET",
        "fail_if_not_matches_regexp": ["ok"],
    },
    "http_post_204": {
        "method": "POST",
        "headers": {"Content-Type": "application/json"},
        "body": "{}",
        "valid_status_codes": [204],
        "fail_if_matches_regexp": ["error"],
    },
}


class RegistryFactory:
    """
    Factory class for creating module registry instances.
    """

    @staticmethod
    def create_registry(modules_file: Optional[str] = None) -> ModuleRegistry:
        """
        Create a module registry from a JSON module file or the built-in modules.

        Args:
            modules_file (Optional[str]): Path to a JSON object mapping module
                names to module definitions. If None, uses Config.PROBE_MODULES_FILE.

        Returns:
            ModuleRegistry: A read-only module registry.

        Raises:
            OSError: If the module file cannot be read.
            ValueError: If the module file is not a JSON object, or a module
                definition is invalid.
        """
        modules_file = modules_file or Config.PROBE_MODULES_FILE
        if not modules_file:
            logger.info("No module file configured, using built-in modules")
            return StaticModuleRegistry(DEFAULT_MODULES)

        logger.info(f"Loading probe modules from {modules_file}")
        with open(modules_file, encoding="utf-8") as f:
            modules = json.load(f)
        if not isinstance(modules, dict):
            raise ValueError(
                f"Module file {modules_file} must contain a JSON object, "
                f"got {type(modules).__name__}"
            )
        return StaticModuleRegistry(modules)


def get_default_registry() -> ModuleRegistry:
    """
    Get the module registry based on current configuration.

    Returns:
        ModuleRegistry: The default registry instance.
    """
    return RegistryFactory.create_registry()
