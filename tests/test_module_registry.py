import json
import os
import tempfile
import unittest
from unittest.mock import patch

from pydantic import ValidationError

from abstractions.module_registry import ModuleRegistry
from contracts.probe_config import ProbeConfiguration
from core.errors import UnknownModule
from core.module_registry import StaticModuleRegistry
from core.registry_factory import DEFAULT_MODULES, RegistryFactory, get_default_registry


class TestStaticModuleRegistry(unittest.TestCase):
    def setUp(self):
        self.registry = StaticModuleRegistry(
            {"http_get_2xx": {"method": "GET", "fail_if_not_matches_regexp": ["ok"]}}
        )

    def test_is_module_registry(self):
        self.assertIsInstance(self.registry, ModuleRegistry)

    def test_resolve_known_module(self):
        raw = self.registry.resolve("http_get_2xx")
        self.assertEqual(raw["method"], "GET")
        config = ProbeConfiguration.from_module(raw)
        self.assertEqual(config.fail_if_not_matches_regexp[0].pattern, "ok")

    def test_resolve_unknown_module(self):
        with self.assertRaises(UnknownModule) as ctx:
            self.registry.resolve("nope")
        self.assertEqual(ctx.exception.message, "unknown module: nope")

    def test_resolve_is_case_sensitive(self):
        with self.assertRaises(UnknownModule):
            self.registry.resolve("HTTP_GET_2XX")

    def test_table_is_read_only(self):
        with self.assertRaises(TypeError):
            self.registry.resolve("http_get_2xx")["method"] = "POST"

    def test_source_mapping_changes_do_not_leak(self):
        modules = {"m": {"method": "GET"}}
        registry = StaticModuleRegistry(modules)
        modules["m"]["method"] = "POST"
        modules["other"] = {}
        self.assertEqual(registry.resolve("m")["method"], "GET")
        self.assertEqual(registry.list_modules(), ["m"])

    def test_invalid_module_rejected_at_startup(self):
        with self.assertRaises(ValidationError):
            StaticModuleRegistry({"bad": {"method": "TRACE"}})

    def test_non_ascii_header_rejected_at_startup(self):
        with self.assertRaises(ValidationError):
            StaticModuleRegistry({"m": {"headers": {"x-name": "caf\u00e9"}}})

    def test_nested_values_are_read_only(self):
        registry = StaticModuleRegistry(
            {"m": {"headers": {"a": "b"}, "allowed_targets": [{"regexp": "example"}]}}
        )
        raw = registry.resolve("m")
        with self.assertRaises(TypeError):
            raw["headers"]["x-injected"] = "1"
        with self.assertRaises(TypeError):
            raw["allowed_targets"][0]["regexp"] = "other"
        with self.assertRaises(AttributeError):
            raw["allowed_targets"].append("https://other.example")
        self.assertEqual(dict(registry.resolve("m")["headers"]), {"a": "b"})

    def test_frozen_module_still_validates(self):
        registry = StaticModuleRegistry(
            {
                "m": {
                    "headers": {"a": "b"},
                    "allowed_targets": ["https://example.com", {"regexp": "example"}],
                    "success_criteria": {"kind": "codes", "codes": [204]},
                }
            }
        )
        config = ProbeConfiguration.from_module(registry.resolve("m"))
        self.assertEqual(config.headers["a"], "b")
        self.assertEqual(config.allowed_targets[1].pattern, "example")
        self.assertTrue(config.success_criteria.accepts(204))

    def test_list_modules_sorted(self):
        registry = StaticModuleRegistry({"b": {}, "a": {}})
        self.assertEqual(registry.list_modules(), ["a", "b"])


class TestRegistryFactory(unittest.TestCase):
    @patch("core.registry_factory.Config")
    def test_builtin_modules(self, mock_config):
        mock_config.PROBE_MODULES_FILE = None
        registry = get_default_registry()
        self.assertEqual(registry.list_modules(), sorted(DEFAULT_MODULES))
        config = ProbeConfiguration.from_module(registry.resolve("http_post_204"))
        self.assertTrue(config.success_criteria.accepts(204))
        self.assertEqual(config.body, "{}")

    def test_modules_from_file(self):
        modules = {
            "https_only": {
                "method": "HEAD",
                "allowed_targets": ["https://example.com", {"regexp": r"\.example\.org$"}],
                "valid_status_codes": "3xx",
                "no_follow_redirects": True,
            }
        }
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "modules.json")
            with open(path, "w", encoding="utf-8") as f:
                json.dump(modules, f)
            registry = RegistryFactory.create_registry(path)
        self.assertEqual(registry.list_modules(), ["https_only"])
        config = ProbeConfiguration.from_module(registry.resolve("https_only"))
        self.assertFalse(config.follow_redirects)
        self.assertEqual(config.allowed_targets[1].pattern, r"\.example\.org$")

    def test_module_file_must_be_object(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "modules.json")
            with open(path, "w", encoding="utf-8") as f:
                json.dump(["http_get_2xx"], f)
            with self.assertRaises(ValueError):
                RegistryFactory.create_registry(path)

    def test_missing_module_file(self):
        with self.assertRaises(OSError):
            RegistryFactory.create_registry("/nonexistent/modules.json")


if __name__ == "__main__":
    unittest.main()
