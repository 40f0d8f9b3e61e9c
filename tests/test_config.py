import json
import os
import tempfile
import unittest
from unittest.mock import patch

from zai_client.config import Config, get_config, reset_config, set_config


class TestConfig(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmp.name, "config.json")

    def tearDown(self) -> None:
        self.tmp.cleanup()
        reset_config()

    def write(self, data: dict) -> None:
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f)

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = Config(config_path=self.path)
        self.assertEqual(config.origin, "https://chat.z.ai")
        self.assertTrue(config.anonymous_mode)
        self.assertFalse(config.debug_logging)
        self.assertEqual(config.thinking_processing, "think")
        self.assertEqual(config.default_model_ids()[0], "GLM-4.5")

    def test_file_values_with_env_substitution(self):
        self.write({
            "backup_token": "${MY_TOKEN}",
            "anonymous_mode": False,
            "origin": "https://example.test/",
            "unrelated": "ignored",
        })
        with patch.dict(os.environ, {"MY_TOKEN": "from-env"}, clear=True):
            config = Config(config_path=self.path)
        self.assertEqual(config.backup_token, "from-env")
        self.assertFalse(config.anonymous_mode)
        self.assertEqual(config.client_origin, "https://example.test")

    def test_unknown_placeholder_is_kept(self):
        self.write({"backup_token": "${NOT_SET_ANYWHERE}"})
        with patch.dict(os.environ, {}, clear=True):
            config = Config(config_path=self.path)
        self.assertEqual(config.backup_token, "${NOT_SET_ANYWHERE}")

    def test_env_overrides_file(self):
        self.write({"primary_model": "from-file", "debug_logging": False})
        env = {"ZAI_PRIMARY_MODEL": "from-env", "ZAI_DEBUG_LOGGING": "yes", "ZAI_ANONYMOUS_MODE": "0"}
        with patch.dict(os.environ, env, clear=True):
            config = Config(config_path=self.path)
        self.assertEqual(config.primary_model, "from-env")
        self.assertTrue(config.debug_logging)
        self.assertFalse(config.anonymous_mode)

    def test_get_config_is_cached(self):
        config = Config(config_path=self.path)
        set_config(config)
        self.assertIs(get_config(), config)
        reset_config()
        self.assertIsNot(get_config(), config)


if __name__ == "__main__":
    unittest.main()
