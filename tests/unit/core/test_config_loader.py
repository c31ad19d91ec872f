import unittest
import os
import yaml
from unittest.mock import patch, mock_open

from core.config_loader import AppConfig, ScoringConfig, load_config, validate_config
from core.exceptions import ConfigurationError


class TestConfigLoader(unittest.TestCase):

    def setUp(self):
        self.sample_config = {
            "server": {"port": 8000, "environment": "development"},
            "hubspot": {
                "client_id": "yaml-client",
                "client_secret": "yaml-secret",
                "scopes": ["crm.objects.deals.read"],
            },
            "trackerrms": {"base_url": "https://trackerrms.example.com/v1"},
            "scoring": {"velocity_weight": 0.5, "roi_weight": 0.5},
        }
        self.config_yaml = yaml.dump(self.sample_config)

    def _load(self, env=None, config_yaml=None):
        with patch("builtins.open", mock_open(read_data=config_yaml or self.config_yaml)):
            with patch("os.path.exists", return_value=True):
                with patch.dict(os.environ, env or {}, clear=True):
                    return load_config("dummy_path.yaml")

    def test_load_config_from_yaml(self):
        config = self._load()
        self.assertIsInstance(config, AppConfig)
        self.assertEqual(config.server.port, 8000)
        self.assertEqual(config.hubspot.client_id, "yaml-client")
        self.assertEqual(config.trackerrms.base_url, "https://trackerrms.example.com/v1")
        self.assertEqual(config.scoring.weights, {"velocity": 0.5, "roi": 0.5})

    def test_defaults_when_sections_missing(self):
        config = self._load(config_yaml="{}\n")
        self.assertEqual(config.server.port, 3000)
        self.assertEqual(config.server.environment, "development")
        self.assertEqual(config.hubspot.base_url, "https://api.hubapi.com")
        self.assertEqual(config.trackerrms.base_url, "https://api.trackerrms.com/v1")
        self.assertEqual(config.scoring.weights, {"velocity": 0.4, "roi": 0.6})
        self.assertEqual(config.logging.level, "INFO")

    def test_missing_file_uses_defaults(self):
        with patch("os.path.exists", return_value=False):
            with patch.dict(os.environ, {}, clear=True):
                config = load_config("nowhere.yaml")
        self.assertEqual(config.server.port, 3000)
        self.assertIsNone(config.hubspot.client_id)

    def test_env_var_overrides(self):
        env = {
            "PORT": "4000",
            "APP_ENV": "production",
            "HUBSPOT_CLIENT_ID": "env-client",
            "HUBSPOT_CLIENT_SECRET": "env-secret",
            "TRACKERRMS_API_KEY": "env-key",
            "TRACKERRMS_BASE_URL": "https://env.trackerrms.com/v1",
            "LOG_LEVEL": "DEBUG",
        }
        config = self._load(env)
        self.assertEqual(config.server.port, 4000)
        self.assertTrue(config.server.is_production)
        self.assertEqual(config.hubspot.client_id, "env-client")
        self.assertEqual(config.hubspot.client_secret, "env-secret")
        self.assertEqual(config.trackerrms.api_key, "env-key")
        self.assertEqual(config.trackerrms.base_url, "https://env.trackerrms.com/v1")
        self.assertEqual(config.logging.level, "DEBUG")

    def test_scopes_env_var_is_comma_separated(self):
        config = self._load({"HUBSPOT_SCOPES": "crm.objects.deals.read, timeline,,"})
        self.assertEqual(config.hubspot.scopes, ["crm.objects.deals.read", "timeline"])

    def test_empty_env_var_does_not_override(self):
        config = self._load({"HUBSPOT_CLIENT_ID": ""})
        self.assertEqual(config.hubspot.client_id, "yaml-client")

    def test_negative_weights_rejected(self):
        with self.assertRaises(ValueError):
            ScoringConfig(velocity_weight=-1)


class TestValidateConfig(unittest.TestCase):

    def test_complete_config(self):
        config = AppConfig(hubspot={"client_id": "id", "client_secret": "secret"})
        self.assertEqual(validate_config(config), [])

    def test_missing_credentials_reported_in_development(self):
        config = AppConfig()
        self.assertEqual(validate_config(config), ["hubspot.client_id", "hubspot.client_secret"])

    def test_missing_credentials_fatal_in_production(self):
        config = AppConfig(server={"environment": "production"}, hubspot={"client_id": "id"})
        with self.assertRaises(ConfigurationError):
            validate_config(config)


if __name__ == '__main__':
    unittest.main()
