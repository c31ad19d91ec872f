#!/usr/bin/env python3
"""
Unit tests for the command line entry point.
"""

import os
import io
import json
import unittest
from contextlib import redirect_stdout
from unittest.mock import patch

import main
from core.config_loader import AppConfig
from core.exceptions import TrackerRMSError
from core.sync import SyncResult


class TestSyncCommand(unittest.TestCase):

    def setUp(self):
        self.config = AppConfig()
        patcher = patch("main.load_config", return_value=self.config)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_access_token_required(self):
        with patch.dict(os.environ, {}, clear=True):
            self.assertEqual(main.main(["sync"]), 2)

    @patch("main.run_sync")
    def test_prints_results(self, mock_run_sync):
        mock_run_sync.return_value = {"jobs": SyncResult(created=1).to_dict()}
        out = io.StringIO()

        with redirect_stdout(out):
            code = main.main(["sync", "--stage", "jobs", "--access-token", "tok"])

        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out.getvalue())["jobs"]["created"], 1)
        mock_run_sync.assert_called_once_with(self.config, "jobs", "tok", None, False)

    @patch("main.run_sync")
    def test_access_token_from_environment(self, mock_run_sync):
        mock_run_sync.return_value = {}
        with patch.dict(os.environ, {"HUBSPOT_ACCESS_TOKEN": "env-tok"}):
            with redirect_stdout(io.StringIO()):
                main.main(["sync", "--ensure-properties", "--api-key", "k"])
        mock_run_sync.assert_called_once_with(self.config, "full", "env-tok", "k", True)

    @patch("main.run_sync")
    def test_record_errors_give_exit_code_one(self, mock_run_sync):
        mock_run_sync.return_value = {"jobs": SyncResult(errors=2).to_dict()}
        with redirect_stdout(io.StringIO()):
            self.assertEqual(main.main(["sync", "--access-token", "tok"]), 1)

    @patch("main.run_sync", side_effect=TrackerRMSError("TrackerRMS API key is not configured"))
    def test_integration_error(self, _run_sync):
        self.assertEqual(main.main(["sync", "--access-token", "tok"]), 1)


class TestRunSync(unittest.TestCase):

    @patch("main.SyncService")
    @patch("main.TrackerRMSClient")
    @patch("main.HubSpotService")
    def test_single_stage(self, mock_hubspot, mock_trackerrms, mock_sync_service):
        mock_sync_service.return_value.sync_placements.return_value = SyncResult(updated=4)
        mock_hubspot.return_value.ensure_custom_properties.return_value = ["trackerrms_margin"]

        results = main.run_sync(AppConfig(), "placements", "tok", "key", ensure_properties=True)

        self.assertEqual(results, {"placements": {"created": 0, "updated": 4, "errors": 0, "items": []}})
        mock_hubspot.assert_called_once_with("tok", base_url="https://api.hubapi.com", request_timeout_seconds=30)
        mock_hubspot.return_value.ensure_custom_properties.assert_called_once()
        mock_trackerrms.from_config.return_value.close.assert_called_once()

    @patch("main.SyncService")
    @patch("main.TrackerRMSClient")
    @patch("main.HubSpotService")
    def test_client_closed_on_failure(self, _hubspot, mock_trackerrms, mock_sync_service):
        mock_sync_service.return_value.full_sync.side_effect = TrackerRMSError("down", 503)

        with self.assertRaises(TrackerRMSError):
            main.run_sync(AppConfig(), "full", "tok")

        mock_trackerrms.from_config.return_value.close.assert_called_once()


class TestServeCommand(unittest.TestCase):

    def test_production_without_credentials_refuses_to_start(self):
        config = AppConfig(server={"environment": "production"})
        self.assertEqual(main.serve(config), 1)

    @patch("web.backend.app.main")
    def test_development_starts_server(self, mock_run_server):
        self.assertEqual(main.serve(AppConfig()), 0)
        mock_run_server.assert_called_once()


if __name__ == '__main__':
    unittest.main()
