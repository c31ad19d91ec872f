#!/usr/bin/env python3
"""
Test suite configuration and utilities.

No external services are needed: TrackerRMS and HubSpot are replaced by
mocks and the web app is driven through FastAPI's TestClient.

    # Run all tests
    python -m pytest tests/ -v

    # Using unittest
    python -m unittest discover tests -v
"""
