import os
import sys
import json
import logging
import argparse

from core.config_loader import load_config, validate_config
from core.exceptions import ConfigurationError, IntegrationError
from core.hubspot import HubSpotService
from core.scoring import ScoringService
from core.sync import SyncService
from core.trackerrms import TrackerRMSClient

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

SYNC_STAGES = ['full', 'jobs', 'placements', 'revenue']


def serve(config) -> int:
    """Validate configuration and run the web server."""
    try:
        missing = validate_config(config)
    except ConfigurationError as e:
        logger.error(f"Invalid configuration - cannot start in production mode: {e}")
        return 1

    if missing:
        logger.warning(f"Configuration incomplete - some features may not work (missing: {', '.join(missing)})")

    from web.backend.app import main as run_server
    run_server()
    return 0


def run_sync(config, stage: str, access_token: str, api_key: str = None, ensure_properties: bool = False) -> dict:
    """
    One-shot sync from TrackerRMS into a HubSpot portal.

    Returns:
        Sync results keyed by stage.
    """
    hubspot = HubSpotService(
        access_token,
        base_url=config.hubspot.base_url,
        request_timeout_seconds=config.hubspot.request_timeout_seconds
    )
    trackerrms = TrackerRMSClient.from_config(config.trackerrms, api_key)
    sync_service = SyncService(hubspot, trackerrms, ScoringService(config.scoring.weights))

    try:
        if ensure_properties:
            failed = hubspot.ensure_custom_properties()
            if failed:
                logger.warning(f"Could not create deal properties: {', '.join(failed)}")

        if stage == 'full':
            results = sync_service.full_sync()
        elif stage == 'jobs':
            results = {'jobs': sync_service.sync_jobs()}
        elif stage == 'placements':
            results = {'placements': sync_service.sync_placements()}
        else:
            results = {'revenue': sync_service.sync_revenue()}
    finally:
        trackerrms.close()

    return {name: result.to_dict() for name, result in results.items()}


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="TrackerRMS Revenue Attribution")
    parser.add_argument('--config', type=str, default='config.yaml', help='Path to config.yaml')
    subparsers = parser.add_subparsers(dest='command', required=True)

    subparsers.add_parser('serve', help='Run the web server')

    sync_parser = subparsers.add_parser('sync', help='Run a one-shot TrackerRMS -> HubSpot sync')
    sync_parser.add_argument('--stage', type=str, choices=SYNC_STAGES, default='full',
                             help='What to sync: full (default), jobs, placements or revenue')
    sync_parser.add_argument('--access-token', type=str, default=os.environ.get('HUBSPOT_ACCESS_TOKEN'),
                             help='HubSpot access token (default: $HUBSPOT_ACCESS_TOKEN)')
    sync_parser.add_argument('--api-key', type=str, default=None,
                             help='TrackerRMS API key (default: trackerrms.api_key from config)')
    sync_parser.add_argument('--ensure-properties', action='store_true',
                             help='Create the TrackerRMS deal properties in HubSpot first')

    args = parser.parse_args(argv)
    config = load_config(args.config)
    logging.getLogger().setLevel(config.logging.level.upper())

    if args.command == 'serve':
        return serve(config)

    if not args.access_token:
        logger.error("A HubSpot access token is required (--access-token or HUBSPOT_ACCESS_TOKEN)")
        return 2

    logger.info(f"Starting {args.stage} sync")
    try:
        results = run_sync(config, args.stage, args.access_token, args.api_key, args.ensure_properties)
    except IntegrationError as e:
        logger.error(f"Sync failed: {e}")
        return 1

    print(json.dumps(results, indent=2, default=str))
    return 1 if any(r['errors'] for r in results.values()) else 0


if __name__ == "__main__":
    sys.exit(main())
