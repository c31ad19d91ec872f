"""TrackerRMS -> HubSpot synchronization."""

from core.sync.service import SyncService, SyncResult

__all__ = ['SyncService', 'SyncResult']
