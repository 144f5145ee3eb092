from jitsi_bridge.services.platform.base import EventPublisher, KVStore, PlatformAPI

__all__ = ["EventPublisher", "KVStore", "PlatformAPI"]
