"""Process management infrastructure."""

from motion_notify.infrastructure.process.spawner import SubprocessSpawner

__all__ = ["SubprocessSpawner"]
