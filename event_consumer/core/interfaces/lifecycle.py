"""
Lifecycle management interfaces for components that need startup/shutdown behavior.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Dict


class IStartable(ABC):
    """Interface for components that run until a termination trigger fires."""

    @abstractmethod
    async def start(self, cancelled: asyncio.Event, signals: 'asyncio.Queue[Any]') -> None:
        """
        Start the component and block until it terminates.

        Args:
            cancelled: Set by an ancestor to request shutdown
            signals: Source of process termination signals

        Raises:
            Exception: If the component fails to start.
        """
        pass


class IStoppable(ABC):
    """Interface for components that can be stopped."""

    @abstractmethod
    async def stop(self) -> None:
        """
        Stop the component gracefully.

        Must be safe to call more than once and concurrently with an
        internally triggered shutdown.
        """
        pass


class IHealthCheckable(ABC):
    """Interface for components that can report their health status."""

    @abstractmethod
    async def check_health(self) -> Dict[str, Any]:
        """
        Check the health status of the component.

        Returns:
            Dict containing health information with at least:
            - 'healthy': bool indicating if component is healthy
            - 'status': str describing current status
            - 'details': Dict with additional health details

        Example:
            {
                'healthy': True,
                'status': 'subscribed',
                'details': {
                    'messages_processed': 42,
                    'messages_failed': 1,
                    'termination_cause': None
                }
            }
        """
        pass
