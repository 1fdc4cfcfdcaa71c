"""Time provider abstraction for testable date handling.

All dates in this module are UTC. The nisab reference is stamped with the
UTC date of its last update, and household members with a UTC creation
timestamp.

The TimeProvider can be frozen for testing, so update stamps are
deterministic in tests.
"""
from datetime import date, timezone, datetime
from typing import Optional


class TimeProvider:
    """Provides the current date and time, allowing tests to freeze both.

    Usage:
        # Production: uses real UTC clock
        provider = TimeProvider()
        today = provider.today()

        # Testing: freeze to specific date
        provider = TimeProvider(frozen_date=date(2026, 2, 8))
        today = provider.today()  # Always returns 2026-02-08
        now = provider.now()      # 2026-02-08T00:00:00+00:00
    """

    _instance: Optional['TimeProvider'] = None

    def __init__(self, frozen_date: Optional[date] = None):
        """Initialize TimeProvider.

        Args:
            frozen_date: If provided, today() always returns this date and
                        now() returns its UTC midnight.
        """
        self._frozen_date = frozen_date

    def today(self) -> date:
        """Get current UTC date."""
        if self._frozen_date is not None:
            return self._frozen_date
        return datetime.now(timezone.utc).date()

    def now(self) -> datetime:
        """Get current UTC datetime (midnight of the frozen date if frozen)."""
        if self._frozen_date is not None:
            return datetime(
                self._frozen_date.year,
                self._frozen_date.month,
                self._frozen_date.day,
                tzinfo=timezone.utc,
            )
        return datetime.now(timezone.utc)

    @classmethod
    def get_default(cls) -> 'TimeProvider':
        """Get the default TimeProvider instance (singleton for production)."""
        if cls._instance is None:
            cls._instance = TimeProvider()
        return cls._instance

    @classmethod
    def set_default(cls, provider: 'TimeProvider') -> None:
        """Set the default TimeProvider (for testing)."""
        cls._instance = provider

    @classmethod
    def reset_default(cls) -> None:
        """Reset to production TimeProvider."""
        cls._instance = None


def get_today(time_provider: Optional[TimeProvider] = None) -> date:
    """Convenience function to get today's date."""
    if time_provider is None:
        time_provider = TimeProvider.get_default()
    return time_provider.today()


def get_now(time_provider: Optional[TimeProvider] = None) -> datetime:
    """Convenience function to get the current UTC datetime."""
    if time_provider is None:
        time_provider = TimeProvider.get_default()
    return time_provider.now()
