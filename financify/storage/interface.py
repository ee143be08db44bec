"""
Abstract Data Source Interface

DESIGN DECISION: The dashboard reads its records through an abstract
source. This allows us to:
1. Load an exported state file today
2. Use built-in sample data for demos and tests
3. Plug in a real backend later without touching the summary logic

Sources are read-only. Editing accounts and transactions happens
elsewhere; the dashboard only reports on them.
"""

from abc import ABC, abstractmethod

from financify.models.finance import UserFinances


class DashboardDataSource(ABC):
    """
    Abstract interface for loading dashboard records.

    Any source (JSON file, database, API) must implement these methods.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short description of where the data comes from, for logs."""
        pass

    @abstractmethod
    async def load(self) -> UserFinances:
        """
        Load both dashboards and the display currency.

        Returns:
            The user's finances

        Raises:
            DataSourceError: If the data cannot be read or is invalid
        """
        pass


class DataSourceError(Exception):
    """Base exception for data source operations."""
    pass


class DataNotFoundError(DataSourceError):
    """The configured data file or record does not exist."""
    pass


class InvalidDataError(DataSourceError):
    """The data exists but does not match the expected shape."""
    pass
