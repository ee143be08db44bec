"""Data source package."""

from financify.storage.interface import (
    DashboardDataSource,
    DataNotFoundError,
    DataSourceError,
    InvalidDataError,
)
from financify.storage.json_file import JsonFileDataSource
from financify.storage.sample import SampleDataSource, build_sample_finances

__all__ = [
    "DashboardDataSource",
    "DataNotFoundError",
    "DataSourceError",
    "InvalidDataError",
    "JsonFileDataSource",
    "SampleDataSource",
    "build_sample_finances",
]
