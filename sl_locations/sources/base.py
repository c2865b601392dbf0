"""Base class for location record providers."""
from abc import ABC, abstractmethod
from typing import List
from sl_locations.core.models import FlatRecord


class RecordSource(ABC):
    """Base class for providers of flat location records."""

    @abstractmethod
    def load_records(self) -> List[FlatRecord]:
        """
        Load every usable record.

        Returns:
            Records with sanitized fields, each having a region and a town

        Raises:
            FormatError: If the source holds no usable records
        """
        pass

    @abstractmethod
    def get_name(self) -> str:
        """Get provider name."""
        pass
