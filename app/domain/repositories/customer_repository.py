"""Customer repository interface"""

from abc import ABC, abstractmethod


class ICustomerRepository(ABC):

    @abstractmethod
    async def upsert(self, email: str, name: str = "") -> int:
        """Create or refresh the customer row for ``email`` and return its id"""
        pass
