# finstat/interfaces/statement_codec.py
from abc import ABC, abstractmethod
from typing import Any, Optional


class StatementCodec(ABC):
    """
    Contract for turning finstat values into text and back.

    Decoding must go through the same constructors as direct construction:
    a payload describing an inconsistent statement fails exactly as
    building that statement by hand would.
    """

    @abstractmethod
    def encode(self, obj: Any) -> str:
        """
        Encode a Period, Entity, TimeSeries, Account, statement or report.

        Raises:
            TypeError: if the object kind is not supported
        """
        ...

    @abstractmethod
    def decode(self, payload: str, numeric_type: Optional[type] = None) -> Any:
        """
        Decode a payload produced by `encode`.

        Args:
            payload: encoded text
            numeric_type: float or Decimal; None keeps the type recorded in the payload

        Raises:
            ValueError: malformed payload or failed constructor validation
        """
        ...
