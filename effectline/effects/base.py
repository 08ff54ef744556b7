"""Common interface implemented by every effect."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ..errors import InvalidParameterError
from ..items import Item
from ..requests import EffectParameter


class BaseEffect(ABC):
    """Base class used by the processor to apply an effect to an item.

    Subclasses set :attr:`name` to the key they are registered under and
    implement :meth:`apply`. Validation problems are raised as
    :class:`~effectline.errors.InvalidParameterError`; ``apply`` returns
    ``True`` once the item has been updated.
    """

    name: str = ""

    @abstractmethod
    def apply(self, item: Item, parameter: Optional[EffectParameter] = None) -> bool:
        """Append this effect's description to ``item``."""

    def require_int(self, parameter: Optional[EffectParameter], label: str) -> int:
        """Return the parameter's integer value or raise ``InvalidParameterError``."""

        value = None if parameter is None else parameter.value
        # bool is an int subclass but never a valid size
        if not isinstance(value, int) or isinstance(value, bool):
            raise InvalidParameterError(
                f"{type(self).__name__} requires an integer parameter for {label}."
            )
        return value

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


__all__ = ["BaseEffect"]
