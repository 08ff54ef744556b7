"""Registration and creation of effects by name."""

from __future__ import annotations

import importlib
import inspect
import logging
from typing import Callable, Dict, FrozenSet, Iterable, Optional, Type

from .effects.base import BaseEffect
from .effects.builtin import BUILTIN_EFFECTS
from .errors import EffectError, UnknownEffectError

LOGGER = logging.getLogger(__name__)

EffectConstructor = Callable[[], BaseEffect]


class EffectRegistry:
    """Maps effect names to zero-argument constructors.

    The first constructor registered under a name wins; later registrations
    under the same name are ignored.
    """

    def __init__(
        self,
        effects: Optional[Iterable[Type[BaseEffect]]] = None,
        *,
        include_builtins: bool = True,
    ) -> None:
        self._constructors: Dict[str, EffectConstructor] = {}
        if include_builtins:
            for effect_cls in BUILTIN_EFFECTS:
                self.register_effect(effect_cls)
        if effects:
            for effect_cls in effects:
                self.register_effect(effect_cls)

    def register(self, name: str, constructor: EffectConstructor) -> bool:
        if name in self._constructors:
            LOGGER.debug("Effect '%s' already registered; keeping existing entry", name)
            return False
        self._constructors[name] = constructor
        LOGGER.debug("Registered effect '%s'", name)
        return True

    def register_effect(self, effect_cls: Type[BaseEffect]) -> bool:
        """Register a :class:`BaseEffect` subclass under its own ``name``."""

        if not effect_cls.name:
            raise EffectError(f"Effect class '{effect_cls.__name__}' must define a name")
        return self.register(effect_cls.name, effect_cls)

    def unregister(self, name: str) -> bool:
        if self._constructors.pop(name, None) is None:
            return False
        LOGGER.debug("Unregistered effect '%s'", name)
        return True

    def create(self, name: str) -> BaseEffect:
        try:
            constructor = self._constructors[name]
        except KeyError as exc:
            raise UnknownEffectError(f"Effect '{name}' is not registered.") from exc

        effect = constructor()
        if not isinstance(effect, BaseEffect):
            raise EffectError(
                f"Constructor for effect '{name}' returned unexpected object: {effect!r}"
            )
        return effect

    def list_names(self) -> FrozenSet[str]:
        return frozenset(self._constructors)

    def __contains__(self, name: object) -> bool:
        return name in self._constructors

    def __len__(self) -> int:
        return len(self._constructors)


def load_effect_class(spec: str) -> Type[BaseEffect]:
    """Import an effect class from a ``module:ClassName`` specification."""

    if ":" not in spec:
        raise ValueError("Effect specification must be in 'module:ClassName' format")
    module_name, class_name = spec.split(":", 1)
    module = importlib.import_module(module_name)
    try:
        effect_cls = getattr(module, class_name)
    except AttributeError as exc:
        raise ValueError(f"Effect class '{class_name}' not found in module '{module_name}'") from exc
    if not (inspect.isclass(effect_cls) and issubclass(effect_cls, BaseEffect)):
        raise TypeError(f"Effect '{spec}' must inherit from BaseEffect")
    return effect_cls


__all__ = ["EffectConstructor", "EffectRegistry", "load_effect_class"]
