"""
Capability interface of objects carrying a calibratable parameter vector.
"""

from typing import Optional, Protocol, Sequence, runtime_checkable

import numpy as np


@runtime_checkable
class ParameterObject(Protocol):
    """Protocol for objects exposing a parameter vector and cloning for a new one.

    Implementations are immutable: ``get_clone_for_parameter`` returns a new
    object and leaves ``self`` untouched.
    """

    def get_parameter(self) -> Optional[np.ndarray]:
        """Current parameter vector, or None if the object has no free parameters."""
        ...

    def get_clone_for_parameter(self, parameter: Optional[Sequence[float]]) -> "ParameterObject":
        """New object with ``parameter`` as its parameter vector."""
        ...


@runtime_checkable
class MutableParameterObject(ParameterObject, Protocol):
    """Legacy parameter object supporting in-place writes."""

    def set_parameter(self, parameter: Sequence[float]) -> None:
        ...
