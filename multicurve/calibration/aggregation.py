"""
Flattening and reassembly of parameter vectors across several parameter objects.
"""

import logging
import warnings
from typing import Dict, Iterable, Iterator, Optional, Sequence

import numpy as np

from .exceptions import CloneNotSupportedError
from .parameter import MutableParameterObject, ParameterObject

logger = logging.getLogger(__name__)


class ParameterAggregation:
    """
    Ordered view over a set of parameter objects acting as one parameter vector.

    The aggregated vector is the concatenation of the members' vectors in
    insertion order; members without parameters contribute nothing. The
    aggregation is a transient helper of a single calibration and cannot be
    cloned.
    """

    def __init__(self, parameters: Iterable[ParameterObject] = ()):
        # dict keeps insertion order and uniqueness
        self._members: Dict[ParameterObject, None] = {}
        for parameter_object in parameters:
            self.add(parameter_object)

    def add(self, parameter_object: ParameterObject) -> None:
        self._members[parameter_object] = None

    def remove(self, parameter_object: ParameterObject) -> None:
        self._members.pop(parameter_object, None)

    def __iter__(self) -> Iterator[ParameterObject]:
        return iter(self._members)

    def __len__(self) -> int:
        return len(self._members)

    def __contains__(self, parameter_object) -> bool:
        return parameter_object in self._members

    def get_parameter(self) -> Optional[np.ndarray]:
        """Concatenated parameter vector of all members, or None if none has parameters."""
        vectors = [
            np.asarray(vector, dtype=float)
            for vector in (member.get_parameter() for member in self._members)
            if vector is not None
        ]
        if not vectors:
            return None
        return np.concatenate(vectors)

    def get_objects_to_modify_for_parameter(
        self, parameter: Sequence[float]
    ) -> Dict[ParameterObject, np.ndarray]:
        """
        Split ``parameter`` into one vector per member.

        Args:
            parameter: Aggregated parameter vector

        Returns:
            Mapping member -> new parameter vector for that member (a fresh array)

        Raises:
            ValueError: If the length of ``parameter`` does not match the aggregated length
        """
        parameter = np.asarray(parameter, dtype=float)
        current = [(member, member.get_parameter()) for member in self._members]
        expected_length = sum(len(vector) for _, vector in current if vector is not None)
        if len(parameter) != expected_length:
            raise ValueError(
                f"Parameter vector has length {len(parameter)}, "
                f"the aggregation expects {expected_length}"
            )

        objects_to_modify = {}
        parameter_index = 0
        for member, vector in current:
            if vector is None:
                continue
            new_vector = np.array(vector, dtype=float, copy=True)
            new_vector[:] = parameter[parameter_index:parameter_index + len(new_vector)]
            parameter_index += len(new_vector)
            objects_to_modify[member] = new_vector
        return objects_to_modify

    def set_parameter(self, parameter: Sequence[float]) -> None:
        """Write ``parameter`` into the members in place. Deprecated.

        Only legacy mutable members support this; calibration uses
        :meth:`get_objects_to_modify_for_parameter` and cloning instead.
        """
        warnings.warn(
            "ParameterAggregation.set_parameter is deprecated; "
            "use get_objects_to_modify_for_parameter and clone the members",
            DeprecationWarning,
            stacklevel=2,
        )
        objects_to_modify = self.get_objects_to_modify_for_parameter(parameter)
        for member in objects_to_modify:
            if not isinstance(member, MutableParameterObject):
                raise CloneNotSupportedError(
                    f"{type(member).__name__} is immutable and does not support set_parameter"
                )
        for member, vector in objects_to_modify.items():
            member.set_parameter(vector)

    def get_clone_for_parameter(self, parameter):
        raise CloneNotSupportedError("ParameterAggregation cannot be cloned")
