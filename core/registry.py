from typing import Any, Dict, Hashable, Iterable, Iterator, Optional, Tuple
import logging

from core.expressions import BOOLEAN, BoolDomain, Domain, IntDomain, Variable
from exceptions.custom_errors import DuplicateNameError, VariableNotFoundError

logger = logging.getLogger(__name__)


def make_name(prefix: str, key: Iterable[Any]) -> str:
    """Diagnostic name for a coordinate, e.g. ``make_name("c", (2, 3)) == "c_2_3"``."""
    return "_".join([prefix, *(str(k) for k in key)])


class VariableRegistry:
    """
    Allocates decision variables for one solver session.

    Variables are reachable two ways: by a coordinate key (the primary lookup
    used by builders, e.g. ``("queen", row, col)``) and by their generated
    name (used for diagnostics and logs). Both are unique within a registry
    and the registry only grows.
    """

    def __init__(self):
        self._by_name: Dict[str, Variable] = {}
        self._by_key: Dict[Tuple[Hashable, ...], Variable] = {}

    def declare(
        self, name: str, domain: Domain = BOOLEAN, key: Optional[Tuple[Hashable, ...]] = None
    ) -> Variable:
        """
        Declare a new variable.

        Args:
            name (str): Unique variable name.
            domain (Domain): `BOOLEAN` or an `IntDomain(lo, hi)`.
            key (tuple, optional): Coordinate key; defaults to ``(name,)``.

        Raises:
            DuplicateNameError: If the name or key is already declared.
        """
        if not isinstance(domain, (BoolDomain, IntDomain)):
            raise TypeError(f"Unsupported domain {domain!r} for variable '{name}'")
        key = (name,) if key is None else tuple(key)
        if name in self._by_name:
            raise DuplicateNameError(f"Variable '{name}' is already declared")
        if key in self._by_key:
            raise DuplicateNameError(
                f"Coordinate {key} is already bound to '{self._by_key[key].name}'"
            )
        var = Variable(name, domain, key)
        self._by_name[name] = var
        self._by_key[key] = var
        return var

    def declare_family(
        self, prefix: str, keys: Iterable[Tuple[Hashable, ...]], domain: Domain = BOOLEAN
    ) -> Dict[Tuple[Hashable, ...], Variable]:
        """Declare one variable per coordinate and return the coordinate-to-handle table."""
        family = {}
        for k in keys:
            k = tuple(k)
            family[k] = self.declare(make_name(prefix, k), domain, key=(prefix, *k))
        logger.debug(f"Declared {len(family)} '{prefix}' variables ({domain})")
        return family

    def lookup(self, name: str) -> Variable:
        try:
            return self._by_name[name]
        except KeyError:
            raise VariableNotFoundError(f"No variable named '{name}'") from None

    def get(self, key: Tuple[Hashable, ...]) -> Variable:
        try:
            return self._by_key[tuple(key)]
        except KeyError:
            raise VariableNotFoundError(f"No variable bound to coordinate {tuple(key)}") from None

    def owns(self, var: Variable) -> bool:
        """True if ``var`` is the handle this registry issued under its name."""
        return self._by_name.get(var.name) is var

    def __contains__(self, name: str) -> bool:
        return name in self._by_name

    def __len__(self) -> int:
        return len(self._by_name)

    def __iter__(self) -> Iterator[Variable]:
        return iter(self._by_name.values())
