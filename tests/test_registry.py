import pytest

from core.expressions import BOOLEAN, IntDomain
from core.registry import VariableRegistry, make_name
from exceptions.custom_errors import DuplicateNameError, InvalidDomainError, VariableNotFoundError


def test_lookup_returns_the_declared_handle():
    reg = VariableRegistry()
    x = reg.declare("x")
    n = reg.declare("n", IntDomain(0, 9))

    assert reg.lookup(x.name) is x
    assert reg.lookup("n") is n
    assert reg.get(("x",)) is x
    assert x.is_bool and not n.is_bool
    assert len(reg) == 2
    assert "x" in reg and "y" not in reg


def test_duplicate_name_is_rejected():
    reg = VariableRegistry()
    reg.declare("x")
    with pytest.raises(DuplicateNameError):
        reg.declare("x")
    with pytest.raises(DuplicateNameError):
        reg.declare("x", IntDomain(0, 1))


def test_duplicate_key_is_rejected():
    reg = VariableRegistry()
    reg.declare("a", key=("cell", 0, 0))
    with pytest.raises(DuplicateNameError) as excinfo:
        reg.declare("b", key=("cell", 0, 0))
    assert "'a'" in str(excinfo.value)


def test_unknown_name_or_key_raises():
    reg = VariableRegistry()
    with pytest.raises(VariableNotFoundError):
        reg.lookup("missing")
    with pytest.raises(VariableNotFoundError):
        reg.get(("missing", 1))


def test_declare_family_generates_names_and_coordinate_keys():
    reg = VariableRegistry()
    family = reg.declare_family("c", [(r, c) for r in range(2) for c in range(3)], BOOLEAN)

    assert len(family) == 6
    assert family[(1, 2)].name == "c_1_2"
    assert reg.get(("c", 1, 2)) is family[(1, 2)]
    assert reg.lookup("c_0_1") is family[(0, 1)]
    assert make_name("cpu", (7,)) == "cpu_7"


def test_invalid_integer_domain():
    with pytest.raises(InvalidDomainError):
        IntDomain(3, 1)
    # also usable as a plain ValueError by callers
    with pytest.raises(ValueError):
        IntDomain(1, 0)


def test_registry_only_owns_its_own_handles():
    first, second = VariableRegistry(), VariableRegistry()
    x1 = first.declare("x")
    x2 = second.declare("x")

    assert first.owns(x1)
    assert not first.owns(x2)
    assert x1 != x2
