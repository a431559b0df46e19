import pytest

from wirebox import ClassNotFoundError, Container, DependencyStack, RecursiveDependencyError


class ARecursive:
    def __init__(self, a: "ARecursive"):
        self.a = a


class Left:
    def __init__(self, right: "Right"):
        self.right = right


class Right:
    def __init__(self, left: Left):
        self.left = left


class Leaf: ...


class Shared:
    def __init__(self, first: Leaf, second: Leaf):
        self.first = first
        self.second = second


@pytest.fixture
def container():
    return Container()


def test_self_dependency_raises(container):
    with pytest.raises(RecursiveDependencyError) as ctx:
        container.resolve(ARecursive)

    assert ctx.value.identifier is ARecursive
    assert ctx.value.cycle == (ARecursive, ARecursive)


def test_mutual_dependency_raises(container):
    with pytest.raises(RecursiveDependencyError) as ctx:
        container.resolve(Left)

    assert ctx.value.cycle == (Left, Right, Left)


def test_binding_cycle_raises(container):
    container.bind_class("x", "y")
    container.bind_class("y", "x")

    with pytest.raises(RecursiveDependencyError) as ctx:
        container.resolve("x")

    assert str(ctx.value) == "Identifier is being resolved recursively: x (x -> y -> x)"


def test_alias_into_binding_cycle_raises(container):
    container.bind_factory("service", lambda c: c.resolve("svc"))
    container.alias("service", "svc")

    with pytest.raises(RecursiveDependencyError) as ctx:
        container.resolve("svc")

    assert ctx.value.identifier == "service"


def test_binding_identifier_to_itself_is_recursive(container):
    container.bind_class(Leaf, Leaf)

    with pytest.raises(RecursiveDependencyError):
        container.resolve(Leaf)


def test_same_dependency_twice_in_one_constructor_is_not_a_cycle(container):
    shared = container.resolve(Shared)

    assert isinstance(shared.first, Leaf)
    assert isinstance(shared.second, Leaf)


def test_container_is_usable_after_recursive_dependency(container):
    container.bind_class("x", "y")
    container.bind_class("y", "x")

    with pytest.raises(RecursiveDependencyError):
        container.resolve("x")

    assert len(container._stack) == 0  # noqa: SLF001

    container.bind_instance("y", "value")
    assert container.resolve("x") == "value"


def test_failed_resolution_does_not_leave_stale_entries(container):
    def boom(_):
        raise ClassNotFoundError("boom")

    container.bind_factory("boom", boom)

    for _ in range(2):
        with pytest.raises(ClassNotFoundError):
            container.resolve("boom")

    assert len(container._stack) == 0  # noqa: SLF001


def test_dependency_stack_pops_on_exit():
    stack = DependencyStack()

    with stack.entered("outer"):
        assert "outer" in stack
        with stack.entered("inner"):
            assert len(stack) == 2

    assert len(stack) == 0


def test_dependency_stack_pops_on_error():
    stack = DependencyStack()

    with pytest.raises(ValueError), stack.entered("outer"):
        raise ValueError

    assert "outer" not in stack


def test_dependency_stack_rejects_repeated_identifier():
    stack = DependencyStack()

    with stack.entered("outer"), pytest.raises(RecursiveDependencyError) as ctx:
        with stack.entered("outer"):
            pass

    assert ctx.value.cycle == ("outer", "outer")
    assert len(stack) == 0
