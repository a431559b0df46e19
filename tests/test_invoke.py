import functools
import unittest
from unittest.mock import MagicMock

import pytest

from wirebox import Container, DependencyResolutionError, RecursiveDependencyError


class A: ...


class B:
    def __init__(self, a: A):
        self.a = a


def test_invoke_zero_parameter_callable():
    c = Container()

    assert c.invoke(lambda: "value") == "value"


def test_invoke_zero_parameter_callable_ignores_arguments():
    c = Container()

    assert c.invoke(lambda: "value", "ignored", key="ignored") == "value"


def test_invoke_zero_parameter_callable_does_not_introspect_further():
    c = Container()
    c.resolve = MagicMock()

    c.invoke(lambda: None)

    c.resolve.assert_not_called()


def test_invoke_resolves_dependencies():
    c = Container()

    def handler(b: B) -> A:
        return b.a

    assert isinstance(c.invoke(handler), A)


def test_invoke_uses_bindings():
    c = Container()
    a = A()
    c.bind_instance(A, a)

    def handler(b: B) -> A:
        return b.a

    assert c.invoke(handler) is a


def test_invoke_unresolvable_dependency_raises():
    c = Container()

    def greet(message: str) -> str:
        return message

    with pytest.raises(DependencyResolutionError) as ctx:
        c.invoke(greet)
    assert ctx.value.parameter.name == "message"
    assert "greet" in str(ctx.value)


def test_invoke_untyped_lambda_raises():
    c = Container()

    with pytest.raises(DependencyResolutionError):
        c.invoke(lambda message: message)


def test_invoke_passes_explicit_arguments():
    c = Container()

    def handler(request: str, b: B):
        return request, b

    request, b = c.invoke(handler, "GET /")

    assert request == "GET /"
    assert isinstance(b.a, A)


def test_invoke_complete_argument_list_bypasses_autowiring():
    c = Container()

    def handler(a: A, b: B):
        return a, b

    assert c.invoke(handler, 1, 2) == (1, 2)


def test_invoke_keyword_arguments():
    c = Container()

    def handler(b: B, *, verbose: bool = False, tag: str):
        return b, verbose, tag

    b, verbose, tag = c.invoke(handler, tag="t", verbose=True)

    assert isinstance(b, B)
    assert verbose is True
    assert tag == "t"


def test_invoke_recursive_dependency_raises():
    c = Container()

    def handler(a: A):
        return a

    c.bind_factory(A, lambda container: container.invoke(handler))

    with pytest.raises(RecursiveDependencyError):
        c.invoke(handler)


class TestInvokeCallableKinds(unittest.TestCase):
    cont: Container

    def setUp(self):
        self.cont = Container()

    def test_bound_method(self):
        class Controller:
            def show(self, b: B) -> B:
                return b

        assert isinstance(self.cont.invoke(Controller().show), B)

    def test_callable_instance(self):
        class Handler:
            def __call__(self, b: B) -> A:
                return b.a

        assert isinstance(self.cont.invoke(Handler()), A)

    def test_partial(self):
        def handler(prefix: str, b: B):
            return prefix, b

        prefix, b = self.cont.invoke(functools.partial(handler, "p"))

        assert prefix == "p"
        assert isinstance(b, B)

    def test_class(self):
        assert isinstance(self.cont.invoke(B).a, A)
