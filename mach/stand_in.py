"""Build stand-in objects that route every method call to a dispatcher.

A stand-in is an instance of a generated subclass of the capability class.
Every method the capability defines, abstract or not and including special
methods such as ``__getitem__`` or ``__call__``, is replaced by a forwarder,
so the stand-in passes ``isinstance`` checks and abstract base classes can
be instantiated. Object lifecycle hooks are left alone. ``__eq__``,
``__ne__``, ``__hash__``, ``__repr__`` and ``__str__`` are answered by the
dispatcher instead of being recorded.
"""

from __future__ import annotations

import functools
import inspect
import typing as t

from .invocation import MethodDescriptor

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .dispatcher import MockDispatcher

_DISPATCHER_ATTR: t.Final[str] = "_mach_dispatcher"

# Special methods that build, inspect or identify the stand-in itself.
_NOT_FORWARDED: t.Final = frozenset(
    {
        "__class_getitem__",
        "__del__",
        "__delattr__",
        "__dir__",
        "__eq__",
        "__getattr__",
        "__getattribute__",
        "__getstate__",
        "__hash__",
        "__init__",
        "__init_subclass__",
        "__ne__",
        "__new__",
        "__reduce__",
        "__reduce_ex__",
        "__repr__",
        "__setattr__",
        "__setstate__",
        "__str__",
        "__subclasshook__",
    }
)


def intercepted_methods(capability: type) -> dict[str, MethodDescriptor]:
    """Return descriptors for every method a stand-in must forward."""
    methods: dict[str, MethodDescriptor] = {}
    for name, func in inspect.getmembers(capability, inspect.isfunction):
        if name in _NOT_FORWARDED:
            continue
        if isinstance(inspect.getattr_static(capability, name), staticmethod):
            continue
        methods[name] = MethodDescriptor.from_function(capability, func)
    return methods


def _forwarder(method: MethodDescriptor) -> t.Callable[..., object]:
    def forward(self: object, *args: object, **kwargs: object) -> object:
        dispatcher = dispatcher_of(self)
        return dispatcher.handle(method, method.bind(self, args, kwargs))

    forward.__name__ = method.name
    forward.__qualname__ = f"{method.owner.__qualname__}.{method.name}"
    forward.__signature__ = method.signature  # type: ignore[attr-defined]
    return forward


def _identity_methods() -> dict[str, t.Callable[..., object]]:
    def __eq__(self: object, other: object) -> bool:  # noqa: N807
        return dispatcher_of(self).equals(other)

    def __ne__(self: object, other: object) -> bool:  # noqa: N807
        return not dispatcher_of(self).equals(other)

    def __hash__(self: object) -> int:  # noqa: N807
        return hash(id(dispatcher_of(self)))

    def __repr__(self: object) -> str:  # noqa: N807
        return dispatcher_of(self).display

    return {
        "__eq__": __eq__,
        "__ne__": __ne__,
        "__hash__": __hash__,
        "__repr__": __repr__,
        "__str__": __repr__,
    }


@functools.cache
def _stand_in_class(capability: type) -> type:
    namespace: dict[str, object] = {
        name: _forwarder(method)
        for name, method in intercepted_methods(capability).items()
    }
    namespace.update(_identity_methods())
    namespace["__module__"] = capability.__module__
    metaclass = type(capability)
    cls = metaclass(f"Mock{capability.__name__}", (capability,), namespace)
    # Abstract properties are not forwarded but must not block instantiation.
    if getattr(cls, "__abstractmethods__", None):
        cls.__abstractmethods__ = frozenset()
    return cls


def create_stand_in(capability: type, dispatcher: MockDispatcher) -> t.Any:
    """Return an instance of *capability* whose calls go to *dispatcher*.

    The capability's own ``__init__`` is not run.
    """
    if not inspect.isclass(capability):
        msg = f"capability must be a class, got {capability!r}"
        raise TypeError(msg)
    cls = _stand_in_class(capability)
    stand_in = object.__new__(cls)
    object.__setattr__(stand_in, _DISPATCHER_ATTR, dispatcher)
    dispatcher.stand_in = stand_in
    return stand_in


def dispatcher_of(stand_in: object) -> MockDispatcher:
    """Return the dispatcher backing *stand_in*."""
    try:
        return object.__getattribute__(stand_in, _DISPATCHER_ATTR)
    except AttributeError:
        msg = f"{type(stand_in).__name__} object is not a stand-in"
        raise TypeError(msg) from None


def is_stand_in(value: object) -> bool:
    """Return ``True`` when *value* was built by :func:`create_stand_in`."""
    try:
        object.__getattribute__(value, _DISPATCHER_ATTR)
    except AttributeError:
        return False
    return True


__all__ = ["create_stand_in", "dispatcher_of", "intercepted_methods", "is_stand_in"]
