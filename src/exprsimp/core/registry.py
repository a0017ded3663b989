import collections
import dataclasses
import functools
from abc import ABCMeta
from typing import Any, Callable, ClassVar, Generic, TypeVar, cast

E = TypeVar("E")
_R = TypeVar("_R", bound="Registrant")


class Registry(ABCMeta):
    """Metaclass giving every direct ``Registrant`` subclass its own registry.

    Sibling hierarchies (e.g. two unrelated plugin families) never see each
    other's members.
    """

    def __init__(
        self,
        name: str,
        bases: tuple[type, ...],
        attrs: dict[str, Any],
    ):
        super().__init__(name, bases, attrs)

        if name == "Registrant":
            return

        if Registrant in bases:
            self.registry: dict[str, type[Any]] = {}


class Registrant(metaclass=Registry):
    """Self-registering resource."""

    registrant_name: ClassVar[str]
    """Name to register the resource under."""

    registry: ClassVar[dict[str, type[Any]]] = {}
    """Registry of registered resources."""

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        # Register *cls* into every ancestor that directly derives from
        # Registrant (the root Registrant itself keeps an empty registry).
        visited = set()
        to_visit = list(cls.__bases__)
        while to_visit:
            base = to_visit.pop()
            if base in visited:
                continue
            visited.add(base)
            if Registrant in base.__bases__:
                base.register(cls)
            else:
                to_visit.extend(base.__bases__)

    @staticmethod
    def keyof(kls: type) -> str:
        return getattr(kls, "registrant_name", kls.__name__)

    @classmethod
    def normalize_key(cls, key: str) -> str:
        return key.lower()

    @classmethod
    def register(cls, alt: type[Any]):
        """Register a subclass under its (case-insensitive) name."""
        if alt is cls and "registry" in cls.__dict__:
            return
        cls.registry[cls.normalize_key(cls.keyof(alt))] = alt

    @classmethod
    def get(cls, name: str) -> _R:  # type: ignore
        """Look up a registered subclass by name; KeyError if unknown."""
        return cast(_R, cls.registry[cls.normalize_key(name)])

    @classmethod
    def find(cls, name: str) -> _R | None:  # type: ignore
        """Like get(), but returns None for an unknown name."""
        try:
            return cls.get(name)
        except KeyError:
            return None

    @classmethod
    def all(cls) -> list[type[Any]]:
        return list(cls.registry.values())


@dataclasses.dataclass
class EventEmitter(Generic[E]):
    _listeners: collections.defaultdict[E, set[Callable]] = dataclasses.field(
        default_factory=lambda: collections.defaultdict(set), init=False
    )

    def on(self, event: E, handler: Callable | None = None):
        """Register an event handler for the given event."""
        if handler:
            self._listeners[event].add(handler)
            return handler

        @functools.wraps(self.on)
        def decorator(func):
            self.on(event, func)
            return func

        return decorator

    def remove(self, event: E, handler: Callable):
        self._listeners[event].discard(handler)

    def clear(self):
        self._listeners.clear()

    def emit(self, event: E, *args, **kwargs):
        for handler in list(self._listeners[event]):
            handler(*args, **kwargs)
