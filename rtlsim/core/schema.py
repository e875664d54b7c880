"""Module schema compiler.

A module declares its fields once, in a static ``fields`` descriptor on the
class. Each entry names the field, gives it a role tag and says what it
holds::

    @module
    class Adder(Module):
        fields = (
            Field("x", Role.INPUT, Signal[int]),
            Field("y", Role.INPUT, Signal[int]),
            Field("sum", Role.OUTPUT, Signal[int]),
        )

        def settle(self) -> None:
            self.sum.drive(self.x.sample() + self.y.sample())

Compiling the class attaches the wiring surface:
- drive_<f>(value) for every input field
- sample_<f>() for every output field
- clock_edge(), forwarding to every clocked field in declaration order
- reset(), resetting every owned field

``memory`` and ``submodule`` fields are accepted and owned but get no
accessors and no edge forwarding. Untagged fields (role None) are private.

All checks run while the class is being compiled. A malformed declaration
raises SchemaError and nothing is attached to the class.
"""

from __future__ import annotations

import inspect
import keyword
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Union, get_args, get_origin

from rtlsim.core.exceptions import SchemaError
from rtlsim.core.register import Register
from rtlsim.core.registry import register_module
from rtlsim.core.signal import Signal, VecSignal, type_matches

logger = logging.getLogger(__name__)

_MISSING: Any = object()

_WRAPPERS = (Signal, Register, VecSignal)

# Marks functions attached by the compiler so a recompiled subclass may replace them
_GENERATED = "__rtlsim_generated__"


class Role(str, Enum):
    """Closed vocabulary of field role tags."""

    INPUT = "input"
    OUTPUT = "output"
    CLOCKED = "clocked"
    MEMORY = "memory"
    SUBMODULE = "submodule"

    @classmethod
    def parse(cls, value: Union["Role", str, None]) -> Optional["Role"]:
        """Normalize a tag. None means the field is private.

        Raises:
            ValueError: If value is not one of the role tags
        """
        if value is None or isinstance(value, Role):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            allowed = ", ".join(role.value for role in cls)
            raise ValueError(f"unknown role '{value}' (expected one of: {allowed})") from None


@dataclass(frozen=True)
class Field:
    """One entry of a module's field descriptor.

    Args:
        name: Attribute name of the field on module instances
        role: Role tag, its string form, or None for a private field
        kind: Signal[T], Register[T], VecSignal[T], or a Module subclass
        reset: Initial committed value (Register fields only, required)
        width: Number of elements (VecSignal fields only, required)
    """

    name: str
    role: Union[Role, str, None]
    kind: Any
    reset: Any = _MISSING
    width: Optional[int] = None


@dataclass(frozen=True)
class FieldSpec:
    """A validated field: role resolved, wrapper and value type extracted."""

    name: str
    role: Optional[Role]
    wrapper: type
    inner_type: Any
    reset: Any = _MISSING
    width: Optional[int] = None

    @property
    def is_module(self) -> bool:
        return self.wrapper not in _WRAPPERS

    def build(self, path: str, override: Any = _MISSING) -> Any:
        """Instantiate the field for one module instance.

        Args:
            path: Hierarchical name, used in error messages
            override: Initial value for a Register, or a mapping of
                constructor arguments for a nested module
        """
        if self.wrapper is Signal:
            return Signal(self.inner_type, name=path)
        if self.wrapper is VecSignal:
            return VecSignal(self.width, self.inner_type, name=path)
        if self.wrapper is Register:
            value = self.reset if override is _MISSING else override
            return Register(value, self.inner_type, name=path)

        kwargs = {} if override is _MISSING else dict(override)
        if isinstance(self.wrapper, type) and issubclass(self.wrapper, Module):
            return self.wrapper(_path=path, **kwargs)
        return self.wrapper(**kwargs)


@dataclass(frozen=True)
class ModuleSchema:
    """Compiled field schema of one module class."""

    module: str
    fields: tuple[FieldSpec, ...]

    def by_role(self, role: Optional[Role]) -> tuple[FieldSpec, ...]:
        return tuple(spec for spec in self.fields if spec.role is role)

    @property
    def inputs(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.by_role(Role.INPUT))

    @property
    def outputs(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.by_role(Role.OUTPUT))

    @property
    def clocked(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.by_role(Role.CLOCKED))

    def get(self, name: str) -> Optional[FieldSpec]:
        for spec in self.fields:
            if spec.name == name:
                return spec
        return None


class _Withdrawn:
    """Hides a port accessor inherited from a parent whose schema had that port."""

    def __init__(self, name: str):
        self.name = name

    def __get__(self, instance: Any, owner: Optional[type] = None) -> Any:
        owner_name = owner.__qualname__ if owner is not None else "module"
        raise AttributeError(f"'{owner_name}' has no port accessor '{self.name}'")


def _visible(cls: type, names: list[str]) -> list[str]:
    return [name for name in names if not isinstance(inspect.getattr_static(cls, name, None), _Withdrawn)]


class _ModuleMeta(type):
    def __dir__(cls) -> list[str]:
        return _visible(cls, list(super().__dir__()))


class Module(metaclass=_ModuleMeta):
    """Base class for simulated hardware modules.

    Subclasses declare ``fields`` and are compiled with @module. The
    constructor builds every declared field. Keyword arguments override
    the initial value of Register fields, or pass constructor arguments
    (as a mapping) to nested modules.

    Subclasses implement settle(); clock_edge() and reset() are generated.
    """

    fields: tuple[Field, ...] = ()

    def __init__(self, *, _path: Optional[str] = None, **params: Any):
        cls = type(self)
        schema: Optional[ModuleSchema] = getattr(cls, "__schema__", None)
        if schema is None:
            raise SchemaError(cls.__qualname__, "class was not compiled; decorate it with @module")

        overridable = {spec.name for spec in schema.fields if spec.wrapper is Register or spec.is_module}
        for key in params:
            if key not in overridable:
                raise TypeError(f"{cls.__name__}() got an unexpected keyword argument '{key}'")

        self._path = _path or cls.__name__
        for spec in schema.fields:
            member = spec.build(f"{self._path}.{spec.name}", params.get(spec.name, _MISSING))
            setattr(self, spec.name, member)

    def settle(self) -> None:
        """Combinational pass (override in subclasses)."""
        raise NotImplementedError("settle() must be implemented by subclasses")

    def __repr__(self) -> str:
        schema: Optional[ModuleSchema] = getattr(type(self), "__schema__", None)
        names = [spec.name for spec in schema.fields] if schema else []
        body = ", ".join(f"{name}={getattr(self, name, None)!r}" for name in names)
        return f"{type(self).__name__}({body})"

    def __dir__(self) -> list[str]:
        return _visible(type(self), list(super().__dir__()))


# Private helpers -------------------------------------------------------


def _resolve_kind(module_name: str, decl: Field) -> tuple[type, Any]:
    """Split a declared kind into (wrapper class, value type)."""
    kind = decl.kind
    origin = get_origin(kind)
    if origin in _WRAPPERS:
        args = get_args(kind)
        if len(args) != 1:
            raise SchemaError(
                module_name,
                f"'{origin.__name__}' takes exactly one type parameter",
                field=decl.name,
            )
        return origin, args[0]

    if kind in _WRAPPERS:
        raise SchemaError(
            module_name,
            f"'{kind.__name__}' needs a value type, e.g. {kind.__name__}[int]",
            field=decl.name,
        )

    if isinstance(kind, type) and issubclass(kind, Module):
        if getattr(kind, "__schema__", None) is None:
            raise SchemaError(
                module_name,
                f"nested module {kind.__qualname__} was not compiled with @module",
                field=decl.name,
            )
        return kind, kind

    if isinstance(kind, type) and callable(getattr(kind, "clock_edge", None)):
        return kind, kind

    raise SchemaError(
        module_name,
        f"field must be Signal[T], Register[T], VecSignal[T] or a Module, got {kind!r}",
        field=decl.name,
    )


def _check_role(module_name: str, name: str, role: Optional[Role], wrapper: type) -> None:
    if role in (Role.INPUT, Role.OUTPUT):
        if wrapper not in (Signal, VecSignal):
            raise SchemaError(
                module_name,
                f"{role.value} fields must be Signal[T] or VecSignal[T], got {wrapper.__name__}",
                field=name,
            )
    elif role is Role.CLOCKED:
        if wrapper in (Signal, VecSignal):
            raise SchemaError(
                module_name,
                "clocked fields must be a Register or implement clock_edge()",
                field=name,
            )
    elif role is Role.SUBMODULE:
        if not issubclass(wrapper, Module):
            raise SchemaError(module_name, "submodule fields must be a Module", field=name)


def _check_parameters(module_name: str, decl: Field, wrapper: type, inner_type: Any) -> None:
    if wrapper is Register:
        if decl.reset is _MISSING:
            raise SchemaError(module_name, "Register fields need a reset value", field=decl.name)
        if not type_matches(decl.reset, inner_type):
            raise SchemaError(
                module_name,
                f"reset value {decl.reset!r} is not a {inner_type.__name__}",
                field=decl.name,
            )
    elif decl.reset is not _MISSING:
        raise SchemaError(module_name, "only Register fields take a reset value", field=decl.name)

    if wrapper is VecSignal:
        if not isinstance(decl.width, int) or isinstance(decl.width, bool) or decl.width <= 0:
            raise SchemaError(module_name, "VecSignal fields need a positive width", field=decl.name)
    elif decl.width is not None:
        raise SchemaError(module_name, "only VecSignal fields take a width", field=decl.name)


def _compile_field(module_name: str, decl: Any, seen: set[str]) -> FieldSpec:
    if not isinstance(decl, Field):
        raise SchemaError(module_name, f"fields entries must be Field, got {decl!r}")

    name = decl.name
    if not isinstance(name, str) or not name.isidentifier() or keyword.iskeyword(name):
        raise SchemaError(module_name, f"field name {name!r} is not a valid identifier")
    if name.startswith("_"):
        raise SchemaError(module_name, "field names must not start with '_'", field=name)
    if name in seen:
        raise SchemaError(module_name, "duplicate field", field=name)
    seen.add(name)

    try:
        role = Role.parse(decl.role)
    except ValueError as exc:
        raise SchemaError(module_name, str(exc), field=name) from exc

    wrapper, inner_type = _resolve_kind(module_name, decl)
    _check_role(module_name, name, role, wrapper)
    _check_parameters(module_name, decl, wrapper, inner_type)

    if role in (Role.MEMORY, Role.SUBMODULE):
        logger.debug(f"{module_name}.{name}: '{role.value}' fields get no generated accessors")

    return FieldSpec(
        name=name,
        role=role,
        wrapper=wrapper,
        inner_type=inner_type,
        reset=decl.reset,
        width=decl.width,
    )


def _generated(cls: type, name: str, fn: Callable[..., Any], doc: str) -> Callable[..., Any]:
    fn.__name__ = name
    fn.__qualname__ = f"{cls.__qualname__}.{name}"
    fn.__doc__ = doc
    setattr(fn, _GENERATED, True)
    return fn


def _make_drive(cls: type, field_name: str) -> Callable[..., Any]:
    def drive(self, value):
        getattr(self, field_name).drive(value)

    return _generated(cls, f"drive_{field_name}", drive, f"Drive input '{field_name}'.")


def _make_sample(cls: type, field_name: str) -> Callable[..., Any]:
    def sample(self):
        return getattr(self, field_name).sample()

    return _generated(cls, f"sample_{field_name}", sample, f"Sample output '{field_name}'.")


def _make_clock_edge(cls: type, field_names: tuple[str, ...]) -> Callable[..., Any]:
    def clock_edge(self):
        for field_name in field_names:
            getattr(self, field_name).clock_edge()

    listed = ", ".join(field_names) or "nothing"
    return _generated(cls, "clock_edge", clock_edge, f"Commit clocked fields: {listed}.")


def _make_reset(cls: type, field_names: tuple[str, ...]) -> Callable[..., Any]:
    def reset(self):
        for field_name in field_names:
            reset_fn = getattr(getattr(self, field_name), "reset", None)
            if callable(reset_fn):
                reset_fn()

    return _generated(cls, "reset", reset, "Unset every wire and restore every register.")


def _check_free(cls: type, module_name: str, attr: str, field_name: Optional[str] = None) -> None:
    existing = getattr(cls, attr, None)
    if existing is not None and not getattr(existing, _GENERATED, False):
        raise SchemaError(
            module_name,
            f"generated attribute '{attr}' would shadow an existing definition",
            field=field_name,
        )


def _inherited_accessors(cls: type, generated: dict[str, Any], fields: set[str]) -> list[str]:
    """Generated accessors cls inherits for ports its own schema does not have."""
    stale = []
    for attr in dir(cls):
        if attr in generated or attr in fields:
            continue
        if getattr(inspect.getattr_static(cls, attr, None), _GENERATED, False):
            stale.append(attr)
    return stale


def compile_schema(cls: Any) -> ModuleSchema:
    """Validate cls.fields and attach the generated wiring surface to cls.

    Returns:
        The compiled ModuleSchema, also stored as cls.__schema__

    Raises:
        SchemaError: If cls is not a Module subclass or a field is malformed
    """
    if not isinstance(cls, type):
        raise SchemaError(getattr(cls, "__name__", repr(cls)), "only classes can be compiled as modules")
    module_name = cls.__qualname__
    if not issubclass(cls, Module):
        raise SchemaError(module_name, "modules must subclass rtlsim.Module")

    declared = getattr(cls, "fields", None)
    if not isinstance(declared, (list, tuple)):
        raise SchemaError(module_name, "'fields' must be a list or tuple of Field")

    seen: set[str] = set()
    specs = tuple(_compile_field(module_name, decl, seen) for decl in declared)
    schema = ModuleSchema(module=module_name, fields=specs)

    for spec in specs:
        _check_free(cls, module_name, spec.name, spec.name)

    generated: dict[str, Callable[..., Any]] = {}
    for spec in schema.by_role(Role.INPUT):
        generated[f"drive_{spec.name}"] = _make_drive(cls, spec.name)
    for spec in schema.by_role(Role.OUTPUT):
        generated[f"sample_{spec.name}"] = _make_sample(cls, spec.name)
    generated["clock_edge"] = _make_clock_edge(cls, schema.clocked)
    generated["reset"] = _make_reset(cls, tuple(spec.name for spec in specs))

    for attr in generated:
        if attr in seen:
            raise SchemaError(module_name, f"field name clashes with generated '{attr}'", field=attr)
        _check_free(cls, module_name, attr)

    for attr, fn in generated.items():
        setattr(cls, attr, fn)
    for attr in _inherited_accessors(cls, generated, seen):
        setattr(cls, attr, _Withdrawn(attr))
    cls.__schema__ = schema

    logger.debug(
        f"Compiled module {module_name}: inputs={list(schema.inputs)} "
        f"outputs={list(schema.outputs)} clocked={list(schema.clocked)}"
    )
    return schema


def module(cls: Any = None, *, register: Optional[str] = None) -> Any:
    """Class decorator compiling a Module subclass.

    Usable bare (@module) or with a registry name (@module(register="adder")).
    """

    def wrap(target: Any) -> Any:
        compile_schema(target)
        if register is not None:
            register_module(register, target)
        return target

    if cls is None:
        return wrap
    return wrap(cls)

