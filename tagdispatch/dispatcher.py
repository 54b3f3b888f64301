# -*- coding: utf-8; -*-
"""Single dispatch on type tags (a.k.a. S3-style generic functions) for Python.

Terminology:

  - A *generic function* is a named operation with several implementations.
  - Each implementation is a *method*, bound to one *type tag*.
  - The *default* method is used when none of the value's tags has a method.

Dispatch looks only at the first argument, the *value*. Its type tags are
tried most specific first (see `tagdispatch.tags.tags_of`), and the first tag
with a registered method wins. This replaces the pattern of an `if`/`elif`
chain switching on the type of the argument, with a final `else` that prints
a warning: adding a new type no longer means editing the chain.

Example::

    from tagdispatch import generic, tagged

    @generic
    def describe(x):
        return "some object"

    @describe.method("rpart")
    def describe_rpart(x):
        return "a decision tree"

    @describe.method("model")
    def describe_model(x):
        return "some model"

    describe(tagged(..., "rpart", "model"))  # --> "a decision tree"
    describe(tagged(..., "gbm", "model"))    # --> "some model"
    describe(42)                             # --> "some object"

What happens when the default method is selected is configurable; see
`dispatch_default_policy` below.
"""

__all__ = ["DispatchError", "DefaultInvoked", "NoMethod", "nomethod",
           "dispatch", "next_method",
           "GenericFunction", "generic", "isgeneric",
           "methods", "format_methods", "list_methods"]

import inspect
import logging

from unpythonic.conditions import signal, warn
from unpythonic.dynassign import dyn, make_dynvar

from .registry import NotFound, global_registry, _check_name
from .tags import tags_of

logger = logging.getLogger(__name__)

# What to do when a call falls through to the default method:
#   "allow":  just call it.
#   "signal": `unpythonic.conditions.signal` a `DefaultInvoked`, then call it.
#   "warn":   `unpythonic.conditions.warn` a `DefaultInvoked`, then call it.
#   "error":  raise `DispatchError` instead of calling it.
#
# Override locally with `with dyn.let(dispatch_default_policy="warn"): ...`.
_policies = ("allow", "signal", "warn", "error")
make_dynvar(dispatch_default_policy="allow")

class DispatchError(TypeError):
    """No method matched the value's type tags, and there was no default to fall back to.

    This is a configuration error in the registry, never a designed outcome.
    """
    def __init__(self, generic_name, tags, message=None):
        self.generic_name = generic_name
        self.tags = tuple(tags)
        if message is None:
            message = (f"No method for generic function {repr(generic_name)} matches type tags {self.tags}, "
                       f"and no default method is registered.")
        super().__init__(message)

class DefaultInvoked(Warning):
    """Condition: the default method of a generic function is being used.

    Not an error. Signaled (or warned) only under the "signal" and "warn"
    settings of `dispatch_default_policy`.
    """
    def __init__(self, generic_name, tags):
        self.generic_name = generic_name
        self.tags = tuple(tags)
        super().__init__(f"No specific method for generic function {repr(generic_name)} "
                         f"on type tags {self.tags}; using the default method.")

class NoMethod:
    """Diagnostic value returned by the default methods created by `nomethod`.

    Falsy, so callers can test `if not result: ...`.
    """
    def __init__(self, generic_name, tags, message):
        self.generic_name = generic_name
        self.tags = tuple(tags)
        self.message = message

    def __bool__(self):
        return False

    def __str__(self):
        return self.message

    def __repr__(self):  # pragma: no cover
        return f"<NoMethod {repr(self.generic_name)} for {self.tags}>"

def nomethod(generic_name, message=None):
    """Make a default method that reports, instead of raising, that no specific method exists.

    The returned handler ignores any extra arguments and returns a `NoMethod`.

    `message`: optional format string; may use the fields `{name}` and `{tags}`.
    """
    if message is None:
        message = "no applicable method for {name} applied to an object of class {tags}"
    def nomethod_default(value, *args, **kwargs):
        tags = tags_of(value)
        return NoMethod(generic_name, tags,
                        message.format(name=repr(generic_name), tags=", ".join(tags)))
    nomethod_default.__qualname__ = f"nomethod({repr(generic_name)})"
    return nomethod_default

# --------------------------------------------------------------------------------

def dispatch(generic_name, value, *args, registry=None, **kwargs):
    """Call the method of generic function `generic_name` that matches the type tags of `value`.

    The method is called as `handler(value, *args, **kwargs)`, and its return
    value is returned. Exceptions from the method propagate unchanged.

    `registry`: the `MethodRegistry` to look in. Default is the process-wide one.

    If neither a tag-specific method nor a default exists, raise `DispatchError`.
    """
    registry = registry if registry is not None else global_registry
    tags = tags_of(value)
    return _call(registry, generic_name, tags, tags, value, args, kwargs)

def next_method(generic_name, value, current_tag, *args, registry=None, **kwargs):
    """Call the next less specific method, like `NextMethod` in S3.

    Dispatch as in `dispatch`, but consider only the type tags of `value` that
    come after `current_tag`. If none of those has a method, use the default.

    Typically called from inside a method, to extend the behavior of the
    method for a less specific tag::

        @summary.method("glm")
        def summary_glm(x):
            base = next_method("summary", x, "glm")  # e.g. the "lm" method
            ...

    If `value` does not carry `current_tag`, raise `DispatchError`.
    """
    registry = registry if registry is not None else global_registry
    tags = tags_of(value)
    if current_tag not in tags:
        raise DispatchError(generic_name, tags,
                            f"next_method: value with type tags {tags} does not carry {repr(current_tag)}")
    remaining = tags[tags.index(current_tag) + 1:]
    return _call(registry, generic_name, remaining, tags, value, args, kwargs)

def _call(registry, generic_name, candidates, tags, value, args, kwargs):
    """Resolve among `candidates` and call. `tags` are all of the value's tags, for messages."""
    resolved = registry.resolve(generic_name, candidates)
    if resolved is NotFound:
        raise DispatchError(generic_name, tags)
    tag, handler = resolved
    if tag is None:
        _on_default(generic_name, tags)
    return handler(value, *args, **kwargs)

def _on_default(generic_name, tags):
    policy = dyn.dispatch_default_policy
    if policy not in _policies:
        raise ValueError(f"Unknown dispatch_default_policy {repr(policy)}; expected one of {_policies}")
    logger.debug("no method for %s on type tags %s; using default (policy %s)", generic_name, tags, policy)
    if policy == "error":
        raise DispatchError(generic_name, tags,
                            f"No method for generic function {repr(generic_name)} matches type tags {tuple(tags)}, "
                            f"and dispatch_default_policy='error' forbids using the default method.")
    if policy == "signal":
        signal(DefaultInvoked(generic_name, tags))
    elif policy == "warn":
        warn(DefaultInvoked(generic_name, tags))

# --------------------------------------------------------------------------------

class GenericFunction:
    """A named generic function, callable.

    Calling it dispatches on the first argument. Methods are added with the
    decorators `method` and `default`::

        summary = GenericFunction("summary")

        @summary.method("lm")
        def summary_lm(x):
            ...

        @summary.default
        def summary_default(x):
            ...

    The decorators return the decorated function unchanged, so each method
    remains an ordinary function that can be tested on its own.

    `registry`: the `MethodRegistry` to use. Default is the process-wide one.
    Two `GenericFunction` objects with the same name and registry share their
    methods.
    """
    def __init__(self, name, registry=None):
        _check_name("Generic function name", name)
        self.name = name
        self.registry = registry if registry is not None else global_registry

    def __call__(self, value, *args, **kwargs):
        return dispatch(self.name, value, *args, registry=self.registry, **kwargs)

    def method(self, *tags):
        """Parametric decorator. Register the decorated function as the method for each of `tags`."""
        if not tags:
            raise TypeError(f"{self.name}.method: need at least one type tag")
        def register(f):
            for tag in tags:
                self.registry.register(self.name, tag, f)
            return f
        return register

    def default(self, f):
        """Decorator. Register the decorated function as the default method."""
        self.registry.register_default(self.name, f)
        return f

    def next(self, value, current_tag, *args, **kwargs):
        """Call the next less specific method. See `next_method`."""
        return next_method(self.name, value, current_tag, *args, registry=self.registry, **kwargs)

    def __repr__(self):  # pragma: no cover
        n = len(self.registry.bindings(self.name))
        return f"<GenericFunction {repr(self.name)} with {n} methods>"

def generic(f=None, *, name=None, registry=None):
    """Decorator. Make a generic function, with `f` as its default method.

    The generic function is named after `f` unless `name` is given. The return
    value is a `GenericFunction`; add tag-specific methods with its `method`
    decorator.

    Usage::

        @generic
        def describe(x):
            return "no idea"

        @generic(name="summary")
        def summary(x):
            return nomethod("summary")(x)
    """
    def make(f):
        gf = GenericFunction(name if name is not None else f.__name__, registry)
        gf.default(f)
        gf.__doc__ = f.__doc__
        return gf
    if f is None:
        return make
    return make(f)

def isgeneric(f):
    """Return whether `f` is a generic function."""
    return isinstance(f, GenericFunction)

def methods(f):
    """Print, to stdout, a human-readable list of the methods of generic function `f`.

    For introspection in the REPL. Example::

        Methods for generic function 'describe':
          rpart: describe_rpart(x) from /home/user/models.py:12
          model: describe_model(x) from /home/user/models.py:16
          default: describe(x) from /home/user/models.py:8
    """
    print(format_methods(f))

def format_methods(f):
    """Like `methods`, but return the text instead of printing it."""
    listing = list_methods(f)
    if listing:
        methods_str = "\n".join(f"  {tag}: {_format_callable(handler)}" for tag, handler in listing)
    else:
        methods_str = "  <no methods registered>"
    return f"Methods for generic function {repr(f.name)}:\n{methods_str}"

def list_methods(f):
    """Return a list of `(type_tag, handler)` for generic function `f`.

    Tag-specific methods come first, in registration order. The default
    method, if any, comes last, with the tag `"default"`.
    """
    if not isgeneric(f):
        raise TypeError(f"{repr(f)} is not a generic function, it does not have methods.")
    listing = f.registry.bindings(f.name)
    default = f.registry.default_of(f.name)
    if default is not None:
        listing.append(("default", default))
    return listing

def _format_callable(thecallable):
    """Format the signature and source location of a handler."""
    name = getattr(thecallable, "__qualname__", repr(thecallable))
    try:
        thesignature = str(inspect.signature(thecallable))
    except (TypeError, ValueError):  # some builtins have no introspectable signature
        thesignature = "(...)"
    try:
        filename = inspect.getsourcefile(thecallable)
        _, firstlineno = inspect.getsourcelines(thecallable)
    except (TypeError, OSError):  # builtin, or defined in the REPL
        return f"{name}{thesignature}"
    return f"{name}{thesignature} from {filename}:{firstlineno}"
