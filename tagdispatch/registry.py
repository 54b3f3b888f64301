# -*- coding: utf-8; -*-
"""Method registry: (generic function name, type tag) -> handler.

The registry is an explicit, inspectable table. Nothing is inferred from
function names; `summary_lm` is not a method of `summary` unless someone
registers it as one.

Registrations are expected to happen at module load time. A registry can be
frozen once setup is complete, after which it only serves lookups.
"""

__all__ = ["MethodRegistry", "RegistryFrozenError", "NotFound", "global_registry",
           "register", "register_default", "unregister", "lookup"]

import logging
import threading

from unpythonic.symbol import sym

logger = logging.getLogger(__name__)

NotFound = sym("NotFound")  # neither a tag match nor a default

class RegistryFrozenError(RuntimeError):
    """Raised when mutating a frozen `MethodRegistry`."""

def _check_name(kind, name):
    if not isinstance(name, str):
        raise TypeError(f"{kind} must be a str, got {type(name)} with value {repr(name)}")
    if not name:
        raise ValueError(f"{kind} must be a non-empty string.")

def _check_handler(handler):
    if not callable(handler):
        raise TypeError(f"Handler must be callable, got {type(handler)} with value {repr(handler)}")

class MethodRegistry:
    """Mapping of generic function names to their tag-specific and default handlers.

    Within one generic function, there is at most one handler per type tag;
    registering again overwrites. All access goes through one reentrant lock.
    """
    def __init__(self):
        self._methods = {}   # generic_name -> {type_tag: handler}, insertion-ordered
        self._defaults = {}  # generic_name -> handler
        self._frozen = False
        self._lock = threading.RLock()

    def _check_mutable(self):
        if self._frozen:
            raise RegistryFrozenError("Method registry is frozen; cannot modify bindings.")

    def register(self, generic_name, type_tag, handler):
        """Bind `handler` to `type_tag` under `generic_name`, replacing any previous binding.

        Return `handler`.
        """
        _check_name("Generic function name", generic_name)
        _check_name("Type tag", type_tag)
        _check_handler(handler)
        with self._lock:
            self._check_mutable()
            self._methods.setdefault(generic_name, {})[type_tag] = handler
        logger.debug("registered %s for %s.%s", handler, generic_name, type_tag)
        return handler

    def register_default(self, generic_name, handler):
        """Install `handler` as the fallback for `generic_name`, replacing any previous one.

        Return `handler`.
        """
        _check_name("Generic function name", generic_name)
        _check_handler(handler)
        with self._lock:
            self._check_mutable()
            self._defaults[generic_name] = handler
        logger.debug("registered %s as default for %s", handler, generic_name)
        return handler

    def unregister(self, generic_name, type_tag):
        """Remove the binding for `type_tag` under `generic_name`. No-op if there is none."""
        with self._lock:
            self._check_mutable()
            tagmap = self._methods.get(generic_name)
            if tagmap is None or type_tag not in tagmap:
                return
            del tagmap[type_tag]
            if not tagmap:
                del self._methods[generic_name]
        logger.debug("unregistered %s.%s", generic_name, type_tag)

    def unregister_default(self, generic_name):
        """Remove the default handler of `generic_name`. No-op if there is none."""
        with self._lock:
            self._check_mutable()
            if self._defaults.pop(generic_name, None) is not None:
                logger.debug("unregistered default for %s", generic_name)

    def resolve(self, generic_name, tags):
        """Find the handler for a value with type tags `tags`.

        Tags are tried in the given order; the first one with a binding wins.
        If none matches, the default handler is used.

        Return `(tag, handler)`, where `tag` is `None` when the default was
        selected. If there is no match and no default, return `NotFound`.

        `tags` must be a sequence of str; a bare str is a `TypeError`.
        """
        if isinstance(tags, str):
            raise TypeError(f"Type tags must be a sequence of str, not a single str; got {repr(tags)}")
        with self._lock:
            tagmap = self._methods.get(generic_name, {})
            for tag in tags:
                if tag in tagmap:
                    return tag, tagmap[tag]
            if generic_name in self._defaults:
                return None, self._defaults[generic_name]
        return NotFound

    def lookup(self, generic_name, tags):
        """Like `resolve`, but return just the handler (or `NotFound`)."""
        resolved = self.resolve(generic_name, tags)
        if resolved is NotFound:
            return NotFound
        _, handler = resolved
        return handler

    def bindings(self, generic_name):
        """Return a list of `(type_tag, handler)` for `generic_name`, in registration order.

        The default handler is not included; see `default_of`.
        """
        with self._lock:
            return list(self._methods.get(generic_name, {}).items())

    def default_of(self, generic_name):
        """Return the default handler of `generic_name`, or `None`."""
        with self._lock:
            return self._defaults.get(generic_name)

    def generic_names(self):
        """Return a sorted list of the generic function names that have any bindings."""
        with self._lock:
            return sorted(set(self._methods) | set(self._defaults))

    def __contains__(self, generic_name):
        with self._lock:
            return generic_name in self._methods or generic_name in self._defaults

    def freeze(self):
        """Make this registry read-only. Lookups keep working; mutations raise `RegistryFrozenError`."""
        with self._lock:
            self._frozen = True
        logger.debug("froze method registry %s", self)

    @property
    def frozen(self):
        return self._frozen

    def clear(self):
        """Remove all bindings and defaults."""
        with self._lock:
            self._check_mutable()
            self._methods.clear()
            self._defaults.clear()

    def __repr__(self):  # pragma: no cover
        with self._lock:
            n = sum(len(tagmap) for tagmap in self._methods.values()) + len(self._defaults)
        state = ", frozen" if self._frozen else ""
        return f"<MethodRegistry at 0x{id(self):x}: {n} bindings{state}>"

# The process-wide registry, and shorthands for it.
global_registry = MethodRegistry()

def register(generic_name, type_tag, handler):
    """Register `handler` for `type_tag` under `generic_name` in the process-wide registry."""
    return global_registry.register(generic_name, type_tag, handler)

def register_default(generic_name, handler):
    """Register the default handler for `generic_name` in the process-wide registry."""
    return global_registry.register_default(generic_name, handler)

def unregister(generic_name, type_tag):
    """Remove a binding from the process-wide registry. No-op if absent."""
    global_registry.unregister(generic_name, type_tag)

def lookup(generic_name, tags):
    """Look up a handler in the process-wide registry. Return the handler or `NotFound`."""
    return global_registry.lookup(generic_name, tags)
