# -*- coding: utf-8; -*-
"""Type tags for single dispatch.

A *type tag* is a string naming a dispatchable category of a value. A value
may carry several tags, ordered most specific first; e.g. a fitted decision
tree could be tagged `("rpart", "model")`. This is the analogue of the `class`
attribute in the S3 object system.

Tags are obtained from, in this order:

  - a `Tagged` wrapper, which carries explicit tags,
  - a `dispatch_tags` class attribute,
  - the names of the classes in the value's MRO, most specific first.

In the last case the universal class `object` is left out, since the default
handler of a generic function already stands for "any object". So a plain
`float` has exactly one tag, `("float",)`.
"""

__all__ = ["Tagged", "tagged", "untag", "tags_of", "inherits"]

def _as_tags(tags):
    """Convert a sequence of type tags to a validated tuple."""
    if isinstance(tags, str):
        raise TypeError(f"Type tags must be a sequence of str, not a single str; got {repr(tags)}")
    tags = tuple(tags)
    _validate_tags(tags)
    return tags

def _validate_tags(tags):
    if not tags:
        raise TypeError("A tagged value needs at least one type tag.")
    for tag in tags:
        if not isinstance(tag, str):
            raise TypeError(f"Type tag must be a str, got {type(tag)} with value {repr(tag)}")
        if not tag:
            raise ValueError("Type tag must be a non-empty string.")
    if len(set(tags)) != len(tags):
        raise ValueError(f"Duplicate type tags in {tags}")

class Tagged:
    """A payload with explicit, immutable type tags.

    `payload`: any object. Dispatch never looks inside it.
    `tags`: tuple of str, most specific first.

    Once constructed, the attributes cannot be rebound.
    """
    __slots__ = ("payload", "tags")

    def __init__(self, payload, tags):
        tags = _as_tags(tags)
        object.__setattr__(self, "payload", payload)
        object.__setattr__(self, "tags", tags)

    def __setattr__(self, name, value):
        raise AttributeError(f"Tagged values are immutable; cannot set {repr(name)}")

    def __delattr__(self, name):
        raise AttributeError(f"Tagged values are immutable; cannot delete {repr(name)}")

    def __eq__(self, other):
        if not isinstance(other, Tagged):
            return NotImplemented
        return self.tags == other.tags and self.payload == other.payload

    def __hash__(self):
        return hash((self.tags, self.payload))

    def __repr__(self):  # pragma: no cover
        return f"<Tagged {self.tags}: {repr(self.payload)}>"

def tagged(payload, *tags):
    """Wrap `payload` with the given type tags, most specific first.

    Example::

        fit = tagged({"splits": 7}, "rpart", "model")
        assert tags_of(fit) == ("rpart", "model")
    """
    return Tagged(payload, tags)

def untag(value):
    """Return the payload of a `Tagged` value, or `value` itself if it is not tagged."""
    if isinstance(value, Tagged):
        return value.payload
    return value

def tags_of(value):
    """Return the type tags of `value` as a tuple of str, most specific first.

    The result is never empty.
    """
    if isinstance(value, Tagged):
        return value.tags
    cls = type(value)
    explicit = getattr(cls, "dispatch_tags", None)
    if explicit is not None:
        return _as_tags(explicit)
    names = tuple(base.__name__ for base in cls.__mro__ if base is not object)
    return names or ("object",)

def inherits(value, tag):
    """Return whether `value` carries the type tag `tag`."""
    return tag in tags_of(value)
