# -*- coding: utf-8; -*-

from unpythonic.syntax import macros, test, test_raises, the  # noqa: F401
from unpythonic.test.fixtures import session, testset

from ..tags import Tagged, tagged, untag, tags_of, inherits

class Animal:
    pass
class Cat(Animal):
    pass

class Rpart:
    dispatch_tags = ("rpart", "model")

class LmFit:
    dispatch_tags = "lm"  # a bare str, not a tuple of tags

def runtests():
    with testset("explicit tags"):
        fit = tagged({"splits": 7}, "rpart", "model")
        test[tags_of(fit) == ("rpart", "model")]
        test[the[tags_of(fit)[0]] == "rpart"]  # most specific first
        test[untag(fit) == {"splits": 7}]
        test[untag(42) == 42]
        test[tags_of(tagged(3.0, "alpha")) == ("alpha",)]

        test_raises[TypeError, tagged(1), "at least one tag is required"]
        test_raises[TypeError, tagged(1, 2)]
        test_raises[ValueError, tagged(1, "")]
        test_raises[ValueError, tagged(1, "model", "model")]

        # a bare str is rejected, not split into letters
        test_raises[TypeError, Tagged(None, "lm")]
        test_raises[TypeError, Tagged(None, "ab")]
        test[Tagged(None, ("lm",)).tags == ("lm",)]

    with testset("tagged values are immutable"):
        fit = tagged("payload", "lm")
        with test_raises[AttributeError]:
            fit.tags = ("glm",)
        with test_raises[AttributeError]:
            fit.payload = "other"
        with test_raises[AttributeError]:
            del fit.tags
        test[tags_of(fit) == ("lm",)]

    with testset("equality"):
        test[tagged(1, "a", "b") == tagged(1, "a", "b")]
        test[tagged(1, "a", "b") != tagged(1, "b", "a")]  # order matters
        test[tagged(1, "a") != tagged(2, "a")]
        test[tagged(1, "a") != 1]
        test[len({tagged(1, "a"), tagged(1, "a")}) == 1]
        test[isinstance(Tagged(None, ["x"]).tags, tuple)]

    with testset("tags from classes"):
        test[tags_of(Cat()) == ("Cat", "Animal")]
        test[tags_of(Animal()) == ("Animal",)]
        test[tags_of(Rpart()) == ("rpart", "model")]
        test_raises[TypeError, tags_of(LmFit())]

        # The universal `object` tag is implicit, so a plain number has one tag.
        test[tags_of(2.5) == ("float",)]
        test[tags_of("hello") == ("str",)]
        test[tags_of(True) == ("bool", "int")]
        test[tags_of(object()) == ("object",)]

        # side-effect-free and deterministic
        cat = Cat()
        test[tags_of(cat) == tags_of(cat)]

    with testset("inherits"):
        fit = tagged(None, "glm", "lm")
        test[inherits(fit, "glm")]
        test[inherits(fit, "lm")]
        test[not inherits(fit, "model")]
        test[inherits(Cat(), "Animal")]

if __name__ == '__main__':  # pragma: no cover
    with session(__file__):
        runtests()
