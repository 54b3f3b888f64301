#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Short quick tour of tagdispatch."""

from unpythonic.dynassign import dyn

from tagdispatch import *

# Fitted models from some modeling toolkit. Dispatch never looks inside the
# payload; only the type tags matter, most specific first.
tree = tagged({"splits": 7}, "rpart", "model")
boosted = tagged({"trees": 500}, "gbm", "model")
forest = tagged({"trees": 200}, "randomForest", "model")
fit = tagged({"coefficients": [0.5, 1.2]}, "glm", "lm")

# A generic function. The decorated function is the default method, used
# when none of the value's tags has a method of its own.
@generic
def describe(model):
    return nomethod("describe")(model)

# Methods are registered explicitly, one per type tag. Adding a new model type
# is a new registration; no existing method needs to change.
@describe.method("rpart")
def describe_rpart(model):
    return f"decision tree with {untag(model)['splits']} splits"

@describe.method("gbm")
def describe_gbm(model):
    return f"gradient-boosted model with {untag(model)['trees']} trees"

assert describe(tree) == "decision tree with 7 splits"
assert describe(boosted) == "gradient-boosted model with 500 trees"

# No method for "randomForest" or "model": the default reports it.
result = describe(forest)
assert isinstance(result, NoMethod)
print(result)  # no applicable method for 'describe' applied to an object of class randomForest, model

# A method for the less specific tag catches every model not handled more specifically.
@describe.method("model")
def describe_model(model):
    return "some model"
assert describe(forest) == "some model"
assert describe(tree) == "decision tree with 7 splits"  # more specific still wins

# Untagged values dispatch on their class names; the universal "object" is the default.
assert tags_of(2.5) == ("float",)
assert isinstance(describe(2.5), NoMethod)

# The function-style API, on the process-wide registry.
register("coef", "lm", lambda model: untag(model)["coefficients"])
register_default("coef", lambda model: None)
assert dispatch("coef", fit) == [0.5, 1.2]
assert dispatch("coef", tree) is None

# Without a default, a call that matches nothing is a loud error, not a silent print.
try:
    dispatch("predict", tree)
except DispatchError as err:
    print(err)
else:
    assert False

# next_method: extend the behavior of a less specific method.
summary = GenericFunction("summary")
@summary.method("lm")
def summary_lm(model):
    return {"coefficients": untag(model)["coefficients"]}
@summary.method("glm")
def summary_glm(model):
    out = summary.next(model, "glm")
    out["family"] = "gaussian"
    return out
assert summary(fit) == {"coefficients": [0.5, 1.2], "family": "gaussian"}

# Make falling through to the default loud, for this dynamic extent only.
with dyn.let(dispatch_default_policy="error"):
    try:
        describe(2.5)
    except DispatchError:
        pass
    else:
        assert False

methods(describe)

# Once setup is done, the registry can be made read-only.
global_registry.freeze()
try:
    register("coef", "rpart", lambda model: None)
except RegistryFrozenError:
    pass
