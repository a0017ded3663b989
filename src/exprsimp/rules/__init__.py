"""Expression rewrite rules.

This package contains the SimplificationRule base class and the six rule
families the simplifier applies. All rules are registered when their
modules are imported; the registry is accessible via
``SimplificationRule.registry``.

DEFAULT_CATALOG lists the families in the order the simplifier tries them.
Per node, the first rule that matches wins.
"""

from . import _base, arith, bitwise, conditions, equality, ref, sign

SimplificationRule = _base.SimplificationRule
isabstract = _base.isabstract

ArithmeticCorrection = arith.ArithmeticCorrection
SignCorrection = sign.SignCorrection
ReferenceCancellation = ref.ReferenceCancellation
BitwiseIdentity = bitwise.BitwiseIdentity
EqualityFolding = equality.EqualityFolding
ConditionConvergence = conditions.ConditionConvergence

DEFAULT_CATALOG: tuple[type[SimplificationRule], ...] = (
    ArithmeticCorrection,
    SignCorrection,
    ReferenceCancellation,
    BitwiseIdentity,
    EqualityFolding,
    ConditionConvergence,
)

__all__ = [
    # Base classes
    "SimplificationRule",
    "isabstract",
    "DEFAULT_CATALOG",
    # Rule families
    "ArithmeticCorrection",
    "SignCorrection",
    "ReferenceCancellation",
    "BitwiseIdentity",
    "EqualityFolding",
    "ConditionConvergence",
    # Rule modules
    "arith",
    "bitwise",
    "conditions",
    "equality",
    "ref",
    "sign",
]
