class ExprSimpException(Exception):
    """Base class for every error raised by exprsimp."""


class ExprSimpZ3Exception(ExprSimpException):
    """Z3 is missing or could not translate an expression."""


class UnsupportedExpressionError(ExprSimpException):
    """An expression kind is not handled by a backend."""


class EvaluationError(ExprSimpException):
    """A tree cannot be evaluated concretely (e.g. ``&`` of a non-lvalue)."""


class ConfigurationError(ExprSimpException):
    """A simplifier configuration names unknown rules or holds bad values."""
