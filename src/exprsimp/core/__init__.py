"""
exprsimp.core: infrastructure shared by the IR, the rules and the simplifier.

Modules:
    bits     - fixed-width integer tables and conversions
    config   - SimplifierConfiguration and RuleConfiguration
    logging  - ExprSimpLogger with MDC support, configure_loggers
    registry - Registrant metaclass and EventEmitter
    stats    - SimplificationStatistics tracking
"""

# Configuration
from .config import ConfigConstants, RuleConfiguration, SimplifierConfiguration

# Logging
from .logging import (
    ExprSimpLogger,
    LevelFlag,
    LoggerConfigurator,
    configure_loggers,
    getLogger,
)

# Registry and events
from .registry import EventEmitter, Registrant, Registry

# Statistics
from .stats import RuleExecution, SimplificationEvent, SimplificationStatistics

# Fixed-width helpers
from .bits import (
    mask,
    msb,
    normalize_literal,
    signed_to_unsigned,
    unsigned_to_signed,
)

__all__ = [
    # config
    "ConfigConstants",
    "RuleConfiguration",
    "SimplifierConfiguration",
    # logging
    "ExprSimpLogger",
    "LevelFlag",
    "LoggerConfigurator",
    "configure_loggers",
    "getLogger",
    # registry
    "EventEmitter",
    "Registrant",
    "Registry",
    # stats
    "RuleExecution",
    "SimplificationEvent",
    "SimplificationStatistics",
    # bits
    "mask",
    "msb",
    "normalize_literal",
    "signed_to_unsigned",
    "unsigned_to_signed",
]
