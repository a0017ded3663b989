import dataclasses
import json
import pathlib
import typing

from exprsimp.errors import ConfigurationError

from .logging import getLogger

logger = getLogger("ExprSimp.config")


@dataclasses.dataclass(frozen=True, slots=True)
class ConfigConstants:
    DEFAULT_CONFIG_FILENAME: typing.ClassVar[str] = "default_simplifier.json"

    @staticmethod
    def default_config_path() -> pathlib.Path:
        """Return the path of the configuration template shipped with the package."""
        return (
            pathlib.Path(__file__).resolve().parent.parent
            / "conf"
            / ConfigConstants.DEFAULT_CONFIG_FILENAME
        )


@dataclasses.dataclass(slots=True)
class RuleConfiguration:
    """
    Represents the configuration for a single simplification rule.

    >>> rule = RuleConfiguration(name="BitwiseIdentity", is_activated=True)
    >>> rule.to_dict()
    {'name': 'BitwiseIdentity', 'is_activated': True, 'config': {}}
    >>> data = {'name': 'SignCorrection', 'is_activated': False, 'config': {'p': 1}}
    >>> RuleConfiguration.from_dict(data).is_activated
    False
    """

    name: str | None = None
    is_activated: bool = False
    config: dict[str, typing.Any] = dataclasses.field(default_factory=dict)

    def to_dict(self) -> dict[str, typing.Any]:
        """Serializes the rule configuration to a dictionary."""
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, typing.Any]) -> "RuleConfiguration":
        """Creates a RuleConfiguration instance from a dictionary."""
        return cls(**data)


@dataclasses.dataclass(slots=True, repr=False)
class SimplifierConfiguration:
    """
    Which rules the simplifier runs, in which order, and how many passes it
    may spend on one statement.

    ``rules`` order is the catalog order. ``max_passes`` of ``None`` lets the
    simplifier iterate until it reaches a fixed point.
    """

    path: pathlib.Path | None = None
    description: str = ""
    rules: list[RuleConfiguration] = dataclasses.field(default_factory=list)
    max_passes: int | None = None

    def __repr__(self) -> str:
        return (
            f"SimplifierConfiguration(path={self.path}, description={self.description}, "
            f"rules={len(self.rules)}, max_passes={self.max_passes})"
        )

    def activated_rules(self) -> list[RuleConfiguration]:
        return [rule for rule in self.rules if rule.is_activated]

    def to_dict(self) -> dict[str, typing.Any]:
        return {
            "description": self.description,
            "max_passes": self.max_passes,
            "rules": [rule.to_dict() for rule in self.rules],
        }

    @classmethod
    def from_dict(
        cls, data: dict[str, typing.Any], path: pathlib.Path | None = None
    ) -> "SimplifierConfiguration":
        max_passes = data.get("max_passes")
        if max_passes is not None and (
            not isinstance(max_passes, int) or max_passes < 1
        ):
            raise ConfigurationError(
                f"max_passes must be a positive integer or null, got {max_passes!r}"
            )
        return cls(
            path=path,
            description=data.get("description", ""),
            rules=[RuleConfiguration.from_dict(r) for r in data.get("rules", [])],
            max_passes=max_passes,
        )

    @classmethod
    def from_file(cls, path: pathlib.Path | str) -> "SimplifierConfiguration":
        """
        Loads a simplifier configuration from a JSON file.

        Raises:
            FileNotFoundError: If the configuration file cannot be found.
            json.JSONDecodeError: If the file is not valid JSON.
        """
        config_path = pathlib.Path(path)
        logger.info("Loading simplifier configuration from %s", config_path)
        try:
            with config_path.open("r", encoding="utf-8") as fp:
                data = json.load(fp)
        except FileNotFoundError:
            logger.error("Simplifier configuration file not found: %s", config_path)
            raise
        except json.JSONDecodeError as e:
            logger.error("Failed to parse simplifier config %s: %s", config_path, e)
            raise

        return cls.from_dict(data, path=config_path)

    @classmethod
    def default(cls) -> "SimplifierConfiguration":
        """The configuration template shipped with the package."""
        return cls.from_file(ConfigConstants.default_config_path())

    def save(self) -> None:
        """Saves the configuration back to its file."""
        if self.path is None:
            raise ValueError("Configuration has no path to save to")
        logger.info("Saving simplifier configuration to %s", self.path)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w", encoding="utf-8") as fp:
                json.dump(self.to_dict(), fp, indent=2)
        except IOError as e:
            logger.error("Could not save simplifier configuration to %s: %s", self.path, e)
