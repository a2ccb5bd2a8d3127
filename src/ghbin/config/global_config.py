"""Global configuration manager for INI settings."""

import configparser
from pathlib import Path

from ghbin.config.parser import (
    ConfigCommentManager,
    new_parser,
    parse_bool,
    parse_float,
    parse_int,
    parse_list,
    repo_section_name,
)
from ghbin.config.paths import Paths
from ghbin.constants import (
    CONFIG_FILE_NAME,
    CONFIG_VERSION,
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_FALLBACK_BRANCH,
    DEFAULT_INITIAL_INTERVAL,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_ELAPSED,
    DEFAULT_MAX_INTERVAL,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_PROFILE,
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_TARGETS,
    DEFAULT_TIMEOUT_SECONDS,
    KEY_CONFIG_VERSION,
    KEY_CONSOLE_LOG_LEVEL,
    KEY_INITIAL_INTERVAL,
    KEY_LOG_LEVEL,
    KEY_MAX_ELAPSED,
    KEY_MAX_INTERVAL,
    KEY_RETRY_ATTEMPTS,
    KEY_TIMEOUT_SECONDS,
    REPO_SECTION_PREFIX,
    SECTION_DEFAULT,
    SECTION_INSTALL,
    SECTION_NETWORK,
    SECTION_PUBLISH,
)
from ghbin.exceptions import ConfigurationError
from ghbin.logger import get_logger
from ghbin.types import (
    GlobalConfig,
    InstallConfig,
    NetworkConfig,
    PublishConfig,
    RepoConfig,
)

logger = get_logger(__name__)

# Type alias for raw INI config dictionary
RawConfigDict = dict[str, str | dict[str, str]]

ARCHIVE_FORMATS = ("tgz", "zip")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _format_value(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, list | tuple):
        return ", ".join(str(item) for item in value)
    return str(value)


class GlobalConfigManager:
    """Manages global INI configuration."""

    def __init__(
        self,
        config_dir: Path | None = None,
        settings_file: Path | None = None,
    ) -> None:
        """Initialize global config manager.

        Args:
            config_dir: Configuration directory path
                (defaults to Paths.CONFIG_DIR)
            settings_file: Explicit settings file (``--config``). A missing
                explicit file is an error instead of being created.

        """
        self.config_dir = config_dir or Paths.CONFIG_DIR
        self._explicit_file = settings_file is not None
        self.settings_file = (
            settings_file or self.config_dir / CONFIG_FILE_NAME
        )

    def get_default_global_config(self) -> RawConfigDict:
        """Get default global configuration values.

        Returns:
            Default configuration dictionary

        """
        return {
            KEY_CONFIG_VERSION: CONFIG_VERSION,
            KEY_LOG_LEVEL: DEFAULT_LOG_LEVEL,
            KEY_CONSOLE_LOG_LEVEL: DEFAULT_CONSOLE_LOG_LEVEL,
            SECTION_NETWORK: {
                KEY_RETRY_ATTEMPTS: str(DEFAULT_RETRY_ATTEMPTS),
                KEY_INITIAL_INTERVAL: str(DEFAULT_INITIAL_INTERVAL),
                KEY_MAX_INTERVAL: str(DEFAULT_MAX_INTERVAL),
                KEY_MAX_ELAPSED: str(DEFAULT_MAX_ELAPSED),
                KEY_TIMEOUT_SECONDS: str(DEFAULT_TIMEOUT_SECONDS),
            },
            SECTION_PUBLISH: {
                "repository": "",
                "targets": ", ".join(DEFAULT_TARGETS),
                "format": "tgz",
                "profile": DEFAULT_PROFILE,
                "draft": "false",
                "checksum": "true",
                "release_notes": "false",
                "continue_on_error": "false",
                "publish_crate": "false",
                "output_dir": DEFAULT_OUTPUT_DIR,
                "fallback_branch": DEFAULT_FALLBACK_BRANCH,
            },
            SECTION_INSTALL: {
                "install_dir": str(Paths.DEFAULT_INSTALL_DIR),
                "verify_signature": "false",
                "fallback": "true",
            },
        }

    def _create_config_from_defaults(
        self, defaults: RawConfigDict
    ) -> configparser.ConfigParser:
        """Create ConfigParser from defaults dictionary.

        Args:
            defaults: Default configuration values

        Returns:
            ConfigParser populated with defaults

        """
        config = new_parser()
        config.read_dict(
            {
                SECTION_DEFAULT: {
                    key: value
                    for key, value in defaults.items()
                    if not isinstance(value, dict)
                }
            }
        )
        for key, value in defaults.items():
            if isinstance(value, dict):
                config.read_dict({key: value})
        return config

    def load_global_config(self) -> GlobalConfig:
        """Load global configuration from INI file.

        Missing keys fall back to defaults. When the default settings file
        does not exist yet it is written with commented defaults.

        Returns:
            Loaded global configuration

        Raises:
            ConfigurationError: If the file is unreadable or a value is
                invalid, or an explicit ``--config`` file is missing

        """
        config = self._create_config_from_defaults(
            self.get_default_global_config()
        )

        if self.settings_file.exists():
            try:
                config.read(self.settings_file, encoding="utf-8")
            except (configparser.Error, UnicodeDecodeError) as e:
                msg = f"cannot parse {self.settings_file}: {e}"
                raise ConfigurationError(msg) from e
            logger.debug("Loaded settings from %s", self.settings_file)
            return self._convert_to_global_config(config)

        if self._explicit_file:
            msg = f"config file not found: {self.settings_file}"
            raise ConfigurationError(msg)

        global_config = self._convert_to_global_config(config)
        try:
            self.save_global_config(global_config)
        except OSError as e:
            # Read-only home directories still get the defaults
            logger.warning(
                "Could not write default settings to %s: %s",
                self.settings_file,
                e,
            )
        return global_config

    def save_global_config(self, config: GlobalConfig) -> None:
        """Save global configuration to INI file with comments.

        Args:
            config: Global configuration to save

        """
        comment_manager = ConfigCommentManager()
        section_comments = comment_manager.get_section_comments()
        key_comments = comment_manager.get_key_comments()

        sections: dict[str, dict[str, object]] = {
            SECTION_DEFAULT: {
                KEY_CONFIG_VERSION: config["config_version"],
                KEY_LOG_LEVEL: config["log_level"],
                KEY_CONSOLE_LOG_LEVEL: config["console_log_level"],
            },
            SECTION_NETWORK: dict(config["network"]),
            SECTION_PUBLISH: dict(config["publish"]),
            SECTION_INSTALL: dict(config["install"]),
        }
        for repo_key, repo_config in config["repos"].items():
            owner, _, repo = repo_key.partition("/")
            sections[repo_section_name(owner, repo)] = dict(repo_config)

        self.settings_file.parent.mkdir(parents=True, exist_ok=True)
        with self.settings_file.open("w", encoding="utf-8") as f:
            f.write(comment_manager.get_file_header())
            for section, values in sections.items():
                f.write(section_comments.get(section, "\n"))
                f.write(f"[{section}]\n")
                for key, value in values.items():
                    inline = key_comments.get(section, {}).get(key, "")
                    line = f"{key} = {_format_value(value)}"
                    f.write(f"{line}  {inline}\n" if inline else f"{line}\n")

    def _convert_to_global_config(
        self, config: configparser.ConfigParser
    ) -> GlobalConfig:
        """Convert a populated parser into a typed GlobalConfig.

        Args:
            config: Parser holding defaults overlaid with user values

        Returns:
            Typed global configuration

        Raises:
            ConfigurationError: If any value has the wrong type

        """
        defaults = config.defaults()
        log_level = defaults[KEY_LOG_LEVEL].strip().upper()
        console_level = defaults[KEY_CONSOLE_LOG_LEVEL].strip().upper()
        for key, level in (
            (KEY_LOG_LEVEL, log_level),
            (KEY_CONSOLE_LOG_LEVEL, console_level),
        ):
            if level not in LOG_LEVELS:
                msg = f"[{SECTION_DEFAULT}] {key} must be one of " + ", ".join(
                    LOG_LEVELS
                )
                raise ConfigurationError(msg)

        return GlobalConfig(
            config_version=defaults[KEY_CONFIG_VERSION],
            log_level=log_level,
            console_log_level=console_level,
            network=self._network_config(config[SECTION_NETWORK]),
            publish=self._publish_config(config[SECTION_PUBLISH]),
            install=self._install_config(config[SECTION_INSTALL]),
            repos=self._repo_configs(config),
        )

    @staticmethod
    def _network_config(section: configparser.SectionProxy) -> NetworkConfig:
        name = SECTION_NETWORK
        return NetworkConfig(
            retry_attempts=parse_int(
                name, KEY_RETRY_ATTEMPTS, section[KEY_RETRY_ATTEMPTS]
            ),
            initial_interval=parse_float(
                name, KEY_INITIAL_INTERVAL, section[KEY_INITIAL_INTERVAL]
            ),
            max_interval=parse_float(
                name, KEY_MAX_INTERVAL, section[KEY_MAX_INTERVAL]
            ),
            max_elapsed=parse_float(
                name, KEY_MAX_ELAPSED, section[KEY_MAX_ELAPSED]
            ),
            timeout_seconds=parse_int(
                name, KEY_TIMEOUT_SECONDS, section[KEY_TIMEOUT_SECONDS]
            ),
        )

    @staticmethod
    def _publish_config(section: configparser.SectionProxy) -> PublishConfig:
        name = SECTION_PUBLISH
        archive_format = section["format"].strip().lower()
        if archive_format not in ARCHIVE_FORMATS:
            msg = f"[{name}] format must be tgz or zip, got '{archive_format}'"
            raise ConfigurationError(msg)

        return PublishConfig(
            repository=section["repository"].strip(),
            targets=parse_list(section["targets"]),
            format=archive_format,
            profile=section["profile"].strip() or DEFAULT_PROFILE,
            draft=parse_bool(name, "draft", section["draft"]),
            checksum=parse_bool(name, "checksum", section["checksum"]),
            release_notes=parse_bool(
                name, "release_notes", section["release_notes"]
            ),
            continue_on_error=parse_bool(
                name, "continue_on_error", section["continue_on_error"]
            ),
            publish_crate=parse_bool(
                name, "publish_crate", section["publish_crate"]
            ),
            output_dir=Path(section["output_dir"].strip()).expanduser(),
            fallback_branch=section["fallback_branch"].strip()
            or DEFAULT_FALLBACK_BRANCH,
        )

    @staticmethod
    def _install_config(section: configparser.SectionProxy) -> InstallConfig:
        name = SECTION_INSTALL
        return InstallConfig(
            install_dir=Paths.expand_path(section["install_dir"].strip()),
            verify_signature=parse_bool(
                name, "verify_signature", section["verify_signature"]
            ),
            fallback=parse_bool(name, "fallback", section["fallback"]),
        )

    @staticmethod
    def _repo_configs(
        config: configparser.ConfigParser,
    ) -> dict[str, RepoConfig]:
        repos: dict[str, RepoConfig] = {}
        defaults = config.defaults()
        for section_name in config.sections():
            if not section_name.startswith(REPO_SECTION_PREFIX):
                continue
            repo_key = section_name[len(REPO_SECTION_PREFIX) :].strip()
            if repo_key.count("/") != 1:
                msg = f"[{section_name}] must be named repo:owner/name"
                raise ConfigurationError(msg)

            repo_config = RepoConfig()
            for key, value in config.items(section_name, raw=True):
                if key in defaults:
                    continue
                if key == "bin":
                    repo_config["bin"] = value.strip()
                elif key == "verify_signature":
                    repo_config["verify_signature"] = parse_bool(
                        section_name, key, value
                    )
                else:
                    logger.warning(
                        "Ignoring unknown key '%s' in [%s]", key, section_name
                    )
            repos[repo_key] = repo_config
        return repos

    def get_repo_config(
        self, config: GlobalConfig, owner: str, repo: str
    ) -> RepoConfig:
        """Return the overrides for ``owner/repo`` (empty when none)."""
        return config["repos"].get(f"{owner}/{repo}", RepoConfig())
