"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use OFMAN_ prefix (e.g., OFMAN_STRICT_MODE=true).

Settings can also be loaded from a .env file or an ofman.yaml file in the
working directory.
"""

from typing import Tuple, Type

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use OFMAN_ prefix.

    Examples:
        OFMAN_STRICT_MODE=true
        OFMAN_MANUAL_TITLE="Lua 5.4 C API"
        OFMAN_DATE_FORMAT="%Y-%m-%d"
    """

    model_config = SettingsConfigDict(
        env_prefix="OFMAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        yaml_file="ofman.yaml",
        case_sensitive=False,
    )

    # Verbatim protection
    placeholder_prefix: str = Field(
        default="\x00VERBATIM_",
        description="Prefix for verbatim placeholders in descriptions (uses null byte to avoid collisions)",
    )

    placeholder_suffix: str = Field(
        default="\x00",
        description="Suffix for verbatim placeholders in descriptions (uses null byte to avoid collisions)",
    )

    # Source document
    entry_tag: str = Field(
        default="APIEntry",
        description="Name of the tag wrapping one API entry in the source document",
    )

    # Manpage header and text
    manual_title: str = Field(
        default="Lua C API",
        description="Manual title written into the .TH line",
    )

    reference_manual: str = Field(
        default="Lua manual",
        description="Name of the manual that @see{} and @seeF{} refer to",
    )

    date_format: str = Field(
        default="%b %d, %Y",
        description="strftime format of the date in the .TH line",
    )

    # Include header selection
    aux_prefix: str = Field(
        default="luaL_",
        description="Name prefix of entries belonging to the auxiliary library",
    )

    aux_header: str = Field(
        default="lauxlib.h",
        description="Header included by auxiliary library entries",
    )

    core_header: str = Field(
        default="lua.h",
        description="Header included by all other entries",
    )

    # Conversion behaviour
    strict_mode: bool = Field(
        default=False,
        description="Strict mode: treat warnings as errors",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        """Environment beats .env, which beats ofman.yaml"""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    def placeHolder_make(self, index: int) -> str:
        """
        Generate a placeholder string for a verbatim block at given index.

        Args:
            index: Zero-based index of the stored verbatim block

        Returns:
            Placeholder string (e.g., "\\x00VERBATIM_0\\x00")

        Example:
            >>> settings = AppSettings()
            >>> settings.placeHolder_make(0)
            '\\x00VERBATIM_0\\x00'
        """
        return f"{self.placeholder_prefix}{index}{self.placeholder_suffix}"

    def verbatimIndex_extract(self, placeholder: str) -> int | None:
        """
        Extract the verbatim block index from a placeholder string.

        Args:
            placeholder: Placeholder string to parse

        Returns:
            Block index if valid placeholder, None otherwise

        Example:
            >>> settings = AppSettings()
            >>> settings.verbatimIndex_extract('\\x00VERBATIM_3\\x00')
            3
        """
        if not placeholder.startswith(self.placeholder_prefix):
            return None
        if not placeholder.endswith(self.placeholder_suffix):
            return None

        content = placeholder[len(self.placeholder_prefix) : -len(self.placeholder_suffix)]

        try:
            return int(content)
        except ValueError:
            return None

    def header_select(self, name: str) -> str:
        """Include header for an entry name"""
        return self.aux_header if name.startswith(self.aux_prefix) else self.core_header


# Singleton instance - import this in your code
appsettings = AppSettings()
