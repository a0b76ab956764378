"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use MDCSTREAM_ prefix (e.g., MDCSTREAM_DEFAULT_SPEED=fast).

Settings can also be loaded from a .env file in the project root.
"""

from typing import Dict

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use MDCSTREAM_ prefix.

    Examples:
        MDCSTREAM_DEFAULT_SPEED=slow
        MDCSTREAM_SPEED_FAST_MS=2
        MDCSTREAM_PYGMENTS_STYLE=monokai
    """

    model_config = SettingsConfigDict(
        env_prefix="MDCSTREAM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Reveal cadence presets (milliseconds per tick)
    speed_slow_ms: int = Field(default=30, ge=0, description="Tick interval for the 'slow' preset")
    speed_normal_ms: int = Field(default=15, ge=0, description="Tick interval for the 'normal' preset")
    speed_fast_ms: int = Field(default=5, ge=0, description="Tick interval for the 'fast' preset")

    default_speed: str = Field(
        default="normal",
        description="Speed preset used when none is given",
    )

    # Chunk sizes drawn uniformly from [chunk_min, chunk_max] on every tick
    chunk_min: int = Field(default=1, ge=1, description="Smallest number of characters revealed per tick")
    chunk_max: int = Field(default=3, ge=1, description="Largest number of characters revealed per tick")

    # Render tree keys
    key_root: str = Field(default="root", description="Key of the render tree root")
    key_separator: str = Field(default="-", description="Separator between structural indices in keys")

    fallback_label: str = Field(
        default="Unknown component",
        description="Label prefix of the placeholder shown for unregistered components",
    )

    # Parser configuration
    markdown_preset: str = Field(
        default="commonmark",
        description="markdown-it-py preset the MDC parser is built on",
    )

    # Output configuration
    pygments_style: str = Field(
        default="monokai",
        description="Pygments style used for highlighted code blocks in HTML output",
    )

    def speeds_get(self) -> Dict[str, int]:
        """Return the speed presets as a name -> milliseconds mapping"""
        return {
            "slow": self.speed_slow_ms,
            "normal": self.speed_normal_ms,
            "fast": self.speed_fast_ms,
        }

    def interval_resolve(self, speed: str) -> int:
        """
        Resolve a speed preset name to its tick interval.

        Args:
            speed: Preset name ("slow", "normal" or "fast"), case-insensitive

        Returns:
            Tick interval in milliseconds

        Raises:
            ValueError: If the preset name is unknown

        Example:
            >>> settings = AppSettings()
            >>> settings.interval_resolve("fast")
            5
        """
        speeds = self.speeds_get()
        try:
            return speeds[speed.lower()]
        except KeyError:
            raise ValueError(
                f"Unknown speed preset '{speed}' (expected one of: {', '.join(speeds)})"
            ) from None

    def key_make(self, parent: str, index: int) -> str:
        """
        Build the structural key of a child from its parent's key.

        Example:
            >>> settings = AppSettings()
            >>> settings.key_make("root-0", 1)
            'root-0-1'
        """
        return f"{parent}{self.key_separator}{index}"


# Singleton instance - import this in your code
appsettings = AppSettings()
