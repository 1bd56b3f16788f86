"""
Pydantic model for application configuration.
Provides robust validation for all settings.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_CACHE_PATH = "cache/podcast_media_state.json"


class PodcastConfig(BaseModel):
    """A validated configuration model for the application."""

    model_config = ConfigDict(validate_assignment=True, str_strip_whitespace=True)

    # Site
    site_name: str = "Podcast"
    site_base_url: str = ""
    theme: str = ""

    # Content and publish trees
    source_dir: str = "content"
    output_dir: str = "public"
    cache_path: str = DEFAULT_CACHE_PATH

    # Remote media
    download_attempts: int = 3

    # Internal fields not loaded from INI file
    config_path: str = Field(default=".", repr=False)

    @field_validator("site_name")
    @classmethod
    def validate_site_name(cls, v: str) -> str:
        """The site name is written into every album tag, so it must not be empty."""
        if not v:
            raise ValueError("Site name cannot be empty.")
        return v

    @field_validator("site_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Ensures the base URL is either unset or an absolute HTTP(S) URL."""
        if v and not v.lower().startswith(("http://", "https://")):
            raise ValueError(
                f"Site base URL must start with http:// or https://, but got: {v}"
            )
        return v

    @field_validator("source_dir", "output_dir", "cache_path")
    @classmethod
    def validate_paths(cls, v: str) -> str:
        if not v:
            raise ValueError("Directory and cache paths cannot be empty.")
        return v

    @field_validator("download_attempts")
    @classmethod
    def validate_attempts(cls, v: int) -> int:
        if v < 1 or v > 10:
            raise ValueError("Download attempts must be between 1 and 10.")
        return v

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        internal_fields = {"config_path"}
        return {key for key in cls.model_fields if key not in internal_fields}
