"""Configuration management."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library settings pulled from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PY_DELAUNAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(
        default="console", description="Logging format (console or json)"
    )

    # Triangulation
    super_triangle_margin: float = Field(
        default=2.0,
        gt=0.625,
        description="Scale factor of the super triangle relative to the point bounding box",
    )
    degenerate_tolerance: float = Field(
        default=1e-12,
        ge=0.0,
        description="Relative determinant below which a triangle counts as collinear",
    )

    # Spatial index
    quadtree_capacity: int = Field(
        default=4, ge=1, description="Points held by a quadtree node before it splits"
    )
    quadtree_max_depth: int = Field(
        default=8, ge=0, description="Maximum quadtree subdivision depth"
    )


settings = Settings()
