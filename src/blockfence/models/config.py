"""Configuration models for Blockfence."""

from pathlib import Path

from pydantic import BaseModel, Field
import yaml


class EditorConfig(BaseModel):
    """Behaviour of the block and code editors."""

    auto_indent: bool = Field(
        default=True,
        description="Seed new code lines with inherited or language-aware indentation"
    )

    auto_pair: bool = Field(
        default=True,
        description="Auto-close brackets in code and backticks in block text"
    )

    indent_width: int = Field(
        default=2,
        ge=1,
        le=8,
        description="Columns inserted by Tab inside the code editor"
    )

    show_line_numbers: bool = Field(
        default=True,
        description="Show the line-number gutter in the code editor overlay"
    )

    syntax_highlighting: bool = Field(
        default=False,
        description="Highlight code with tree-sitter when the language is installed"
    )

    theme: str = Field(
        default="css",
        description="TextArea theme for the code editor overlay"
    )

    model_config = {"frozen": True}


class SessionConfig(BaseModel):
    """Timing used by the headless editor session driver."""

    settle_timeout: float = Field(
        default=5.0,
        gt=0.0,
        description="Seconds to wait for a mode transition to become visible"
    )

    poll_interval: float = Field(
        default=0.02,
        gt=0.0,
        le=1.0,
        description="Seconds between state polls while waiting"
    )

    model_config = {"frozen": True}


class Config(BaseModel):
    """Root configuration for Blockfence."""

    editor: EditorConfig = Field(default_factory=EditorConfig, description="Editor settings")
    session: SessionConfig = Field(default_factory=SessionConfig, description="Session driver settings")

    @classmethod
    def load(cls, path: Path) -> "Config":
        """
        Load configuration from YAML file.

        Args:
            path: Path to config.yaml file

        Returns:
            Validated Config instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If YAML is invalid or validation fails
        """
        if not path.exists():
            raise FileNotFoundError(
                f"Configuration file not found at {path}\n\n"
                f"Example configuration:\n\n"
                f"editor:\n"
                f"  auto_indent: true\n"
                f"  auto_pair: true\n"
                f"  indent_width: 2\n\n"
                f"session:\n"
                f"  settle_timeout: 5.0\n"
            )

        with open(path) as f:
            data = yaml.safe_load(f)

        # An empty file is a valid, all-defaults config
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"Configuration must be a mapping, got {type(data).__name__}")

        return cls(**data)

    model_config = {"frozen": True}
