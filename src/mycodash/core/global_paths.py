"""Per-user directory paths for the dashboard.

Follows the platform conventions from platformdirs (XDG on Linux).
"""

from pathlib import Path

from platformdirs import user_config_dir, user_data_dir, user_state_dir

APP_NAME = "mycodash"


class GlobalPath:
    """Global path management for dashboard directories."""

    _initialized = False

    @classmethod
    def data(cls) -> str:
        """Application data directory."""
        return user_data_dir(APP_NAME)

    @classmethod
    def log(cls) -> str:
        """Log file directory."""
        return str(Path(cls.data()) / "log")

    @classmethod
    def config(cls) -> str:
        """Configuration directory."""
        return user_config_dir(APP_NAME)

    @classmethod
    def state(cls) -> str:
        """State data directory (theme preference)."""
        return user_state_dir(APP_NAME)

    @classmethod
    def initialize(cls) -> None:
        """Create the config and state directories once per process."""
        if cls._initialized:
            return

        for path in [cls.config(), cls.state()]:
            Path(path).mkdir(parents=True, exist_ok=True)

        cls._initialized = True
