"""Settings factory for application tests."""

from pathlib import Path

from litecache.core.config.settings import Settings

from tests.test_fixtures.topology import (
    ADMIN_TOKEN,
    APP_NAME,
    INTERNAL_TOKEN,
    KNOWN_INSTANCES,
)


def make_settings(litefs_dir: Path, db_path: Path, instance_id: str, **overrides) -> Settings:
    """Settings for one node of the test topology; keyword overrides win."""
    values = dict(
        CACHE_DATABASE_PATH=str(db_path),
        LITEFS_DIR=str(litefs_dir),
        INSTANCE_ID=instance_id,
        REGION=KNOWN_INSTANCES[instance_id],
        INSTANCES=KNOWN_INSTANCES,
        INSTANCE_INFO_CACHE_SECONDS=0,
        FLY_APP_NAME=APP_NAME,
        INTERNAL_COMMAND_TOKEN=INTERNAL_TOKEN,
        ADMIN_TOKEN=ADMIN_TOKEN,
        LOG_FORMAT="console",
        ENVIRONMENT="production",
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)
