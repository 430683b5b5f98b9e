#!src/azstore_app/storage/settings.py
from __future__ import annotations

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AzuriteSettings(BaseSettings):
    """Settings for the local Azurite emulator container.

    Attributes:
        docker_bin: Docker CLI executable.
        container_name: Name of the emulator container.
        image: Image used when the container has to be created.
        ports: Host ports published one to one (blob, queue, table).
        volume: Named volume mounted on /data for persistence.
        startup_delay_s: Pause after starting the container before tailing it.
    """

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore"
    )

    docker_bin: str = Field(default="docker", validation_alias="AZSTORE_DOCKER_BIN")
    container_name: str = Field(
        default="azurite-emulator", validation_alias="AZSTORE_AZURITE_CONTAINER"
    )
    image: str = Field(
        default="mcr.microsoft.com/azure-storage/azurite",
        validation_alias="AZSTORE_AZURITE_IMAGE",
    )
    ports: List[int] = Field(
        default_factory=lambda: [10000, 10001, 10002],
        validation_alias="AZSTORE_AZURITE_PORTS",
    )
    volume: str = Field(default="azurite_data", validation_alias="AZSTORE_AZURITE_VOLUME")
    startup_delay_s: float = Field(
        default=2.0, validation_alias="AZSTORE_AZURITE_STARTUP_DELAY"
    )
