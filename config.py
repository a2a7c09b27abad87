# ResultSheet - Student results manager
# Copyright (C) 2026 (linuxdev)
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.


from typing import Tuple, Type
from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

CONFIG_FILE = "config.json"

# Setting keys the presentation layer reads, with their fallbacks
DEFAULT_BRANDING = {
    "app_name": "IDEAL INSPIRATION CLASSES",
    "director": "EHSAN SIR",
    "manager": "NADIM ANWAR",
    "session_name": "SESSION 2025-26",
    "app_link": "",
    "app_name_display": "Download Our App",
}


class Settings(BaseSettings):
    """Application configuration.

    Values come from keyword arguments, ``RESULTS_*`` environment variables,
    a ``.env`` file and finally ``config.json`` written by ``setup_db.py``.
    """

    database_url: str = "sqlite:///./results.db"
    secret_key: str = "change-me"
    admin_email: str = "admin@example.com"
    admin_password: str = "admin"
    log_level: str = "INFO"
    lock_unpaid_results: bool = False
    session_cookie: str = "results_session"

    model_config = SettingsConfigDict(
        env_prefix="RESULTS_",
        env_file=".env",
        json_file=CONFIG_FILE,
        json_file_encoding="utf-8",
        extra="ignore",
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
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            JsonConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


settings = Settings()
