from constants import *
from werkzeug.security import generate_password_hash
import copy
import yaml
import os

import logging

# Retrieve main logger
logger = logging.getLogger("main")


# Cache variable
_cached_settings = None


def _merge_defaults(settings):
    merged_settings = copy.deepcopy(DEFAULT_SETTINGS)
    for section, values in settings.items():
        if isinstance(values, dict) and section in merged_settings and isinstance(merged_settings[section], dict):
            merged_settings[section].update(values)
        else:
            merged_settings[section] = values
    return merged_settings


def _apply_env_overrides(settings):
    """Environment variables win over the settings file."""
    if os.environ.get("DATABASE_URL"):
        settings["database"]["url"] = os.environ["DATABASE_URL"]
    if os.environ.get("ADMIN_PASSWORD"):
        settings["auth"]["admin_password_hash"] = generate_password_hash(os.environ["ADMIN_PASSWORD"])
    if os.environ.get("RECAPTCHA_SECRET_KEY"):
        settings["recaptcha"]["secret_key"] = os.environ["RECAPTCHA_SECRET_KEY"]
    return settings


def load_settings(force=False):
    global _cached_settings

    if _cached_settings and not force:
        return _cached_settings

    if os.path.exists(CONFIG_FILE):
        logger.debug(f"Reading configuration file: {CONFIG_FILE}")
        with open(CONFIG_FILE, "r") as yaml_file:
            settings = yaml.safe_load(yaml_file) or {}
        settings = _merge_defaults(settings)
    else:
        settings = copy.deepcopy(DEFAULT_SETTINGS)
        os.makedirs(os.path.dirname(CONFIG_FILE), exist_ok=True)
        with open(CONFIG_FILE, "w") as yaml_file:
            yaml.dump(settings, yaml_file)

    _cached_settings = _apply_env_overrides(settings)
    return _cached_settings


def save_section(section, values):
    """Persist one settings section and refresh the cache."""
    # Start from the file, not the cache, so environment overrides are not persisted
    stored = {}
    if os.path.exists(CONFIG_FILE):
        with open(CONFIG_FILE, "r") as yaml_file:
            stored = yaml.safe_load(yaml_file) or {}
    stored.setdefault(section, {}).update(values)
    os.makedirs(os.path.dirname(CONFIG_FILE), exist_ok=True)
    with open(CONFIG_FILE, "w") as yaml_file:
        yaml.dump(stored, yaml_file)
    return reload_conf()


def database_url(settings):
    return settings["database"].get("url") or PORTAL_DB


def engine_options(url, database_settings):
    """Pool options for the SQLAlchemy engine.

    SQLite uses its own single-file pooling, so the bounded pool is only
    applied to server databases.
    """
    if url.startswith("sqlite"):
        return {}
    return {
        "pool_size": database_settings["pool_size"],
        "max_overflow": 0,
        "pool_timeout": database_settings["pool_timeout"],
        "pool_recycle": database_settings["pool_recycle"],
        "pool_pre_ping": True,
    }


def reload_conf():
    """Reload application settings cache"""
    global _cached_settings
    _cached_settings = None
    return load_settings(force=True)
