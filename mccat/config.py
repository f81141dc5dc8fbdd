# mccat/config.py
import configparser
import os
import sys

DEFAULT_CONFIG_PATH = "/etc/mccat.conf"
DEFAULT_BUFFER_SIZE = 16384  # Datagrams larger than this are truncated.
DEFAULT_PING_INTERVAL = 0.25  # Seconds between PING probes.


def load_config(config_path=DEFAULT_CONFIG_PATH):
    """
    Loads configuration from the specified path.
    Returns a dictionary with configuration values.
    """
    config = configparser.ConfigParser()

    # Set default values
    settings = {
        "buffer_size": DEFAULT_BUFFER_SIZE,
        "ping_interval": DEFAULT_PING_INTERVAL,
    }

    if os.path.exists(config_path):
        try:
            config.read(config_path)
            if "mccat" in config:
                mccat_config = config["mccat"]
                settings["buffer_size"] = _read_value(
                    mccat_config.getint, "buffer_size", DEFAULT_BUFFER_SIZE
                )
                settings["ping_interval"] = _read_value(
                    mccat_config.getfloat, "ping_interval", DEFAULT_PING_INTERVAL
                )
        except configparser.Error as e:
            print(
                f"[WARNING] Could not parse config file at {config_path}: {e}",
                file=sys.stderr,
            )
            # Proceed with default settings

    return settings


def _read_value(getter, key, default):
    """Reads a typed option, keeping the default if the value does not convert."""
    try:
        return getter(key, default)
    except ValueError:
        print(
            f"[WARNING] Invalid value for '{key}' in config, using {default}",
            file=sys.stderr,
        )
        return default
