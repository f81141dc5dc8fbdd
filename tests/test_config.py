# tests/test_config.py

from mccat.config import (
    DEFAULT_BUFFER_SIZE,
    DEFAULT_PING_INTERVAL,
    load_config,
)


# Test case 1: Config file does not exist
def test_load_config_no_file(tmp_path):
    config_path = tmp_path / "non_existent_config.conf"
    settings = load_config(str(config_path))
    assert settings["buffer_size"] == DEFAULT_BUFFER_SIZE
    assert settings["ping_interval"] == DEFAULT_PING_INTERVAL


# Test case 2: Config file exists but is empty
def test_load_config_empty_file(tmp_path):
    config_path = tmp_path / "empty_config.conf"
    config_path.touch()  # Create an empty file
    settings = load_config(str(config_path))
    assert settings["buffer_size"] == DEFAULT_BUFFER_SIZE
    assert settings["ping_interval"] == DEFAULT_PING_INTERVAL


# Test case 3: Config file exists but is invalid (malformed INI)
def test_load_config_invalid_file(tmp_path, capsys):
    config_path = tmp_path / "invalid_config.conf"
    config_path.write_text("this is not valid ini format")
    settings = load_config(str(config_path))

    # Check that a warning was printed
    captured = capsys.readouterr()
    assert "[WARNING] Could not parse config file" in captured.err

    # Should still return default settings
    assert settings["buffer_size"] == DEFAULT_BUFFER_SIZE
    assert settings["ping_interval"] == DEFAULT_PING_INTERVAL


# Test case 4: Config file exists but without [mccat] section
def test_load_config_no_mccat_section(tmp_path):
    config_path = tmp_path / "no_mccat_section.conf"
    config_path.write_text(
        """
[other_section]
key=value
"""
    )
    settings = load_config(str(config_path))
    assert settings["buffer_size"] == DEFAULT_BUFFER_SIZE
    assert settings["ping_interval"] == DEFAULT_PING_INTERVAL


# Test case 5: Config file exists with [mccat] section but missing some keys
def test_load_config_missing_keys(tmp_path):
    config_path = tmp_path / "missing_keys.conf"
    config_path.write_text(
        """
[mccat]
ping_interval = 1.5
"""
    )
    settings = load_config(str(config_path))
    assert settings["buffer_size"] == DEFAULT_BUFFER_SIZE
    assert settings["ping_interval"] == 1.5


# Test case 6: Config file exists and is valid, with all keys present
def test_load_config_valid_file(tmp_path):
    config_path = tmp_path / "valid_config.conf"
    config_content = """
[mccat]
buffer_size = 2048
ping_interval = 0.1
"""
    config_path.write_text(config_content)
    settings = load_config(str(config_path))
    assert settings["buffer_size"] == 2048
    assert settings["ping_interval"] == 0.1


# Test case 7: A value that does not convert keeps its default
def test_load_config_bad_value(tmp_path, capsys):
    config_path = tmp_path / "bad_value.conf"
    config_path.write_text(
        """
[mccat]
buffer_size = lots
ping_interval = 2
"""
    )
    settings = load_config(str(config_path))

    captured = capsys.readouterr()
    assert "[WARNING] Invalid value for 'buffer_size'" in captured.err
    assert settings["buffer_size"] == DEFAULT_BUFFER_SIZE
    assert settings["ping_interval"] == 2.0
