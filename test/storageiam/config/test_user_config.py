import configparser

from storageiam.config import ConfigVariable, configuration_of, get_user_config_path


def write_user_config(section, option, value):
    config = configparser.ConfigParser()
    config[section] = {option: value}
    path = get_user_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        config.write(f)


def test_user_config_path(isolated_config):
    assert get_user_config_path() == isolated_config / 'storageiam' / 'config.ini'


def test_fallback():
    assert configuration_of(ConfigVariable.STORAGE_BASE_PATH, None, 'default') == 'default'


def test_precedence(monkeypatch):
    write_user_config('storage', 'base_path', 'from-file')
    assert configuration_of(ConfigVariable.STORAGE_BASE_PATH, None, 'default') == 'from-file'

    monkeypatch.setenv('STORAGEIAM_STORAGE_BASE_PATH', 'from-env')
    assert configuration_of(ConfigVariable.STORAGE_BASE_PATH, None, 'default') == 'from-env'

    assert configuration_of(ConfigVariable.STORAGE_BASE_PATH, 'explicit', 'default') == 'explicit'


def test_global_section(monkeypatch):
    write_user_config('global', 'user_agent', 'from-file')
    assert configuration_of(ConfigVariable.USER_AGENT, None, None) == 'from-file'
    monkeypatch.setenv('STORAGEIAM_GLOBAL_USER_AGENT', 'from-env')
    assert configuration_of(ConfigVariable.USER_AGENT, None, None) == 'from-env'
