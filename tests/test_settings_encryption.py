import os
import sys
import unittest
import keyring
sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from config import YamlConfig, load_settings
from settings_schema import validate_settings

class DummyKeyring(keyring.backend.KeyringBackend):
    priority = 1
    def __init__(self):
        self.store = {}
    def get_password(self, service, username):
        return self.store.get((service, username))
    def set_password(self, service, username, password):
        self.store[(service, username)] = password
    def delete_password(self, service, username):
        self.store.pop((service, username), None)

class SettingsEncryptionTest(unittest.TestCase):
    def setUp(self) -> None:
        keyring.set_keyring(DummyKeyring())
        os.environ['ENCRYPT_SETTINGS'] = '1'
        self.path = 'enc_settings.yaml'
        if os.path.exists(self.path):
            os.remove(self.path)

    def tearDown(self) -> None:
        if os.path.exists(self.path):
            os.remove(self.path)
        os.environ.pop('ENCRYPT_SETTINGS', None)

    def test_encrypt_and_load(self) -> None:
        cfg = YamlConfig(self.path)
        cfg.save({'api_key': 'secret', 'model': 'gemini-2.5-flash'})
        self.assertTrue(os.path.exists(self.path))
        with open(self.path, encoding='utf-8') as f:
            self.assertNotIn('secret', f.read())
        data = cfg.load()
        self.assertEqual(data['api_key'], 'secret')
        self.assertEqual(data['model'], 'gemini-2.5-flash')

class LoadSettingsTest(unittest.TestCase):
    def setUp(self) -> None:
        self.path = 'load_settings.yaml'
        self.saved_env = {k: os.environ.pop(k, None) for k in ('API_KEY', 'GEMINI_API_KEY', 'LOG_LEVEL', 'ENCRYPT_SETTINGS')}

    def tearDown(self) -> None:
        if os.path.exists(self.path):
            os.remove(self.path)
        for k, v in self.saved_env.items():
            os.environ.pop(k, None)
            if v is not None:
                os.environ[k] = v

    def test_defaults_without_file(self) -> None:
        settings = load_settings(self.path)
        self.assertEqual(settings.model, 'gemini-2.5-flash')
        self.assertIsNone(settings.api_key)
        self.assertEqual(settings.default_duration, 45)

    def test_environment_overrides(self) -> None:
        YamlConfig(self.path).save({'api_key': 'from-file', 'streak_days': 5})
        os.environ['GEMINI_API_KEY'] = 'from-env'
        os.environ['LOG_LEVEL'] = 'DEBUG'
        settings = load_settings(self.path)
        self.assertEqual(settings.api_key, 'from-env')
        self.assertEqual(settings.log_level, 'DEBUG')
        self.assertEqual(settings.streak_days, 5)

    def test_invalid_settings(self) -> None:
        with self.assertRaises(ValueError):
            validate_settings({'default_duration': -1})

if __name__ == '__main__':
    unittest.main()
