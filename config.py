"""
設定管理モジュール
JSON形式で設定を保存/読み込み
"""
import json
import logging
import os

logger = logging.getLogger(__name__)

OUTPUT_STYLES = ('center', 'box', 'json')


class Config:
    def __init__(self, config_file='locator_config.json'):
        self.config_file = config_file
        self.settings = self._load_default_settings()
        self.load()

    def _load_default_settings(self):
        """デフォルト設定"""
        return {
            # encode 設定
            'encode': {
                'precision': 4,  # 1=2桁, 2=4桁, 3=6桁, 4=8桁, 5=10桁
            },

            # decode 設定
            'decode': {
                'output': 'center',  # 'center', 'box', 'json'
                'digits': 6,  # 小数点以下の桁数
            },

            # ログ設定
            'logging': {
                'level': 'WARNING',
            },

            # デバッグモード
            'debug': False,
        }

    def load(self):
        """設定をファイルから読み込み"""
        try:
            if os.path.exists(self.config_file):
                with open(self.config_file, 'r', encoding='utf-8') as f:
                    loaded = json.load(f)
                if not isinstance(loaded, dict):
                    logger.warning("Config ignored (not an object): %s", self.config_file)
                    return False
                # デフォルト設定にマージ（新しいキーがあっても対応）
                self._merge_settings(self.settings, loaded)
                return True
        except (OSError, ValueError) as e:
            logger.warning("Config load failed: %s (%s)", self.config_file, e)
        return False

    def _merge_settings(self, default, loaded):
        """デフォルト設定に読み込んだ設定をマージ"""
        for key, value in loaded.items():
            if key in default:
                if isinstance(value, dict) and isinstance(default[key], dict):
                    self._merge_settings(default[key], value)
                else:
                    default[key] = value

    def save(self):
        """設定をファイルに保存"""
        try:
            with open(self.config_file, 'w', encoding='utf-8') as f:
                json.dump(self.settings, f, indent=4, ensure_ascii=False)
            return True
        except OSError as e:
            logger.warning("Config save failed: %s (%s)", self.config_file, e)
            return False

    def get(self, *keys):
        """設定を取得（ネストされたキーに対応）"""
        value = self.settings
        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return None
        return value

    def set(self, *keys, value):
        """設定を変更（ネストされたキーに対応）"""
        if len(keys) == 0:
            return False

        settings = self.settings
        for key in keys[:-1]:
            if key not in settings:
                settings[key] = {}
            settings = settings[key]

        settings[keys[-1]] = value
        return True

    def reset(self):
        """設定をデフォルトに戻す"""
        self.settings = self._load_default_settings()
        return self.save()
