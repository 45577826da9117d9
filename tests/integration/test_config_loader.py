import json
import pytest
from decimal import Decimal

from ledger_engine.config import settings
from ledger_engine.config.settings import AnalyticsSettings, ConfigLoader, MatchingSettings
from ledger_engine.categorization import EntryClassifier
from ledger_engine.domain.enums import EntryType
from ledger_engine.domain.models import RawDocumentLine

@pytest.fixture
def user_config_dir(tmp_path, monkeypatch):
    """Point the loader at an empty temporary user config directory"""
    monkeypatch.setattr(settings, "USER_CONFIG_DIR", tmp_path)
    return tmp_path


@pytest.mark.integration
class TestConfigLoader:

    def test_package_defaults_are_used(self, user_config_dir):
        assert ConfigLoader.load_analytics_config()["risk_window_days"] == 60
        assert AnalyticsSettings.from_config() == AnalyticsSettings()

    def test_user_config_overrides_defaults(self, user_config_dir):
        (user_config_dir / "matching.json").write_text(json.dumps({"max_day_gap": 10}))

        matching = MatchingSettings.from_config()

        assert matching.max_day_gap == 10
        assert matching.amount_tolerance == Decimal("0.05")

    def test_missing_config_raises(self, user_config_dir):
        with pytest.raises(FileNotFoundError):
            ConfigLoader.load_config("does_not_exist.json")

    def test_classifier_without_user_rules(self, user_config_dir):
        classifier = EntryClassifier()

        assert repr(classifier) == "EntryClassifier(3 rules in chain)"

    def test_classifier_reads_user_rules(self, user_config_dir):
        (user_config_dir / "classification_rules.json").write_text(json.dumps({
            "rules": [{"entry_type": "fee", "type": "keyword", "patterns": ["monthly fee"]}]
        }))

        classifier = EntryClassifier()

        assert classifier.classify(RawDocumentLine("2024-01-01", "-9", "MONTHLY FEE")) == EntryType.FEE
