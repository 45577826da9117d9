import pytest
from datetime import date
from decimal import Decimal

from ledger_engine.categorization import EntryClassifier, KeywordRule, RegexRule, DefaultRule
from ledger_engine.categorization.categories import UNCATEGORIZED
from ledger_engine.domain.enums import EntryType, FlowDirection, ImportSource
from ledger_engine.domain.models import RawDocumentLine

def line(description: str, amount: str = "-25.00", account_hint=None) -> RawDocumentLine:
    return RawDocumentLine(
        date=date(2024, 1, 15),
        amount=Decimal(amount),
        description=description,
        account_hint=account_hint,
    )

@pytest.fixture
def classifier() -> EntryClassifier:
    """Built-in rules only"""
    return EntryClassifier(config={"rules": []})


@pytest.mark.unit
class TestBuiltInClassification:

    @pytest.mark.parametrize("description", [
        "Payment received - ACME",
        "BANK TRANSFER RECEIVED 0042",
        "Invoice paid #88",
    ])
    def test_revenue_phrases(self, classifier: EntryClassifier, description):
        assert classifier.classify(line(description, "900")) == EntryType.REVENUE

    @pytest.mark.parametrize("description", [
        "Internal transfer to savings",
        "Account Transfer 123",
    ])
    def test_transfer_phrases(self, classifier: EntryClassifier, description):
        assert classifier.classify(line(description)) == EntryType.TRANSFER

    def test_everything_else_is_expense(self, classifier: EntryClassifier):
        assert classifier.classify(line("STARBUCKS 1234")) == EntryType.EXPENSE

    def test_disable_builtin_rules(self):
        classifier = EntryClassifier(config={"rules": []}, use_defaults=False)

        assert classifier.classify(line("Invoice paid #88")) == EntryType.EXPENSE


@pytest.mark.unit
class TestUserRules:

    def test_user_rules_take_priority(self):
        # Arrange - "invoice paid" is a built-in revenue phrase
        config = {
            "rules": [
                {"entry_type": "royalty", "type": "keyword", "patterns": ["invoice paid"]},
            ]
        }
        classifier = EntryClassifier(config=config)

        # Act & Assert
        assert classifier.classify(line("Invoice paid #88")) == EntryType.ROYALTY

    def test_regex_rule(self):
        config = {
            "rules": [
                {"entry_type": "tax", "type": "regex", "patterns": [r"^IRS\b"]},
            ]
        }
        classifier = EntryClassifier(config=config)

        assert classifier.classify(line("IRS USATAXPYMT")) == EntryType.TAX
        assert classifier.classify(line("FIRST IRS")) == EntryType.EXPENSE

    def test_direction_filter(self):
        config = {
            "rules": [
                {"entry_type": "fee", "type": "keyword", "patterns": ["wire"], "direction": "out"},
                {"entry_type": "revenue", "type": "keyword", "patterns": ["wire"], "direction": "in"},
            ]
        }
        classifier = EntryClassifier(config=config)

        assert classifier.classify(line("Wire 0001", "-15")) == EntryType.FEE
        assert classifier.classify(line("Wire 0001", "1500")) == EntryType.REVENUE

    def test_unknown_rule_type_is_rejected(self):
        with pytest.raises(ValueError):
            EntryClassifier(config={"rules": [{"entry_type": "fee", "type": "glob", "patterns": ["*"]}]})

    def test_missing_user_config_falls_back_to_builtins(self, mocker):
        mocker.patch(
            "ledger_engine.config.settings.ConfigLoader.load_classification_config",
            side_effect=FileNotFoundError,
        )

        classifier = EntryClassifier()

        assert classifier.classify(line("Payment received")) == EntryType.REVENUE
        assert "UserDefinedRule" not in classifier.get_rule_chain_info()


@pytest.mark.unit
class TestCandidateBuilding:

    def test_to_ledger_entry(self, classifier: EntryClassifier):
        entry = classifier.to_ledger_entry(line("STARBUCKS", "-4.50"), "checking", ImportSource.XLSX)

        assert entry.id is None
        assert entry.amount == Decimal("4.50")
        assert entry.type == EntryType.EXPENSE
        assert entry.category == UNCATEGORIZED
        assert entry.bank_account == "checking"
        assert entry.imported_from == ImportSource.XLSX
        assert entry.linked_bank_entry_id is None

    def test_account_hint_wins_over_default(self, classifier: EntryClassifier):
        entry = classifier.to_ledger_entry(line("x", account_hint="amex"), "checking")

        assert entry.bank_account == "amex"
        assert entry.imported_from == ImportSource.PDF

    def test_batch_keeps_input_order(self, classifier: EntryClassifier):
        entries = classifier.to_ledger_entries(
            [line("a"), line("Invoice paid", "10"), line("c")], "checking", "ods"
        )

        assert [e.description for e in entries] == ["a", "Invoice paid", "c"]
        assert [e.type for e in entries] == [EntryType.EXPENSE, EntryType.REVENUE, EntryType.EXPENSE]
        assert all(e.imported_from == ImportSource.ODS for e in entries)


@pytest.mark.unit
class TestRuleChain:

    def test_chain_info_lists_rules_in_priority_order(self):
        config = {"rules": [{"entry_type": "fee", "patterns": ["fee"]}]}
        classifier = EntryClassifier(config=config)

        info = classifier.get_rule_chain_info().splitlines()

        assert info[0] == "1. UserDefinedRule(1 rules)"
        assert info[-1] == "4. DefaultRule('expense')"
        assert repr(classifier) == "EntryClassifier(4 rules in chain)"

    def test_manual_chain(self):
        keyword = KeywordRule({EntryType.ROYALTY: ["royalty"]}, FlowDirection.IN)
        regex = RegexRule({EntryType.TAX: [r"\bvat\b"]})
        keyword.set_next(regex).set_next(DefaultRule(EntryType.FEE))

        assert keyword.classify(line("Royalty Q1", "300")) == EntryType.ROYALTY
        assert keyword.classify(line("Royalty Q1", "-300")) == EntryType.FEE
        assert keyword.classify(line("VAT return")) == EntryType.TAX

    def test_chain_without_default_can_return_none(self):
        rule = KeywordRule({EntryType.TAX: ["vat"]})

        assert rule.classify(line("coffee")) is None
