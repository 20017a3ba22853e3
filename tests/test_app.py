"""
Smoke tests for the Streamlit views, run headless against the in-memory database.
"""

from streamlit.testing.v1 import AppTest

from models import AssetType, Country
from repositories import InvestmentRepository


def run_app(view, investment_id=None):
    at = AppTest.from_file("../app.py", default_timeout=30)
    at.session_state["user_id"] = "alice"
    at.query_params["view"] = view
    if investment_id is not None:
        at.query_params["investment_id"] = str(investment_id)
    return at.run()


def button_labels(at):
    return [button.label for button in at.button]


class TestInvestmentDetailView:

    def test_unknown_investment_shows_one_back_button(self, engine):
        at = run_app("investment", 999)

        assert not at.exception
        assert [info.value for info in at.info] == ["Investment not found"]
        labels = button_labels(at)
        assert labels.count("Go Back") == 1
        assert "← Back" not in labels

    def test_known_investment_shows_header_back_button(self, engine):
        investment = InvestmentRepository.add("alice", "Infosys", AssetType.EQUITY, Country.INDIA)

        at = run_app("investment", investment.id)

        assert not at.exception
        assert at.header[0].value == "Infosys"
        labels = button_labels(at)
        assert "← Back" in labels
        assert "Go Back" not in labels
