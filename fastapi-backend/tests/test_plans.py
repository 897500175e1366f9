import pytest

from economics.plans import PLAN_KEYWORDS, PlanCategory, PlanClassifier, classify_plan


@pytest.mark.parametrize(
    "label",
    ["Annual Plan", "YEARLY supporter", "1 Year Access", "Founders (annual)"],
)
def test_annual_labels(label):
    assert classify_plan(label) is PlanCategory.ANNUAL


@pytest.mark.parametrize("label", ["6-Month Plus", "6 month pass", "Semi Pro", "Semi-Pro"])
def test_semiannual_labels(label):
    assert classify_plan(label) is PlanCategory.SEMIANNUAL


@pytest.mark.parametrize("label", ["Monthly", "Gold", "", "  ", "12-month"])
def test_unmatched_labels_default_to_monthly(label):
    assert classify_plan(label) is PlanCategory.MONTHLY


def test_missing_label_is_monthly():
    assert classify_plan(None) is PlanCategory.MONTHLY


@pytest.mark.parametrize(
    "label",
    ["Annual or 6-month", "semi-annual", "6 Month / Yearly", "Semiyear"],
)
def test_annual_keywords_win_over_semiannual(label):
    assert classify_plan(label) is PlanCategory.ANNUAL


def test_annual_checked_before_semiannual_in_default_table():
    assert list(PLAN_KEYWORDS) == [PlanCategory.ANNUAL, PlanCategory.SEMIANNUAL]


def test_custom_keyword_table():
    classifier = PlanClassifier(
        {
            PlanCategory.ANNUAL: ("12 mo",),
            PlanCategory.SEMIANNUAL: ("Half",),
        }
    )
    assert classifier("Pro 12 mo") is PlanCategory.ANNUAL
    assert classifier("half year") is PlanCategory.SEMIANNUAL
    assert classifier("Yearly") is PlanCategory.MONTHLY


def test_custom_default_category():
    classifier = PlanClassifier(default=PlanCategory.ANNUAL)
    assert classifier.classify("Gold") is PlanCategory.ANNUAL
