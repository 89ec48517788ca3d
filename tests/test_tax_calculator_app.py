#
# Copyright (c) 2025 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#


import pytest

try:
    from streamlit.testing.v1 import AppTest
except ImportError:
    pytest.skip("No Streamlit; skipping.", allow_module_level=True)

from jptaxcalc import TaxInput, calculate, yen


default_timeout = 30


@pytest.fixture(scope="function")
def at():
    at = AppTest.from_file("../Home.py", default_timeout=default_timeout)
    at.switch_page('pages/1_Tax_Calculator.py')
    at.run()
    assert not at.exception
    return at


def test_home():
    at = AppTest.from_file("../Home.py", default_timeout=default_timeout)
    at.run()
    assert not at.exception


def test_disclaimer():
    at = AppTest.from_file("../Home.py", default_timeout=default_timeout)
    at.switch_page('pages/9_Disclaimer.py')
    at.run()
    assert not at.exception


def test_run(at):
    # Ensure no state corruption
    at.run()
    assert not at.exception


def test_defaults(at):
    result = calculate(TaxInput(salary_revenue=6000000, social_insurance_paid=900000))
    assert at.metric[0].value == yen(result.total_tax)
    assert at.metric[1].value == yen(result.total_national_income_tax)
    assert at.metric[2].value == yen(result.total_resident_tax)


def test_salary(at):
    salary_revenue = at.number_input(key="salary_revenue")
    assert salary_revenue.value == 6000000
    salary_revenue.set_value(10000000)
    at.run()
    assert not at.exception
    result = calculate(TaxInput(salary_revenue=10000000, social_insurance_paid=900000))
    assert at.metric[0].value == yen(result.total_tax)


@pytest.mark.parametrize("key,value", [
    ("crypto_profit", -500000),
    ("stock_profit", 1000000),
    ("stock_dividends", 200000),
    ("nisa_capital_gains", 300000),
    ("dependents_count", 2),
    ("ideco_contribution", 276000),
    ("life_insurance_deduction", 40000),
])
def test_inputs(at, key, value):
    at.number_input(key=key).set_value(value)
    at.run()
    assert not at.exception


def test_notes(at):
    at.number_input(key="salary_revenue").set_value(30000000)
    at.number_input(key="stock_profit").set_value(1000000)
    at.run()
    assert not at.exception
    assert len(at.warning) == 2
