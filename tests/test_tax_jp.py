#
# Copyright (c) 2025 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#


import dataclasses
import typing

import pytest

from contextlib import nullcontext
from decimal import Decimal

from tax.jp import *


@pytest.mark.parametrize("bands", [employment_income_deduction_bands, income_tax_bands], ids=["employment", "income_tax"])
def test_bands(bands):
    check_bands(bands)
    assert bands[-1][0] is None


@pytest.mark.parametrize("amount,rate,constant", [
    (0,          Decimal('0.05'),       0),
    (1950000,    Decimal('0.05'),       0),
    (1950001,    Decimal('0.10'),   97500),
    (3300000,    Decimal('0.10'),   97500),
    (6950000,    Decimal('0.20'),  427500),
    (8999000,    Decimal('0.23'),  636000),
    (9000000,    Decimal('0.33'), 1536000),
    (17999000,   Decimal('0.33'), 1536000),
    (39999000,   Decimal('0.40'), 2796000),
    (40000000,   Decimal('0.45'), 4796000),
    (10**12,     Decimal('0.45'), 4796000),
])
def test_lookup_income_tax(amount, rate, constant):
    assert lookup(income_tax_bands, Decimal(amount)) == (rate, constant)


def test_lookup_catch_all():
    rate, constant = lookup(employment_income_deduction_bands, Decimal(10**9))
    assert rate == 0
    assert constant == 1950000


def test_r7():
    assert r7.basic_deduction_national == 480000
    assert r7.basic_deduction_resident == 430000
    assert r7.basic_deduction_resident < r7.basic_deduction_national
    assert r7.dependent_deduction == 380000
    assert r7.stock_rate_national + r7.stock_rate_resident == Decimal('0.20')
    assert r7.stock_rate_national * (1 + r7.reconstruction_rate) + r7.stock_rate_resident == r7.nisa_equivalent_rate
    assert r7.resident_per_capita == 5000
    assert r7.income_tax_bands is income_tax_bands
    assert fiscal_years[FiscalYear(2025)] is r7


def test_constants_immutable():
    with pytest.raises(dataclasses.FrozenInstanceError):
        r7.resident_per_capita = 0  # type: ignore[misc]


def test_constants_replace():
    constants = dataclasses.replace(r7, fixed_credit_national=0, fixed_credit_resident=0)
    assert constants.fixed_credit_national == 0
    assert r7.fixed_credit_national == 30000


def test_constants_unsorted_bands():
    bands = (
        (2000000, Decimal('0.10'), 0),
        (1000000, Decimal('0.05'), 0),
        (None,    Decimal('0.20'), 0),
    )
    with pytest.raises(AssertionError):
        dataclasses.replace(r7, income_tax_bands=bands)


str_to_fiscal_year_params = [
    ("2025",     nullcontext(FiscalYear(2025))),
    ("25",       nullcontext(FiscalYear(2025))),
    (" 2025 ",   nullcontext(FiscalYear(2025))),
    ("R7",       nullcontext(FiscalYear(2025))),
    ("r07",      nullcontext(FiscalYear(2025))),
    ("Reiwa 7",  nullcontext(FiscalYear(2025))),
    ("令和7",    nullcontext(FiscalYear(2025))),
    ("令和7年",  nullcontext(FiscalYear(2025))),
    ("R1",       nullcontext(FiscalYear(2019))),
    ("R0",       pytest.raises(ValueError)),
    ("2018",     pytest.raises(ValueError)),
    ("202",      pytest.raises(ValueError)),
    ("10000",    pytest.raises(ValueError)),
    ("H30",      pytest.raises(ValueError)),
    ("XX",       pytest.raises(ValueError)),
    ("",         pytest.raises(ValueError)),
]

@pytest.mark.parametrize("s,eyc", [pytest.param(s, eyc, id=s or 'empty') for s, eyc in str_to_fiscal_year_params])
def test_str_to_fiscal_year(s:str, eyc:typing.ContextManager) -> None:
    with eyc as ey:
        assert FiscalYear.from_string(s) == ey


def test_fiscal_year_str():
    fy = FiscalYear(2025)
    assert fy.reiwa == 7
    assert str(fy) == '2025 (R7)'
    assert FiscalYear.from_string(f'R{fy.reiwa}') == fy
