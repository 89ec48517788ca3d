#
# Copyright (c) 2023-2025 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#

"""Japan tax constants and tables."""


import dataclasses
import re
import typing

from decimal import Decimal


# Rows are (upper bound, rate, constant), evaluated by first match against an
# inclusive upper bound.  The last row has no upper bound.
Band = tuple[int | None, Decimal, int]


# https://www.nta.go.jp/taxes/shiraberu/taxanswer/shotoku/1410.htm
#
# Deduction is gross * rate + constant.
employment_income_deduction_bands:tuple[Band, ...] = (
    (   1625000, Decimal('0.0'),   550000),
    (   1800000, Decimal('0.4'),  -100000),
    (   3600000, Decimal('0.3'),    80000),
    (   6600000, Decimal('0.2'),   440000),
    (   8500000, Decimal('0.1'),  1100000),
    (      None, Decimal('0.0'),  1950000),
)


# https://www.nta.go.jp/taxes/shiraberu/taxanswer/shotoku/2260.htm
#
# Tax is income * rate - constant.
income_tax_bands:tuple[Band, ...] = (
    (   1950000, Decimal('0.05'),       0),
    (   3300000, Decimal('0.10'),   97500),
    (   6950000, Decimal('0.20'),  427500),
    (   8999000, Decimal('0.23'),  636000),
    (  17999000, Decimal('0.33'), 1536000),
    (  39999000, Decimal('0.40'), 2796000),
    (      None, Decimal('0.45'), 4796000),
)


def check_bands(bands:tuple[Band, ...]) -> None:
    assert bands
    ubounds = [ubound for ubound, _, _ in bands]
    assert ubounds[-1] is None
    limits = [ubound for ubound in ubounds[:-1] if ubound is not None]
    assert len(limits) == len(ubounds) - 1
    assert limits == sorted(set(limits))


check_bands(employment_income_deduction_bands)
check_bands(income_tax_bands)


def lookup(bands:tuple[Band, ...], amount:Decimal) -> tuple[Decimal, int]:
    """Return the (rate, constant) of the first band whose upper bound is >= amount."""
    for ubound, rate, constant in bands:
        if ubound is None or amount <= ubound:
            return rate, constant
    raise AssertionError('bands lack a catch-all row')  # pragma: no cover


@dataclasses.dataclass(frozen=True)
class TaxConstants:

    # 基礎控除
    basic_deduction_national: int
    basic_deduction_resident: int

    # 扶養控除, general dependents only
    dependent_deduction: int

    # 申告分離課税
    stock_rate_national: Decimal
    stock_rate_resident: Decimal

    # 住民税
    resident_rate: Decimal
    resident_per_capita: int

    # 復興特別所得税
    reconstruction_rate: Decimal

    # 定額減税, per filer and per dependent
    fixed_credit_national: int
    fixed_credit_resident: int

    employment_income_deduction_bands: tuple[Band, ...] = employment_income_deduction_bands
    income_tax_bands: tuple[Band, ...] = income_tax_bands

    # Combined national + resident + surtax rate on listed stocks, used to
    # value tax-exempt account gains.
    nisa_equivalent_rate: Decimal = Decimal('0.20315')

    # ふるさと納税
    furusato_special_rate: Decimal = Decimal('0.20')
    furusato_self_pay: int = 2000

    rounding_unit: int = 1000

    def __post_init__(self) -> None:
        check_bands(self.employment_income_deduction_bands)
        check_bands(self.income_tax_bands)
        assert self.basic_deduction_resident <= self.basic_deduction_national


# https://www.nta.go.jp/users/gensen/teigakugenzei/
r7 = TaxConstants(
    basic_deduction_national = 480000,
    basic_deduction_resident = 430000,
    dependent_deduction      = 380000,
    stock_rate_national      = Decimal('0.15'),
    stock_rate_resident      = Decimal('0.05'),
    resident_rate            = Decimal('0.10'),
    resident_per_capita      = 5000,
    reconstruction_rate      = Decimal('0.021'),
    fixed_credit_national    = 30000,
    fixed_credit_resident    = 10000,
)


# Reiwa 1 is 2019
reiwa_offset = 2018

_reiwa_re = re.compile(r'^(?:R|Reiwa|令和)\s*(\d{1,2})年?$', re.IGNORECASE)


class FiscalYear(typing.NamedTuple):

    year: int

    def __str__(self) -> str:
        return f'{self.year} (R{self.reiwa})'

    @property
    def reiwa(self) -> int:
        return self.year - reiwa_offset

    @classmethod
    def from_string(cls, s:str) -> 'FiscalYear':
        assert isinstance(s, str)
        s = s.strip()
        mo = _reiwa_re.match(s)
        if mo is not None:
            n = int(mo.group(1))
            if n < 1:
                raise ValueError(f'{s} out of range')
            return cls(reiwa_offset + n)
        if not s.isdigit():
            raise ValueError(s)
        y = int(s)
        if len(s) == 2:
            y += 2000
        elif len(s) != 4:
            raise ValueError(f'{s} out of range')
        if y <= reiwa_offset:
            raise ValueError(f'{s} out of range')
        return cls(y)


fiscal_years:dict[FiscalYear, TaxConstants] = {
    FiscalYear(2025): r7,
}
