#!/usr/bin/env python3
#
# Copyright (c) 2025 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#

#
# Japanese income tax (所得税) and resident tax (住民税) estimator for an
# employee with crypto, listed stock and NISA income.
#
# See jptaxcalc.md for usage instructions.
#


import argparse
import dataclasses
import json
import logging
import math
import re
import sys
import typing
import warnings

from decimal import Decimal, InvalidOperation, ROUND_FLOOR

import environ

from environ import get_version
from report import Report, TextReport, HtmlReport
from tax.jp import TaxConstants, FiscalYear, fiscal_years, lookup, r7


logger = logging.getLogger('jptaxcalc')


Number = int | float | Decimal


def to_decimal(x:Number) -> Decimal:
    if isinstance(x, Decimal):
        return x
    if isinstance(x, float):
        return Decimal(repr(x))
    return Decimal(x)


def floor(x:Decimal) -> int:
    return int(x.to_integral_value(rounding=ROUND_FLOOR))


def floor_to(x:Decimal, unit:int) -> int:
    return floor(x / unit) * unit


@dataclasses.dataclass(frozen=True)
class TaxInput:

    # 源泉徴収票
    salary_revenue: Number = 0              # 支払金額
    social_insurance_paid: Number = 0       # 社会保険料等の金額

    # Investments
    crypto_profit: Number = 0               # 暗号資産, misc income, aggregate taxation
    stock_profit: Number = 0                # 株式譲渡益, separate taxation
    stock_dividends: Number = 0             # 配当金, separate taxation

    # Deductions and status
    dependents_count: int = 0               # 扶養親族の数, excluding under 16s
    is_single: bool = True                  # Not used by any formula yet
    life_insurance_deduction: Number = 0    # 生命保険料控除額
    ideco_contribution: Number = 0          # iDeCo, 小規模企業共済等掛金控除
    nisa_capital_gains: Number = 0          # Tax exempt
    nisa_dividends: Number = 0              # Tax exempt

    @classmethod
    def from_dict(cls, mapping:typing.Mapping[str, typing.Any]) -> 'TaxInput':
        """Coerce raw form or JSON values into a TaxInput.

        Keys may be snake_case or camelCase.  Missing or empty values take the
        field defaults.  Raises ValueError for values that are not valid amounts.
        """
        names = {field.name for field in dataclasses.fields(cls)}
        kwargs:dict[str, typing.Any] = {}
        for key, value in mapping.items():
            name = snake_case(key)
            if name not in names:
                warnings.warn(f'ignoring unknown field {key!r}')
                continue
            if value is None or (isinstance(value, str) and not value.strip()):
                continue
            if name == 'is_single':
                kwargs[name] = _parse_bool(name, value)
            elif name == 'dependents_count':
                kwargs[name] = _parse_count(name, value)
            else:
                kwargs[name] = _parse_amount(name, value, allow_loss=name in loss_fields)
        return cls(**kwargs)


# Fields where a net loss can be reported.  The calculation floors them.
loss_fields = ('crypto_profit', 'stock_profit')


_camel_re = re.compile(r'(?<=[a-z0-9])(?=[A-Z])')


def snake_case(key:str) -> str:
    return _camel_re.sub('_', key.strip()).lower()


def _parse_number(name:str, value:typing.Any) -> Decimal:
    if isinstance(value, bool):
        raise ValueError(f'{name}: expected a number, got {value!r}')
    if isinstance(value, (int, Decimal)):
        d = Decimal(value)
    elif isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f'{name}: expected a finite number, got {value!r}')
        d = Decimal(repr(value))
    elif isinstance(value, str):
        s = value.strip().lstrip('¥￥').replace(',', '').replace('_', '')
        try:
            d = Decimal(s)
        except InvalidOperation:
            raise ValueError(f'{name}: expected a number, got {value!r}') from None
    else:
        raise ValueError(f'{name}: expected a number, got {value!r}')
    if not d.is_finite():
        raise ValueError(f'{name}: expected a finite number, got {value!r}')
    return d


def _parse_amount(name:str, value:typing.Any, allow_loss:bool=False) -> Number:
    d = _parse_number(name, value)
    if d < 0 and not allow_loss:
        raise ValueError(f'{name}: must not be negative, got {value!r}')
    if d == d.to_integral_value():
        return int(d)
    return d


def _parse_count(name:str, value:typing.Any) -> int:
    d = _parse_number(name, value)
    if d != d.to_integral_value():
        raise ValueError(f'{name}: must be a whole number, got {value!r}')
    if d < 0:
        raise ValueError(f'{name}: must not be negative, got {value!r}')
    return int(d)


def _parse_bool(name:str, value:typing.Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        s = value.strip().lower()
        if s in ('true', 'yes', 'on', '1'):
            return True
        if s in ('false', 'no', 'off', '0'):
            return False
    raise ValueError(f'{name}: expected a boolean, got {value!r}')


def load(stream:typing.TextIO) -> TaxInput:
    data = json.load(stream, parse_float=Decimal)
    if not isinstance(data, dict):
        raise ValueError(f'expected a JSON object, got {type(data).__name__}')
    return TaxInput.from_dict(data)


#
# Income
#


def employment_income_deduction(gross:Number, constants:TaxConstants=r7) -> Decimal:
    """給与所得控除"""
    gross = to_decimal(gross)
    rate, constant = lookup(constants.employment_income_deduction_bands, gross)
    return gross * rate + constant


def employment_income(gross:Number, constants:TaxConstants=r7) -> Decimal:
    """給与所得"""
    gross = to_decimal(gross)
    return max(gross - employment_income_deduction(gross, constants), Decimal(0))


def separate_taxable_income(stock_profit:Number, stock_dividends:Number) -> Decimal:
    # A stock loss nets against dividends, but never against aggregate income
    return max(to_decimal(stock_profit) + to_decimal(stock_dividends), Decimal(0))


#
# Deductions
#


def common_deductions(tax_input:TaxInput, constants:TaxConstants=r7) -> Decimal:
    return (
        to_decimal(tax_input.social_insurance_paid) +
        to_decimal(tax_input.life_insurance_deduction) +
        to_decimal(tax_input.ideco_contribution) +
        tax_input.dependents_count * constants.dependent_deduction
    )


def taxable_income(income:Decimal, deductions:Decimal, constants:TaxConstants=r7) -> int:
    """課税所得, truncated to the rounding unit."""
    return max(floor_to(income - deductions, constants.rounding_unit), 0)


#
# Tax
#


def progressive_tax(taxable:Number, constants:TaxConstants=r7) -> int:
    taxable = to_decimal(taxable)
    if taxable <= 0:
        return 0
    rate, subtraction = lookup(constants.income_tax_bands, taxable)
    return floor(taxable * rate - subtraction)


def marginal_rate(taxable:Number, constants:TaxConstants=r7) -> Decimal:
    rate, _ = lookup(constants.income_tax_bands, to_decimal(taxable))
    return rate


@dataclasses.dataclass(frozen=True)
class TaxResult:

    # Income
    salary_deduction: Decimal               # 給与所得控除額
    taxable_salary_income: Decimal          # 給与所得
    misc_income: Decimal                    # 雑所得
    aggregate_taxable_income: int           # 課税総所得金額, income tax
    resident_taxable_income: int            # 課税総所得金額, resident tax
    separate_taxable_income: Decimal        # 上場株式等の譲渡所得等 + 配当所得

    # National
    income_tax_aggregate: int
    income_tax_separate: int
    reconstruction_tax: int
    total_national_income_tax: int

    # Resident
    resident_tax_aggregate: int
    resident_tax_income_based: int          # 所得割
    resident_tax_per_capita: int            # 均等割
    total_resident_tax: int

    total_tax: int
    total_revenue: Decimal
    take_home: Decimal
    effective_tax_rate: float               # %

    # Insights
    marginal_rate: Decimal
    furusato_limit: int
    ideco_tax_savings: int
    nisa_tax_savings: int

    def as_dict(self) -> dict[str, typing.Any]:
        """Plain ints and floats, suitable for JSON."""
        obj:dict[str, typing.Any] = {}
        for field in dataclasses.fields(self):
            value = getattr(self, field.name)
            if isinstance(value, Decimal):
                value = int(value) if value == value.to_integral_value() else float(value)
            obj[field.name] = value
        return obj

    def write(self, report:Report, tax_input:TaxInput, fiscal_year:FiscalYear|None=None) -> None:
        title = 'Japan Tax Calculator'
        if fiscal_year is not None:
            title += f' {fiscal_year}'
        report.start(title)

        report.write_heading('Summary')
        report.write_table([
            ['Total tax',          '年間税額合計', yen(self.total_tax)],
            ['National income tax', '所得税',       yen(self.total_national_income_tax)],
            ['Resident tax',       '住民税',       yen(self.total_resident_tax)],
            ['Effective tax rate', '実効税率',     f'{self.effective_tax_rate:.1f}%'],
        ], just='llr')

        report.write_heading('Income')
        report.write_table([
            ['Salary revenue',            '支払金額',         yen(tax_input.salary_revenue)],
            ['Employment income deduction', '給与所得控除',   yen(self.salary_deduction)],
            ['Employment income',         '給与所得',         yen(self.taxable_salary_income)],
            ['Miscellaneous income',      '雑所得',           yen(self.misc_income)],
            ['Taxable income (national)', '課税所得 (所得税)', yen(self.aggregate_taxable_income)],
            ['Taxable income (resident)', '課税所得 (住民税)', yen(self.resident_taxable_income)],
            ['Separately taxed income',   '申告分離課税',     yen(self.separate_taxable_income)],
        ], just='llr')

        report.write_heading('National income tax')
        report.write_table([
            ['Aggregate',                 '総合課税',         yen(self.income_tax_aggregate)],
            ['Separate',                  '分離課税',         yen(self.income_tax_separate)],
            ['Reconstruction surtax',     '復興特別所得税',   yen(self.reconstruction_tax)],
        ], footer=['Total after credit', '定額減税後', yen(self.total_national_income_tax)], just='llr')

        report.write_heading('Resident tax')
        report.write_table([
            ['Income based',              '所得割',           yen(self.resident_tax_income_based)],
            ['Per capita',                '均等割',           yen(self.resident_tax_per_capita)],
        ], footer=['Total after credit', '定額減税後', yen(self.total_resident_tax)], just='llr')

        report.write_heading('Take home')
        report.write_table([
            ['Total revenue',             '総収入',           yen(self.total_revenue)],
            ['Tax',                       '税金合計',         yen(-self.total_tax)],
            ['Social insurance',          '社会保険料',       yen(-to_decimal(tax_input.social_insurance_paid))],
        ], footer=['Take home', '手取り額', yen(self.take_home)], just='llr')

        report.write_heading('Insights')
        report.write_table([
            ['Marginal income tax rate',  '限界税率',         f'{self.marginal_rate:.0%}'],
            ['Furusato nozei limit',      'ふるさと納税上限', yen(self.furusato_limit)],
            ['iDeCo tax savings',         'iDeCo節税額',      yen(self.ideco_tax_savings)],
            ['NISA tax savings',          'NISA非課税メリット', yen(self.nisa_tax_savings)],
        ], just='llr')

        for note in self.notes():
            report.write_paragraph(note)

        report.write_heading('About')
        report.write_paragraph('Estimates only.  Confirm exact amounts with the tax office or a tax accountant.')
        report.write_paragraph(f'Generated by jptaxcalc.py version {version}.')

        report.end()

    def notes(self) -> list[str]:
        notes = []
        if self.income_tax_aggregate > 0 and self.income_tax_separate > 0:
            notes.append(
                'Stock gains and dividends are taxed separately (申告分離課税).  '
                'Filing is normally required, but gains in a withholding tokutei account may be left out of the return.  '
                'Declaring them may raise National Health Insurance premiums.'
            )
        if self.marginal_rate >= Decimal('0.33'):
            notes.append('Your marginal income tax rate is high.  Consider iDeCo or other deductible contributions.')
        return notes


def yen(amount:Number) -> str:
    amount = to_decimal(amount)
    sign = '-' if amount < 0 else ''
    return f'{sign}¥{abs(amount):,.0f}'


def calculate(tax_input:TaxInput, constants:TaxConstants=r7) -> TaxResult:
    c = constants

    # Income aggregation
    salary_revenue = to_decimal(tax_input.salary_revenue)
    salary_deduction = employment_income_deduction(salary_revenue, c)
    salary_income = max(salary_revenue - salary_deduction, Decimal(0))

    # Misc income losses do not offset other income
    misc_income = max(to_decimal(tax_input.crypto_profit), Decimal(0))
    aggregate_income = salary_income + misc_income

    # Deductions
    common = common_deductions(tax_input, c)
    national_deductions = common + c.basic_deduction_national
    resident_deductions = common + c.basic_deduction_resident

    aggregate_taxable = taxable_income(aggregate_income, national_deductions, c)
    resident_taxable = taxable_income(aggregate_income, resident_deductions, c)
    separate_taxable = separate_taxable_income(tax_input.stock_profit, tax_input.stock_dividends)

    logger.debug('aggregate income %s, national base %d, resident base %d, separate base %s',
                 aggregate_income, aggregate_taxable, resident_taxable, separate_taxable)

    # National income tax
    income_tax_aggregate = progressive_tax(aggregate_taxable, c)
    income_tax_separate = floor(separate_taxable * c.stock_rate_national)
    base_income_tax = income_tax_aggregate + income_tax_separate
    reconstruction_tax = floor(base_income_tax * c.reconstruction_rate)
    fixed_credit_national = (1 + tax_input.dependents_count) * c.fixed_credit_national
    total_national = max(base_income_tax + reconstruction_tax - fixed_credit_national, 0)

    # Resident tax
    resident_aggregate = floor(resident_taxable * c.resident_rate)
    resident_separate = floor(separate_taxable * c.stock_rate_resident)
    resident_income_based = resident_aggregate + resident_separate
    resident_per_capita = c.resident_per_capita
    fixed_credit_resident = (1 + tax_input.dependents_count) * c.fixed_credit_resident
    total_resident = max(resident_income_based + resident_per_capita - fixed_credit_resident, 0)

    total_tax = total_national + total_resident
    assert total_tax >= 0

    # Insights
    nisa_income = to_decimal(tax_input.nisa_capital_gains) + to_decimal(tax_input.nisa_dividends)
    total_revenue = salary_revenue + misc_income + separate_taxable + nisa_income
    if total_revenue > 0:
        effective_tax_rate = float(total_tax * 100 / total_revenue)
    else:
        effective_tax_rate = 0.0
    take_home = max(total_revenue - total_tax - to_decimal(tax_input.social_insurance_paid), Decimal(0))

    rate = marginal_rate(aggregate_taxable, c)
    surtaxed_rate = rate * (1 + c.reconstruction_rate)

    ideco_tax_savings = floor(to_decimal(tax_input.ideco_contribution) * (surtaxed_rate + c.resident_rate))
    nisa_tax_savings = floor(nisa_income * c.nisa_equivalent_rate)

    # Furusato nozei limit, beyond which the donation is no longer reduced to the self-pay
    denominator = 1 - c.resident_rate - surtaxed_rate
    if resident_aggregate > 0 and denominator > 0:
        furusato = resident_aggregate * c.furusato_special_rate / denominator + c.furusato_self_pay
        furusato_limit = floor_to(furusato, c.rounding_unit)
    else:
        furusato_limit = 0
    assert furusato_limit >= 0

    logger.debug('national tax %d, resident tax %d, marginal rate %s', total_national, total_resident, rate)

    return TaxResult(
        salary_deduction = salary_deduction,
        taxable_salary_income = salary_income,
        misc_income = misc_income,
        aggregate_taxable_income = aggregate_taxable,
        resident_taxable_income = resident_taxable,
        separate_taxable_income = separate_taxable,
        income_tax_aggregate = income_tax_aggregate,
        income_tax_separate = income_tax_separate,
        reconstruction_tax = reconstruction_tax,
        total_national_income_tax = total_national,
        resident_tax_aggregate = resident_aggregate,
        resident_tax_income_based = resident_income_based,
        resident_tax_per_capita = resident_per_capita,
        total_resident_tax = total_resident,
        total_tax = total_tax,
        total_revenue = total_revenue,
        take_home = take_home,
        effective_tax_rate = effective_tax_rate,
        marginal_rate = rate,
        furusato_limit = furusato_limit,
        ideco_tax_savings = ideco_tax_savings,
        nisa_tax_savings = nisa_tax_savings,
    )


version = get_version()


def main() -> None:
    argparser = argparse.ArgumentParser(description='Estimate Japanese income and resident tax.')
    argparser.add_argument('-y', '--fiscal-year', metavar='FISCAL_YEAR', default=environ.fiscal_year, help='fiscal year in YYYY, YY, or RN (Reiwa) format')
    argparser.add_argument('--format', choices=['text', 'html', 'json'], default='text')
    argparser.add_argument('-v', '--verbose', action='store_true', help='log intermediate values')
    for field in dataclasses.fields(TaxInput):
        option = '--' + field.name.replace('_', '-')
        if field.name == 'is_single':
            argparser.add_argument('--single', dest=field.name, action=argparse.BooleanOptionalAction, default=None)
        else:
            argparser.add_argument(option, dest=field.name, metavar='AMOUNT' if field.name != 'dependents_count' else 'COUNT', default=None)
    argparser.add_argument('filename', metavar='FILENAME', nargs='?', default=None, help='JSON file with input values')
    args = argparser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(name)s %(levelname)s %(message)s',
    )

    try:
        fiscal_year = FiscalYear.from_string(args.fiscal_year)
    except ValueError as e:
        argparser.error(f'invalid fiscal year {args.fiscal_year!r}: {e}')
    try:
        constants = fiscal_years[fiscal_year]
    except KeyError:
        argparser.error(f'unsupported fiscal year {fiscal_year}')

    values:dict[str, typing.Any] = {}
    if args.filename is not None:
        try:
            with open(args.filename, 'rt', encoding='utf-8') as stream:
                values = json.load(stream, parse_float=Decimal)
        except (OSError, json.JSONDecodeError) as e:
            argparser.error(f'could not read {args.filename!r}: {e}')
        if not isinstance(values, dict):
            argparser.error(f'{args.filename!r}: expected a JSON object')
    for field in dataclasses.fields(TaxInput):
        value = getattr(args, field.name)
        if value is not None:
            values[field.name] = value

    with warnings.catch_warnings(record=True) as caught_warnings:
        warnings.simplefilter("always")
        try:
            tax_input = TaxInput.from_dict(values)
        except ValueError as e:
            argparser.error(str(e))
    for warning in caught_warnings:
        sys.stderr.write(f'warning: {warning.message}\n')

    result = calculate(tax_input, constants)

    stream = sys.stdout
    if args.format == 'json':
        json.dump(result.as_dict(), stream, indent=2, ensure_ascii=False)
        stream.write('\n')
        return

    report: Report
    if args.format == 'text':
        report = TextReport(stream)
    else:
        assert args.format == 'html'
        report = HtmlReport(stream)
    result.write(report, tax_input, fiscal_year)


if __name__ == '__main__':
    main()
