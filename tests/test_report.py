#
# Copyright (c) 2025 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#


import io
import os.path

import pytest

from jptaxcalc import TaxInput, calculate, load, yen
from report import TextReport, HtmlReport, display_width
from tax.jp import FiscalYear


data_dir = os.path.join(os.path.dirname(__file__), 'data')


@pytest.mark.parametrize("s,width", [
    ('', 0),
    ('Tax', 3),
    ('住民税', 6),
    ('iDeCo節税額', 11),
    ('¥1,000', 6),
    ('ｱｲｳ', 3),
])
def test_display_width(s, width):
    assert display_width(s) == width


def test_text_table_alignment():
    stream = io.StringIO()
    report = TextReport(stream)
    report.write_table([
        ['Total', '年間税額合計', '¥472,710'],
        ['National', '所得税', '¥174,710'],
    ], header=['Item', '項目', 'Amount'], just='llr')
    lines = stream.getvalue().splitlines()
    assert lines[0].startswith('Item')
    assert lines[1].startswith('─')
    # Right justified amounts end on the same terminal column
    widths = {display_width(line) for line in [lines[0], lines[2], lines[3]]}
    assert len(widths) == 1


def test_text_table_footer():
    stream = io.StringIO()
    report = TextReport(stream)
    report.write_table([['a', 1], ['b', None]], footer=['Total', 1], just='lr')
    text = stream.getvalue()
    assert text.count('─') > 0
    assert text.splitlines()[-2].startswith('Total')


def test_text_heading():
    stream = io.StringIO()
    report = TextReport(stream)
    report.write_heading('Summary')
    report.write_paragraph('Hello')
    report.write_heading('Details', level=2)
    assert stream.getvalue() == 'SUMMARY\n\nHello\n\n\nDetails\n\n'


def test_html_escape():
    stream = io.StringIO()
    report = HtmlReport(stream)
    report.start('<title>')
    report.write_heading('A & B')
    report.write_table([['<x>', '¥1']], header=['k', 'v'], just='lr')
    report.end()
    html = stream.getvalue()
    assert '&lt;title&gt;' in html
    assert 'A &amp; B' in html
    assert '<td class="text-left">&lt;x&gt;</td>' in html
    assert html.rstrip().endswith('</html>')


@pytest.fixture
def example():
    with open(os.path.join(data_dir, 'example.json'), 'rt') as stream:
        tax_input = load(stream)
    return tax_input, calculate(tax_input)


def test_write_text(example):
    tax_input, result = example
    stream = io.StringIO()
    result.write(TextReport(stream), tax_input, FiscalYear(2025))
    text = stream.getvalue()
    assert 'SUMMARY' in text
    assert yen(result.total_tax) in text
    assert yen(result.furusato_limit) in text
    assert 'jptaxcalc.py version' in text


def test_write_html(example):
    tax_input, result = example
    stream = io.StringIO()
    result.write(HtmlReport(stream), tax_input, FiscalYear(2025))
    html = stream.getvalue()
    assert html.startswith('<!doctype html>')
    assert '2025 (R7)' in html
    assert yen(result.total_national_income_tax) in html
    assert '住民税' in html


def test_write_notes():
    tax_input = TaxInput(salary_revenue=30000000, stock_profit=1000000)
    result = calculate(tax_input)
    stream = io.StringIO()
    result.write(TextReport(stream), tax_input)
    text = ' '.join(stream.getvalue().split())
    for note in result.notes():
        assert ' '.join(note.split()) in text
