#
# Copyright (c) 2025 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#


import datetime
import io
import logging

import streamlit as st
import pandas as pd

import common
import environ

from jptaxcalc import TaxInput, calculate, yen
from report import HtmlReport, TextReport
from tax.jp import FiscalYear, fiscal_years


common.set_page_config(
    page_title="Tax Calculator",
    layout="wide",
)

st.title('Japan Tax Calculator')


logger = logging.getLogger('app')


#
# State
#

default_state = {
    "salary_revenue": 6000000,
    "social_insurance_paid": 900000,
    "crypto_profit": 0,
    "stock_profit": 0,
    "stock_dividends": 0,
    "dependents_count": 0,
    "is_single": True,
    "life_insurance_deduction": 0,
    "ideco_contribution": 0,
    "nisa_capital_gains": 0,
    "nisa_dividends": 0,
}

for key, value in default_state.items():
    st.session_state.setdefault(key, value)


#
# Parameters
#

with st.sidebar:
    st.header("Parameters")

    options = sorted(fiscal_years)
    try:
        default_fiscal_year = FiscalYear.from_string(environ.fiscal_year)
    except ValueError:
        default_fiscal_year = options[-1]
    if default_fiscal_year not in fiscal_years:
        st.warning(f"Fiscal year {default_fiscal_year} is not supported; using {options[-1]}.", icon="⚠️")
        default_fiscal_year = options[-1]
    fiscal_year = st.selectbox('Fiscal year', options, index=options.index(default_fiscal_year), format_func=str, key="fiscal_year")

constants = fiscal_years[fiscal_year]


#
# Inputs
#

st.header('Inputs')

st.markdown('Enter the figures from your 源泉徴収票 (withholding slip) and brokerage statements.')

amount = dict(min_value=0, step=10000, format='%d')

tab_salary, tab_invest, tab_other = st.tabs(["Salary & deductions (給与・控除)", "Investments (投資・副業)", "Other (その他)"])

with tab_salary:
    col1, col2 = st.columns(2)
    with col1:
        st.number_input("Salary revenue (支払金額)", key="salary_revenue", help="「支払金額」 on the withholding slip.", **amount)
    with col2:
        st.number_input("Social insurance (社会保険料等の金額)", key="social_insurance_paid", help="「社会保険料等の金額」 on the withholding slip.", **amount)

with tab_invest:
    st.info("Crypto losses cannot offset salary income, and count as zero.", icon="ℹ️")

    st.subheader("Crypto (総合課税・雑所得)")
    st.number_input("Profit (売却益 - 原価 - 経費)", key="crypto_profit", step=10000, format='%d')

    st.subheader("Tokutei account (申告分離課税)")
    col1, col2 = st.columns(2)
    with col1:
        st.number_input("Capital gains (譲渡益)", key="stock_profit", step=10000, format='%d', help="A net loss offsets dividends.")
    with col2:
        st.number_input("Dividends before tax (配当金)", key="stock_dividends", **amount)

    st.subheader("NISA (非課税)")
    st.caption("Tax exempt.  Only used to estimate the savings versus a taxable account.")
    col1, col2 = st.columns(2)
    with col1:
        st.number_input("NISA capital gains (譲渡益)", key="nisa_capital_gains", **amount)
    with col2:
        st.number_input("NISA dividends (配当金)", key="nisa_dividends", **amount)

with tab_other:
    col1, col2 = st.columns(2)
    with col1:
        st.number_input("Dependents (扶養親族の数)", key="dependents_count", min_value=0, max_value=20, step=1, help="Including a dependent spouse, excluding children under 16.")
    with col2:
        st.number_input("Life insurance deduction (生命保険料控除額)", key="life_insurance_deduction", help="The deduction total from the certificates, not the premiums paid.", **amount)

    st.subheader("iDeCo (個人型確定拠出年金)")
    st.number_input("Annual contribution (小規模企業共済等掛金控除)", key="ideco_contribution", help="Fully deductible.", **amount)


#
# Calculation
#

tax_input = TaxInput.from_dict({key: st.session_state[key] for key in default_state})
result = calculate(tax_input, constants)

logger.debug('%s: total tax %d', fiscal_year, result.total_tax)


#
# Output
#

st.divider()
st.header('Results')

st.caption('Estimates only.  Confirm exact amounts with the tax office or a tax accountant.')

col1, col2, col3 = st.columns(3)
with col1:
    st.metric("Total tax (年間税額合計)", yen(result.total_tax))
    st.caption(f"Effective tax rate: {result.effective_tax_rate:.1f}%")
with col2:
    st.metric("Income tax (所得税)", yen(result.total_national_income_tax))
    st.caption("Including the reconstruction surtax.")
with col3:
    st.metric("Resident tax (住民税)", yen(result.total_resident_tax))
    st.caption("Per capita plus income based.")

col1, col2 = st.columns(2)

with col1:
    st.subheader("Furusato nozei limit (ふるさと納税 上限額目安)")
    st.metric("Limit", yen(result.furusato_limit), label_visibility="collapsed")
    st.caption("Approximate donation limit for a ¥2,000 self-pay.")

    if result.ideco_tax_savings > 0 or result.nisa_tax_savings > 0:
        st.subheader("Estimated savings (節税効果)")
        rows = []
        if result.ideco_tax_savings > 0:
            rows.append(("iDeCo (節税額)", yen(result.ideco_tax_savings)))
        if result.nisa_tax_savings > 0:
            rows.append(("NISA (非課税メリット)", yen(result.nisa_tax_savings)))
        rows.append(("Total (合計節税額)", yen(result.ideco_tax_savings + result.nisa_tax_savings)))
        st.table(pd.DataFrame(rows, columns=["Item", "Amount"]).set_index("Item"))

    st.subheader("Take home (手取りシミュレーション)")
    rows = [
        ("Total revenue (総収入)", yen(result.total_revenue)),
        ("Tax (税金合計)", yen(-result.total_tax)),
        ("Social insurance (社会保険料)", yen(-tax_input.social_insurance_paid)),
        ("Take home (手取り額)", yen(result.take_home)),
    ]
    st.table(pd.DataFrame(rows, columns=["Item", "Amount"]).set_index("Item"))

with col2:
    import altair as alt

    st.subheader("Breakdown (収支の内訳)")

    # https://altair-viz.github.io/gallery/donut_chart.html
    domain = ["Take home", "Social insurance", "Tax"]
    source = pd.DataFrame({
        "Item": domain,
        "Value": [float(result.take_home), float(tax_input.social_insurance_paid), float(result.total_tax)],
    })
    chart = alt.Chart(source).mark_arc(innerRadius=60).encode(
        theta=alt.Theta(field="Value", type="quantitative"),
        color=alt.Color(field="Item", type="nominal", scale=alt.Scale(domain=domain, range=["#10b981", "#3b82f6", "#ef4444"]), legend=alt.Legend(orient="bottom")),
        tooltip=[alt.Tooltip("Item:N"), alt.Tooltip("Value:Q", format=",.0f")],
    )
    st.altair_chart(chart, use_container_width=True)

    st.metric("Marginal income tax rate (限界税率)", f"{result.marginal_rate:.0%}")
    st.caption("The highest rate applied to your aggregate taxable income.")

for note in result.notes():
    st.warning(note, icon="⚠️")


#
# Report
#

with st.expander("Details..."):
    text = io.StringIO()
    result.write(TextReport(text), tax_input, fiscal_year)
    st.markdown('```\n' + text.getvalue() + '```\n')

html = io.StringIO()
result.write(HtmlReport(html), tax_input, fiscal_year)
timestamp = datetime.datetime.now(datetime.timezone.utc).isoformat(sep='-', timespec='seconds')
st.download_button("Download report", html.getvalue(), file_name=f"jptaxcalc-{timestamp}.html", mime="text/html", help="Download HTML report.")


common.footer()
