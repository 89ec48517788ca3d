#
# Copyright (c) 2023-2025 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#


import streamlit as st

import common


common.set_page_config(
    page_title="Disclaimer",
    layout="centered",
    initial_sidebar_state="expanded",
)

st.title('Disclaimer')

st.html("<style>.stMarkdown { text-align: justify; }</style>")

st.markdown('''
The figures shown on this site are estimates for general informational purposes only.
They follow a simplified reading of the 2025 (令和7年) rules and omit many deductions and special cases, such as the spouse deduction, medical expenses, housing loan credits, and loss carry forward.
The fixed tax reduction (定額減税) is applied per filer and per dependent as a flat credit.

THE ESTIMATES ARE NOT A TAX RETURN AND MUST NOT BE RELIED UPON FOR FILING.
Confirm exact amounts with the tax office (税務署) or a licensed tax accountant (税理士).

This site does not provide financial or tax advice. YOUR USE OF THE SITE AND YOUR RELIANCE ON ANY INFORMATION ON THE SITE IS SOLELY AT YOUR OWN RISK.
''')

common.footer()
