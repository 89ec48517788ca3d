#
# Copyright (c) 2023-2025 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#


import logging

import streamlit as st

import common


logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s %(name)s %(levelname)s %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
    force=True,
)


common.set_page_config(
    page_title="Japan Tax Calculator",
    layout="centered",
    initial_sidebar_state="expanded"
)

st.title("Japan Tax Calculator 2025")

st.markdown('''令和7年分 所得税・住民税シミュレーター (兼業投資家向け)

This site estimates the annual Japanese income tax (所得税) and resident tax (住民税) of an employee who also has:
- crypto gains, taxed with salary as miscellaneous income (雑所得);
- listed stock gains and dividends, taxed separately (申告分離課税);
- iDeCo contributions and NISA gains.

Along with the tax breakdown it shows your marginal tax rate, the estimated furusato nozei (ふるさと納税) donation limit, and the savings from iDeCo and NISA.

Data entered into the website is not stored and will not persist across page reloads.

Please read the [disclaimer](/Disclaimer) and open the calculator on the left sidebar.
''')

common.footer()
