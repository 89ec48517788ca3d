#
# Copyright (c) 2024-2025 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#


import streamlit as st

import environ


# https://docs.streamlit.io/library/api-reference/utilities/st.set_page_config
def set_page_config(page_title, page_icon=":material/calculate:", layout="centered", initial_sidebar_state="auto"):
    st.set_page_config(
        page_title=page_title,
        page_icon=page_icon,
        layout=layout,
        initial_sidebar_state=initial_sidebar_state,
        menu_items={
            "About": """Japan income and resident tax calculator (令和7年分).

Estimates only.  Confirm exact amounts with the tax office or a tax accountant.

Copyright (c) 2025 LateGenXer.
""",
        }
    )


def footer():
    # An invisible test marker, used when testing to ensure a page ran till the end
    st.html('<span id="test-marker" style="display:none"></span>')

    if not environ.production:
        st.caption(f'Version {environ.get_version()}')
