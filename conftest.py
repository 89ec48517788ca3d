#
# Copyright (c) 2023-2025 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#


import os.path
import sys
import pytest


here = os.path.dirname(__file__)
sys.path.insert(0, here)


pytest.register_assert_rewrite("jptaxcalc")


def pytest_addoption(parser):
    parser.addoption("--update-expected", action="store_true", default=False, help="Rewrite expected results in tests/data")


@pytest.fixture(scope="session")
def update_expected(request):
    return request.config.getoption("--update-expected")
