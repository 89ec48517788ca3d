#
# SPDX-License-Identifier: AGPL-3.0-or-later
#


import os
import os.path
import subprocess


production: bool = int(os.environ.get('PRODUCTION', '0')) != 0


# Default fiscal year, in any of the forms tax.jp.FiscalYear.from_string accepts.
fiscal_year: str = os.environ.get('JPTAX_FISCAL_YEAR', '2025')


def get_version() -> str:
    try:
        version = subprocess.check_output([
            'git',
                '-C', os.path.dirname(os.path.abspath(__file__)),
            'show',
                '-s',
                '--date=format:%Y-%m-%d',
                '--format=%h (%cd)',
                'HEAD',
        ], text=True, stderr=subprocess.DEVNULL)
    except (FileNotFoundError, subprocess.CalledProcessError):
        # Not a git checkout, as when installed from a wheel
        version = 'unknown'
    else:
        version = version.rstrip()
    return version
