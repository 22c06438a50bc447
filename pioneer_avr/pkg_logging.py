# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Package-wide logger. Applications configure handlers; this package only emits.
"""

from __future__ import annotations

import logging

logger = logging.getLogger('pioneer_avr')
