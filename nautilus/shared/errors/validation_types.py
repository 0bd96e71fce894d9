# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from enum import Enum


class ValidationErrorType(str, Enum):
    MISSING = "missing"
    NOTHING_TO_UPDATE = "nothing_to_update"
