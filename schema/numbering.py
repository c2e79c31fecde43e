"""
schema.numbering - Employee code construction.

Format:  EMPNNNNN
         NNNNN = sequence value, zero-padded to 5 digits.  Values past
         99999 keep all their digits rather than wrapping.
"""

from __future__ import annotations

import config


def build_employee_code(seq: int) -> str:
    """Assemble a canonical employee code from a sequence value."""
    if seq < 1:
        raise ValueError(f"sequence value must be positive, got {seq}")
    return f"{config.EMPLOYEE_CODE_PREFIX}{str(seq).zfill(config.EMPLOYEE_CODE_WIDTH)}"

