# Balance Trends - Balance aggregation engine for financial dashboards
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Error types for Balance Trends.

Only programming errors are modelled as exceptions. "Report not loaded yet"
and "report has no buckets" are ordinary result values returned by
``aggregation.build_dataset`` (see ``PENDING`` and ``NO_DATA``).
"""


class InvalidArgumentError(ValueError):
    """Raised for inputs that can only come from a programming mistake.

    Examples: an unknown account type tag, a malformed bucket key, an
    unsupported granularity or accumulation mode, an empty or duplicated
    account type selection.

    It subclasses ``ValueError`` so that callers catching ``ValueError``
    (like the CLI) keep working.
    """
