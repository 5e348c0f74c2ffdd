"""Root pytest configuration for all tests.

This conftest applies to all test types (unit, integration).
"""

import logging

# Suppress noisy ERROR logs from atlassian-python-api for expected HTTP
# failures raised by the error translation tests.
logging.getLogger("atlassian").setLevel(logging.WARNING)
