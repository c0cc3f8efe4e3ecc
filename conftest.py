"""Root conftest — pre-import the workspace package.

Without this, pytest's directory traversal can register the package directory as
a namespace package before test collection, which shadows the real package
installed from waker-loop/src/. Importing it here caches the correct module in
sys.modules.
"""

import waker_loop  # noqa: F401
