from __future__ import annotations

# gh read operations (release list)
GH_TIMEOUT_SECONDS = 60.0

# gh release create uploads every asset before returning
GH_CREATE_TIMEOUT_SECONDS = 15 * 60.0
