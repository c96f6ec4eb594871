"""foundry_release_url package.

Turns a Foundry Virtual Tabletop version string into a pre-signed release
download URL, reusing a session stored in a cookie jar by a separate login
step.

Architecture:
- Cookie store (JSON file) → requests session cookie jar
- One GET against the releases endpoint with redirects disabled
- The `Location` header of the redirect is the result
"""

__all__ = ["__version__"]
__version__ = "2.0.0"
