"""
tppctl - command-line client for the platform's vedsdk configuration API.

Lists the Generic Credential objects under the policy tree and edits the
YAML configuration embedded in one of them with a local text editor.

Commands:
    - ls: print the path of every Generic Credential, one per line
    - edit <name>: retrieve a credential, open its configuration in $EDITOR,
      and push the result back

Required environment:
    - TPP_URL: base URL of the platform
    - TOKEN: bearer token
"""

__version__ = "0.0.1"

from tppctl.config.settings import Settings, load_config

__all__ = [
    "__version__",
    "Settings",
    "load_config",
]
