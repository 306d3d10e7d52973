"""Allow ``python -m provider_scripts``."""

from provider_scripts.app import main

main()
