"""Allow ``python -m depend``."""

from depend.main import main

main()
