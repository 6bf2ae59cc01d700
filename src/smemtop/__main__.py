"""Allow running smemtop with ``python -m smemtop``."""

from smemtop.cli import main

main()
