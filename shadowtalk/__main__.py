"""Package entry point for ``python -m shadowtalk``.

WHY: Users run the tool as ``python -m shadowtalk segment captions.xml``
or ``python -m shadowtalk score "reference" "spoken"`` without installing
the console script.

HOW: Delegates straight to the CLI's main() function.
"""

from shadowtalk.cli import main

if __name__ == "__main__":
    main()
