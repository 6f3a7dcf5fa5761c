"""Package entry point for ``python -m linereader``.

WHY: Lets users run the reader without installing the console script:
``python -m linereader big.log --head 20``.

HOW: Delegates to the CLI's main() function.
"""

from linereader.cli import main

if __name__ == "__main__":
    main()
