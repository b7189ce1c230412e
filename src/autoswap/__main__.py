"""Run with: python -m autoswap"""

from autoswap.main import main

if __name__ == "__main__":
    main()
