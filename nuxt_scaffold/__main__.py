"""Allow ``python -m nuxt_scaffold``."""

from nuxt_scaffold.pipeline import main

if __name__ == "__main__":
    main()
