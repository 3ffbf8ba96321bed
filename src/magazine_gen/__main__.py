"""Allow `python -m magazine_gen`."""

from magazine_gen.cli import build

if __name__ == "__main__":
    build.main()
