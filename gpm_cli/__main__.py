"""console script entrypoint for the gpm CLI."""


def run() -> int:
    from .main import main as cli_main

    return cli_main()


def main() -> int:
    """Console entrypoint used by the ``gpm`` script hook."""
    return run()


if __name__ == "__main__":
    raise SystemExit(run())
