"""Allow ``python -m filerouter`` to start the server."""

from filerouter.main import run

if __name__ == "__main__":
    run()
