"""Run demo-service: ``python -m demo_service``."""

from demo_service.main import run


if __name__ == "__main__":
    run()
