"""Allow running the trigger flow with python -m trigger_runner."""

from trigger_runner.cli import main

if __name__ == "__main__":
    main()
