"""Main entry point for the task tracker (installed as ``task-cli``)."""
from cli import task_cli


def main():
    task_cli(prog_name='task-cli')

if __name__ == "__main__":
    main()
