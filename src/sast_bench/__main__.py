"""Run sast-bench with ``python -m sast_bench``."""

from sast_bench.cli import cli

if __name__ == "__main__":
    cli(prog_name="sast-bench")
