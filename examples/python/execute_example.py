#!/usr/bin/env python3
"""
pawn Example - Running commands and reading their results

Demonstrates the pawn execution API:
- Command execution with results
- Separate and merged stdout/stderr
- Exit codes and check=True
- Telling "could not run" apart from "the command crashed"
- Fire-and-forget background commands
- The asyncio variant
"""

import asyncio
import logging
import sys

import pawn

logger = logging.getLogger("execute_example")


def setup_logging():
    """Configure stdout logging for the example."""
    logging.basicConfig(
        level=logging.ERROR,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def example_basic():
    """Example 1: Basic command execution."""
    print("\n=== Example 1: Basic Command Execution ===")

    result = pawn.execute("ls", ["ls", "-l", "/"])
    print(result.stdout_text)

    if result.stderr:
        print(f"Stderr: {result.stderr_text}")
    print(f"Exit code: {result.exit_code}")


def example_stdout_stderr():
    """Example 2: Separate and merged stdout and stderr."""
    print("\n\n=== Example 2: Separate stdout and stderr ===")

    script = 'echo "to stdout" && echo "to stderr" >&2'
    result = pawn.execute("sh", ["sh", "-c", script])
    print(f"Exit code: {result.exit_code}")
    print(f"Stdout: '{result.stdout_text.strip()}'")
    print(f"Stderr: '{result.stderr_text.strip()}'")

    print("\nSame command with stderr merged into stdout:")
    result = pawn.execute("sh", ["sh", "-c", script], merge_stderr=True)
    print(f"Stdout: {result.stdout_text.splitlines()}")


def example_error_handling():
    """Example 3: Error handling."""
    print("\n\n=== Example 3: Error Handling ===")

    # Command that fails
    print("\nRunning command that fails:")
    result = pawn.execute("false")
    if not result.ok:
        print(f"Command failed as expected with exit code: {result.exit_code}")

    print("\nSame command with check=True:")
    try:
        pawn.execute("false", check=True)
    except pawn.ExecError as e:
        print(f"ExecError: {e}")

    print("\nCommand that does not exist:")
    try:
        pawn.execute("no-such-command-anywhere")
    except pawn.SpawnError as e:
        print(f"SpawnError: {e}")

    print("\nCommand that kills itself:")
    try:
        pawn.execute("sh", ["sh", "-c", "kill -TERM $$"])
    except pawn.ChildError as e:
        print(f"{type(e).__name__}: {e}")


def example_detached():
    """Example 4: Background command."""
    print("\n\n=== Example 4: Detached Execution ===")

    pid = pawn.execute_detached("sleep", ["sleep", "1"])
    print(f"Started sleep in the background (pid:{pid})")


async def example_async():
    """Example 5: asyncio API."""
    print("\n\n=== Example 5: Async Execution ===")

    results = await asyncio.gather(
        pawn.aio.execute("echo", ["echo", "first"]),
        pawn.aio.execute("echo", ["echo", "second"]),
    )
    for result in results:
        print(f"  {result.stdout_text.strip()} (exit code {result.exit_code})")


def main():
    """Run all examples."""
    print("pawn Examples - Running Commands")
    print("=" * 60)

    example_basic()
    example_stdout_stderr()
    example_error_handling()
    example_detached()
    asyncio.run(example_async())

    print("\n" + "=" * 60)
    print("All examples completed!")
    print("\nKey Takeaways:")
    print("  - execute() returns ExecResult with exit_code, stdout, stderr (bytes)")
    print("  - Stdout and stderr are separated unless merge_stderr=True")
    print("  - ExecutionError means pawn could not run the command")
    print("  - ChildError means the command itself crashed or failed")


if __name__ == "__main__":
    setup_logging()
    logger.info("Python logging configured; pawn logs will emit to stdout.")
    main()
