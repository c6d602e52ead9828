"""Command-line entry point: run a CHIP-8 ROM headless.

Exit codes: 0 normal halt, 2 usage error, 3 load failure, 4 unimplemented
opcode, 5 stack fault, 6 memory access out of bounds, 130 interrupted.
"""

import argparse
import sys
from typing import Optional, Sequence

from chip8core.constants import INSTRUCTIONS_PER_SECOND
from chip8core.errors import LoadError
from chip8core.interpreter import Interpreter, InterpreterConfig
from chip8core.logging import ExecutionLogger

EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chip8core",
        description="Run a CHIP-8 program without a display window.",
    )
    parser.add_argument("rom", help="path to the ROM image")
    parser.add_argument("--ips", type=float, default=INSTRUCTIONS_PER_SECOND,
                        help="instructions per second, 0 for unthrottled (default: %(default)s)")
    parser.add_argument("--seed", type=int, default=0, help="seed for the RND instruction")
    parser.add_argument("--max-instructions", type=int, default=None,
                        help="stop after this many instructions")
    parser.add_argument("--skip-unknown", action="store_true",
                        help="log and skip unimplemented opcodes instead of halting")
    parser.add_argument("--trace", action="store_true", help="log every executed instruction")
    parser.add_argument("--dump-display", action="store_true",
                        help="print the display buffer when the program halts")
    parser.add_argument("--progress", action="store_true",
                        help="show a progress bar (with --max-instructions)")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config = InterpreterConfig(
        instructions_per_second=args.ips,
        on_unknown_opcode="skip" if args.skip_unknown else "halt",
        trace=args.trace,
        seed=args.seed,
    )
    logger = ExecutionLogger(log_level="DEBUG" if args.trace else args.log_level)
    interpreter = Interpreter(config, logger=logger)

    try:
        interpreter.load(args.rom)
    except LoadError as e:
        logger.log_fault(e)
        return e.exit_code

    try:
        result = interpreter.run(max_instructions=args.max_instructions, progress=args.progress)
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return EXIT_INTERRUPTED

    if args.dump_display:
        print(interpreter.display.to_text())
    return result.exit_code


if __name__ == "__main__":
    sys.exit(main())
