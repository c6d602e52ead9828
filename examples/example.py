import threading
import time

from chip8core import Interpreter, InterpreterConfig, disassemble
from chip8core.logging import ExecutionLogger

# Waits for a key, then draws its hex digit and beeps.
PROGRAM = [
    0xF00A,  # LD V0, K
    0xF029,  # LD F, V0
    0x6A1C,  # LD VA, 0x1C
    0x6B0D,  # LD VB, 0x0D
    0xDAB5,  # DRW VA, VB, 5
    0x6110,  # LD V1, 0x10
    0xF118,  # LD ST, V1
    0x120E,  # JP 0x20E
]

if __name__ == "__main__":
    rom = b"".join(word.to_bytes(2, "big") for word in PROGRAM)
    for address, word in enumerate(PROGRAM):
        print(f"0x{0x200 + 2 * address:03X}  {disassemble(word)}")

    interpreter = Interpreter(
        InterpreterConfig(instructions_per_second=500, key_poll_interval=0.01),
        logger=ExecutionLogger(log_level="DEBUG"),
    )
    interpreter.load_bytes(rom)

    # A frontend would forward real key events here
    def press_key():
        time.sleep(0.5)
        interpreter.keypad.press(0xA)

    threading.Thread(target=press_key, daemon=True).start()

    start = time.time()
    result = interpreter.run(max_instructions=1000)
    print("Halt reason:", result.reason.value)
    print("Execution time (s):", time.time() - start)
    print("Buzzer transitions:", interpreter.buzzer.transitions)
    print(interpreter.display.to_text())
