# filecipher/cli.py
import os
import time
from pathlib import Path
from typing import Callable, Dict, List

from . import core
from . import crypto
from . import utils
from .session_log import SessionLog

def clear_screen() -> None:
    os.system('cls' if os.name == 'nt' else 'clear')

def run_file_operation(operation: Callable[[Path, Path, bytes], List[str]], input_path: Path, output_path: Path,
                       key: bytes, session: SessionLog, failure_label: str) -> bool:
    """Runs seal_file/open_file and records the outcome in the session log."""
    try:
        trail = operation(input_path, output_path, key)
    except crypto.CipherError as e:
        line = session.push('ERROR', f"{failure_label}: {e}")
        print(f"❌ {line}")
        return False
    session.extend('INFO', trail)
    for line in session.lines()[-len(trail):]: print(f"✅ {line}")
    return True

def _file_action(action: str, config: Dict, session: SessionLog) -> None:
    sealing = action == 'seal'
    input_path = utils.prompt_path("Input file", config.get('default_input_path', 'input.txt'))
    output_path = utils.prompt_path("Output file", config.get('default_output_path', 'encrypted.bin'))
    try:
        key = utils.read_key(config)
    except crypto.CipherError as e:
        print(f"❌ {session.push('ERROR', str(e))}")
        return
    start_time = time.time()
    if sealing:
        ok = run_file_operation(core.seal_file, input_path, output_path, key, session, "Encryption error")
    else:
        ok = run_file_operation(core.open_file, input_path, output_path, key, session, "Decryption error")
    if ok:
        print(f"\n✅ Operation finished in {utils.format_duration(time.time() - start_time)}.")
        if sealing and (checksum := utils.calculate_hash(output_path, config)):
            print(f"   └── SHA-256 Checksum: {checksum}")

def handle_file_menu(config: Dict, session: SessionLog) -> None:
    title_suffix = utils.get_title_suffix(config)
    while True:
        clear_screen(); print(f"--- Category: Files ---{title_suffix}")
        print("  [1] Encrypt file\n  [2] Decrypt file\n  [3] Show session log\n  [4] Save session log to file\n  [9] Back to main menu")
        choice = input("> ")
        if choice == '1': _file_action('seal', config, session)
        elif choice == '2': _file_action('open', config, session)
        elif choice == '3':
            print("\n--- Session Log ---")
            if not len(session): print("(empty)")
            for line in session.lines(): print(line)
        elif choice == '4':
            log_path = Path(config.get('log_file', 'input.log'))
            try:
                session.save(log_path)
                print(f"✅ Logs saved to '{log_path}'.")
            except crypto.IoFailure as e:
                print(f"❌ {e}")
        elif choice == '9': break
        else: print("Invalid selection.")
        input("\nPress Enter to continue...")

def handle_config_menu(config: Dict, config_path: Path = Path('config.ini')) -> None:
    title_suffix = utils.get_title_suffix(config)
    clear_screen(); print(f"--- Current Configuration ({config_path.name}) ---{title_suffix}")
    try:
        print(config_path.read_text(encoding='utf-8'))
    except FileNotFoundError:
        print(f"❌ '{config_path}' not found."); input("\nPress Enter..."); return
    print("-" * 45)
    if input("Press 'e' to edit, or any other key to return: ").lower() == 'e':
        utils.open_file_in_editor(config_path)
        input("\nPress Enter to continue...")

def handle_debug_menu(config: Dict) -> None:
    title_suffix = utils.get_title_suffix(config)
    debug = utils.is_debug(config)
    while True:
        clear_screen()
        print(f"--- Category: Debug/Analysis Tools ---{title_suffix}")
        print("  [1] Read metadata from encrypted file")
        print("  [2] Verify file checksum (SHA256/512)")
        if debug:
            print("  [3] Run self test")
        print("  [9] Back to main menu")
        choice = input("> ")

        if choice == '1':
            path = Path(input("Path to encrypted file: "))
            try:
                core.print_container_metadata(core.read_container_metadata(path))
            except crypto.CipherError as e:
                print(f"❌ {e}")
        elif choice == '2':
            path = Path(input("Path to file to verify: "))
            if not path.is_file(): print("❌ Invalid file path.")
            else:
                algo_choice = input("Select algorithm [1] SHA-256 (default), [2] SHA-512: ")
                algorithm = 'sha512' if algo_choice == '2' else 'sha256'
                expected_hash = input(f"Paste the expected {algorithm.upper()} hash: ").lower().strip()
                if not expected_hash: print("❌ No hash provided.")
                else:
                    print(f"Calculating {algorithm.upper()} hash for '{path.name}'...")
                    if calculated_hash := utils.calculate_hash(path, config, algorithm):
                        print(f"  > Calculated: {calculated_hash}\n  > Expected:   {expected_hash}")
                        if calculated_hash == expected_hash: print("\n✅ Match! The file is not corrupted.")
                        else: print("\n❌ MISMATCH! The file may be corrupted or has been altered.")
        elif choice == '3' and debug:
            if input("The self test writes random files to './self_test'. Proceed? [y/N]: ").lower() in ['y', 'yes']:
                start_time = time.time()
                passed = core.run_self_test(config)
                print(f"\n{'✅ Self test: PASSED' if passed else '❌ Self test: FAILED'} "
                      f"({utils.format_duration(time.time() - start_time)})")
        elif choice == '9': break
        else: print("Invalid selection.")
        input("\nPress Enter to continue...")
